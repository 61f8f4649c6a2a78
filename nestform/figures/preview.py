from __future__ import annotations

import os
from typing import Optional, Sequence

import matplotlib

matplotlib.use("Agg", force=True)
matplotlib.rcParams["figure.facecolor"] = "white"
matplotlib.rcParams["savefig.facecolor"] = "white"
matplotlib.rcParams["svg.fonttype"] = "none"

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection

from ..models import Curve, LayerConfig
from ..geom.bbox import curve_bounds, nests_bounds
from ..geom.bezier import flatten_curve
from ..layers.gradient import gradient_colors


def _closed_segments(ring: np.ndarray) -> np.ndarray:
    """(M,2) ring -> (M,2,2) line pieces including the closing piece."""
    return np.stack([ring, np.roll(ring, -1, axis=0)], axis=1)


def render_preview(
    nests: Sequence[Curve],
    out_path: str,
    config: Optional[LayerConfig] = None,
    convergence=None,
    points=None,
    samples_per_segment: int = 32,
    dpi: int = 150,
) -> str:
    """
    Draw every nest as an unfilled path whose stroke runs from ``color_start`` on
    the left of its own bounding box to ``color_end`` on the right. Control
    handles and the convergence cross are drawn when given. The y axis points
    down like the editor. Returns the written path.
    """
    if config is None:
        config = LayerConfig()

    fig, ax = plt.subplots(figsize=(7.0, 7.0), dpi=dpi)
    for nest in nests:
        ring = flatten_curve(nest, samples_per_segment)
        if ring.shape[0] < 2:
            continue
        pieces = _closed_segments(ring)
        mid_x = pieces[:, :, 0].mean(axis=1)
        lo, hi = curve_bounds(nest)
        rgb = gradient_colors(mid_x, lo[0], float(hi[0] - lo[0]), config.color_start, config.color_end, config.gradient_center)
        ax.add_collection(LineCollection(pieces, colors=rgb, linewidths=1.5, capstyle="round"))

    if points is not None:
        P = np.asarray(points, dtype=float).reshape(-1, 2)
        ax.scatter(P[:, 0], P[:, 1], s=36, facecolor="#ffffff", edgecolor="#00000080", linewidths=0.8, zorder=3)
    if convergence is not None:
        cx, cy = np.asarray(convergence, dtype=float).reshape(2)
        ax.plot([cx - 0.2, cx + 0.2], [cy, cy], color="#ff5555", linewidth=1.5, zorder=4)
        ax.plot([cx, cx], [cy - 0.2, cy + 0.2], color="#ff5555", linewidth=1.5, zorder=4)

    bounds = nests_bounds(nests)
    if bounds is not None:
        (x0, y0), (x1, y1) = bounds
        pad = 0.5
        ax.set_xlim(x0 - pad, x1 + pad)
        ax.set_ylim(y1 + pad, y0 - pad)
    else:
        ax.invert_yaxis()
    ax.set_aspect("equal")
    ax.set_xlabel("x (in)")
    ax.set_ylabel("y (in)")
    ax.set_title(f"{len(nests)} nests")
    ax.grid(True, color="#e6e6e6", linewidth=0.5)

    extension = os.path.splitext(out_path)[1].lower()
    if extension not in {".png", ".pdf", ".svg"}:
        out_path = f"{out_path}.png"

    fig.savefig(out_path, dpi=dpi, facecolor="white", bbox_inches="tight")
    plt.close(fig)
    return out_path
