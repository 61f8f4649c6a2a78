"""Horizontal colour gradient for rib caps."""
from __future__ import annotations

import numpy as np
from matplotlib import colors as mcolors


def to_rgb(color) -> np.ndarray:
    """Parse any matplotlib colour format ('#ff4488', '#f48', 'tab:blue', ...) to RGB floats."""
    return np.asarray(mcolors.to_rgb(color), dtype=np.float64)


def warp_gradient(t, center: float = 0.5) -> np.ndarray:
    """
    Piecewise-linear warp so that ``center`` maps to 0.5:
    [0, center] -> [0, 0.5] and [center, 1] -> [0.5, 1]. Result is clamped to [0, 1].
    """
    t = np.asarray(t, dtype=np.float64)
    gc = float(center)
    if gc != 0.5:
        lo = (t / gc) * 0.5 if gc > 0.0 else np.zeros_like(t)
        hi = 0.5 + ((t - gc) / (1.0 - gc)) * 0.5 if gc < 1.0 else np.ones_like(t)
        t = np.where(t < gc, lo, hi)
    return np.clip(t, 0.0, 1.0)


def gradient_factors(x, min_x: float, width: float, center: float = 0.5) -> np.ndarray:
    """Normalize x against [min_x, min_x + width] (0.5 for zero width) and warp."""
    x = np.asarray(x, dtype=np.float64)
    if width > 0.0:
        t = (x - min_x) / width
    else:
        t = np.full_like(x, 0.5)
    return warp_gradient(t, center)


def gradient_colors(x, min_x: float, width: float, color_start, color_end, center: float = 0.5) -> np.ndarray:
    """Per-point RGB (len(x), 3) linearly interpolated between the two colours."""
    t = gradient_factors(x, min_x, width, center)[..., None]
    c0 = to_rgb(color_start)
    c1 = to_rgb(color_end)
    return c0 + (c1 - c0) * t


def interpolate_color(color_start, color_end, factor: float) -> str:
    """Blend two colours and return a hex string; factor is clamped to [0, 1]."""
    if factor <= 0.0:
        return mcolors.to_hex(color_start)
    if factor >= 1.0:
        return mcolors.to_hex(color_end)
    c0 = to_rgb(color_start)
    c1 = to_rgb(color_end)
    return mcolors.to_hex(c0 + (c1 - c0) * float(factor))
