from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from ..models import Curve
from ..geom.bbox import nests_bounds


def _fmt(v: float) -> str:
    s = f"{float(v):.4f}"
    if s == "-0.0000":
        s = "0.0000"
    return s


def path_to_svg_d(curve: Curve) -> str:
    """
    SVG path data for a closed curve: ``M x y`` then one
    ``C c1x c1y, c2x c2y, p2x p2y`` per segment, closed with ``Z``.
    Empty curves give an empty string.
    """
    if curve.is_empty:
        return ""
    x0, y0 = curve.control[0, 0]
    parts = [f"M {_fmt(x0)} {_fmt(y0)}"]
    for _, c1, c2, p2 in curve.control:
        parts.append(
            f"C {_fmt(c1[0])} {_fmt(c1[1])}, {_fmt(c2[0])} {_fmt(c2[1])}, {_fmt(p2[0])} {_fmt(p2[1])}"
        )
    parts.append("Z")
    return " ".join(parts)


def export_svg(nests: Sequence[Curve], padding: float = 0.5, stroke_width: float = 0.01) -> str:
    """
    Standalone SVG document sized in inches, one unfilled stroked path per nest.
    The viewBox is the padded control-hull box over every nest.
    """
    bounds = nests_bounds(nests)
    if bounds is None:
        min_x = min_y = max_x = max_y = 0.0
    else:
        (min_x, min_y), (max_x, max_y) = bounds
    pad = float(padding)
    min_x -= pad
    min_y -= pad
    max_x += pad
    max_y += pad
    width = max_x - min_x
    height = max_y - min_y

    lines: List[str] = [
        '<?xml version="1.0" encoding="UTF-8" standalone="no"?>',
        f'<svg width="{_fmt(width)}in" height="{_fmt(height)}in" '
        f'viewBox="{_fmt(min_x)} {_fmt(min_y)} {_fmt(width)} {_fmt(height)}" '
        'xmlns="http://www.w3.org/2000/svg">',
        "  <style>",
        f"    path {{ vector-effect: non-scaling-stroke; stroke-width: {stroke_width}in; fill: none; stroke: black; }}",
        "  </style>",
    ]
    for nest in nests:
        if nest.is_empty:
            continue
        lines.append(f'  <path d="{path_to_svg_d(nest)}" />')
    lines.append("</svg>")
    return "\n".join(lines)


def save_svg(nests: Sequence[Curve], path: str | Path, **kwargs) -> None:
    """Write :func:`export_svg` output to ``path``."""
    path = Path(path)
    if path.parent and path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_svg(nests, **kwargs), encoding="utf-8")


__all__ = ["path_to_svg_d", "export_svg", "save_svg"]
