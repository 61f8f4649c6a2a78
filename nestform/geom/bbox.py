"""
Axis-aligned size estimates from the Bézier control hull.

Every cubic segment lies inside the convex hull of its four points, so the box
over all start/control/end points never underestimates the true curve extent.
Nest termination relies on this: a curve is only declared smaller than the
threshold once its hull is.
"""
from __future__ import annotations

from typing import Iterable, Optional, Tuple
import numpy as np

from ..models import Curve


def curve_bounds(curve: Curve) -> Tuple[np.ndarray, np.ndarray]:
    """Return (min_xy, max_xy) over all control points; zeros for an empty curve."""
    if curve.is_empty:
        zero = np.zeros(2, dtype=np.float64)
        return zero, zero.copy()
    pts = curve.points()
    return pts.min(axis=0), pts.max(axis=0)


def curve_bbox(curve: Curve) -> Tuple[float, float]:
    """Width and height of the control-hull box."""
    lo, hi = curve_bounds(curve)
    w, h = hi - lo
    return float(w), float(h)


def nests_bounds(nests: Iterable[Curve]) -> Optional[Tuple[np.ndarray, np.ndarray]]:
    """Joint (min_xy, max_xy) over every non-empty curve, or None if there is none."""
    pts = [c.points() for c in nests if not c.is_empty]
    if not pts:
        return None
    allp = np.vstack(pts)
    return allp.min(axis=0), allp.max(axis=0)
