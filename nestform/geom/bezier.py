"""
Cubic Bézier evaluation in Bernstein form.

For control points (p1, c1, c2, p2) and t ∈ [0,1]:
    B(t)  = (1-t)^3 p1 + 3(1-t)^2 t c1 + 3(1-t) t^2 c2 + t^3 p2
    B'(t) = 3(1-t)^2 (c1-p1) + 6(1-t) t (c2-c1) + 3 t^2 (p2-c2)

All helpers accept a single segment (4,2) or a stack of segments (N,4,2) and
scalar or 1D t, and broadcast accordingly.
"""
from __future__ import annotations

import numpy as np

from ..models import Curve


def _split(ctrl: np.ndarray):
    ctrl = np.asarray(ctrl, dtype=np.float64)
    return ctrl[..., 0, :], ctrl[..., 1, :], ctrl[..., 2, :], ctrl[..., 3, :]


def bezier_point(ctrl: np.ndarray, t) -> np.ndarray:
    """
    Evaluate B(t). Shapes: ctrl (...,4,2), t scalar -> (...,2); t (T,) -> (...,T,2).
    """
    p1, c1, c2, p2 = _split(ctrl)
    tt = np.asarray(t, dtype=np.float64)
    if tt.ndim == 0:
        it = 1.0 - tt
        return it**3 * p1 + 3.0 * it**2 * tt * c1 + 3.0 * it * tt**2 * c2 + tt**3 * p2
    tt = tt[:, None]
    it = 1.0 - tt
    p1, c1, c2, p2 = (p[..., None, :] for p in (p1, c1, c2, p2))
    return it**3 * p1 + 3.0 * it**2 * tt * c1 + 3.0 * it * tt**2 * c2 + tt**3 * p2


def bezier_derivative(ctrl: np.ndarray, t) -> np.ndarray:
    """Evaluate B'(t) with the same shape rules as :func:`bezier_point`."""
    p1, c1, c2, p2 = _split(ctrl)
    tt = np.asarray(t, dtype=np.float64)
    if tt.ndim == 0:
        it = 1.0 - tt
        return 3.0 * it**2 * (c1 - p1) + 6.0 * it * tt * (c2 - c1) + 3.0 * tt**2 * (p2 - c2)
    tt = tt[:, None]
    it = 1.0 - tt
    p1, c1, c2, p2 = (p[..., None, :] for p in (p1, c1, c2, p2))
    return 3.0 * it**2 * (c1 - p1) + 6.0 * it * tt * (c2 - c1) + 3.0 * tt**2 * (p2 - c2)


def flatten_curve(curve: Curve, samples_per_segment: int = 16) -> np.ndarray:
    """
    Sample a closed curve into a ring of (N * samples_per_segment, 2) points.
    Each segment contributes t = 0, 1/n, ..., (n-1)/n so joins are not duplicated.
    """
    if curve.is_empty:
        return np.zeros((0, 2), dtype=np.float64)
    n = int(max(samples_per_segment, 1))
    ts = np.arange(n, dtype=np.float64) / float(n)
    pts = bezier_point(curve.control, ts)   # (N, n, 2)
    return pts.reshape(-1, 2)
