"""
Closed Catmull-Rom spline through a control polygon, emitted as cubic Béziers.

For a segment P_i -> P_{i+1} with cyclic neighbours P_{i-1}, P_{i+2}:
    T1 = (P_{i+1} - P_{i-1}) * 0.5          # Catmull-Rom tangent at P_i
    T2 = (P_{i+2} - P_i) * 0.5              # Catmull-Rom tangent at P_{i+1}
    C1 = P_i + T1 / 3
    C2 = P_{i+1} - T2 / 3
Uniform parameterization, fixed canonical tension.
"""
from __future__ import annotations

import numpy as np

from ..models import Curve


def build_spline(points) -> Curve:
    """
    Convert a cyclic (N,2) control polygon into a closed Curve of N segments.

    Fewer than 3 points returns an empty Curve (nothing to render).
    """
    P = np.asarray(points, dtype=np.float64)
    if P.size == 0:
        return Curve()
    if P.ndim != 2 or P.shape[1] != 2:
        raise ValueError(f"build_spline expects points of shape (N,2), got {P.shape}.")
    n = P.shape[0]
    if n < 3:
        return Curve()

    P0 = np.roll(P, 1, axis=0)     # P_{i-1}
    P2 = np.roll(P, -1, axis=0)    # P_{i+1}
    P3 = np.roll(P, -2, axis=0)    # P_{i+2}

    T1 = (P2 - P0) * 0.5
    T2 = (P3 - P) * 0.5
    C1 = P + T1 / 3.0
    C2 = P2 - T2 / 3.0

    control = np.stack([P, C1, C2, P2], axis=1)   # (N, 4, 2)
    return Curve(control=control)
