"""
Control polygon edits used by the outline editor.

All functions are pure: they return a new (N,2) array and leave the input
untouched. The polygon is cyclic, so edge i joins P_i and P_{(i+1) mod N}.
"""
from __future__ import annotations

import numpy as np

MIN_POINTS = 3


def _as_points(points) -> np.ndarray:
    P = np.array(points, dtype=np.float64)
    if P.size == 0:
        return P.reshape(0, 2)
    if P.ndim != 2 or P.shape[1] != 2:
        raise ValueError(f"Expected points of shape (N,2), got {P.shape}.")
    return P


def dist_to_segment(p, a, b) -> float:
    """Distance from p to the closed segment [a, b]."""
    p = np.asarray(p, dtype=np.float64)
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    ab = b - a
    l2 = float(ab @ ab)
    if l2 == 0.0:
        return float(np.linalg.norm(p - a))
    t = float(np.clip(((p - a) @ ab) / l2, 0.0, 1.0))
    return float(np.linalg.norm(p - (a + t * ab)))


def insert_point(points, p) -> np.ndarray:
    """
    Add p to the polygon. With fewer than three points it is appended; otherwise
    it goes right after P_i for the nearest edge (P_i, P_{i+1}), first edge on ties.
    """
    P = _as_points(points)
    p = np.asarray(p, dtype=np.float64).reshape(1, 2)
    n = P.shape[0]
    if n < MIN_POINTS:
        return np.vstack([P, p])
    d = [dist_to_segment(p[0], P[i], P[(i + 1) % n]) for i in range(n)]
    idx = int(np.argmin(d)) + 1
    return np.insert(P, idx, p[0], axis=0)


def move_point(points, index: int, p) -> np.ndarray:
    """Replace P_index with p; an out-of-range index leaves the polygon unchanged."""
    P = _as_points(points)
    if 0 <= index < P.shape[0]:
        P[index] = np.asarray(p, dtype=np.float64).reshape(2)
    return P


def delete_point(points, index: int) -> np.ndarray:
    """Remove P_index while more than three points remain; otherwise unchanged."""
    P = _as_points(points)
    if P.shape[0] > MIN_POINTS and 0 <= index < P.shape[0]:
        return np.delete(P, index, axis=0)
    return P
