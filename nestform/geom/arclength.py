"""
Arc-length parameterization of a closed Bézier curve.

A normalized position s is wrapped into [0,1) and mapped to a target length
s * L along the curve, where L is the sum of per-segment chord approximations
(20 uniform parameter steps each). The containing segment is the first whose
inclusive cumulative length reaches the target; inside it a finer 40-step walk
brackets the residual length and the local parameter t is linearly
interpolated between the bracketing steps.
"""
from __future__ import annotations

from typing import Optional
import numpy as np

from ..models import Curve, PathSample
from .bezier import bezier_point, bezier_derivative

COARSE_STEPS = 20
FINE_STEPS = 40


def _normalize(v: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    n = float(np.linalg.norm(v))
    if n < eps:
        return np.zeros_like(v)
    return v / n


def wrap_unit(s: float) -> float:
    """Wrap any real s into [0,1): s -> ((s mod 1) + 1) mod 1."""
    s = float(s)
    return ((s % 1.0) + 1.0) % 1.0


def segment_lengths(curve: Curve, steps: int = COARSE_STEPS) -> np.ndarray:
    """Chord-sum length of each segment over ``steps`` uniform parameter steps, shape (N,)."""
    if curve.is_empty:
        return np.zeros(0, dtype=np.float64)
    ts = np.linspace(0.0, 1.0, int(steps) + 1, dtype=np.float64)
    pts = bezier_point(curve.control, ts)                          # (N, steps+1, 2)
    return np.linalg.norm(np.diff(pts, axis=1), axis=2).sum(axis=1)


def curve_length(curve: Curve, steps: int = COARSE_STEPS) -> float:
    return float(np.sum(segment_lengths(curve, steps=steps)))


def _local_parameter(ctrl: np.ndarray, target: float, steps: int = FINE_STEPS) -> float:
    """
    Walk ``steps`` chords of one segment until ``target`` length is reached and
    interpolate t between the bracketing steps. Returns 0 if never reached.
    """
    ts = np.linspace(0.0, 1.0, int(steps) + 1, dtype=np.float64)
    pts = bezier_point(ctrl, ts)                                   # (steps+1, 2)
    step_len = np.linalg.norm(np.diff(pts, axis=0), axis=1)        # (steps,)
    walked = np.cumsum(step_len)
    i = int(np.searchsorted(walked, target, side="left"))
    if i >= step_len.size:
        return 0.0
    before = walked[i] - step_len[i]
    frac = (target - before) / step_len[i] if step_len[i] > 0.0 else 0.0
    frac = min(max(frac, 0.0), 1.0)
    return (i + frac) / float(steps)


def sample_at(curve: Curve, s: float) -> Optional[PathSample]:
    """
    Locate the point, unit tangent and unit normal at normalized arc length ``s``.

    ``s`` may be any real; it wraps cyclically. Returns None for an empty curve.
    """
    if curve.is_empty:
        return None

    lengths = segment_lengths(curve, steps=COARSE_STEPS)
    cum = np.cumsum(lengths)
    total = float(cum[-1])
    target = wrap_unit(s) * total

    # first segment whose inclusive cumulative length reaches the target
    idx = int(np.searchsorted(cum, target, side="left"))
    idx = min(idx, len(curve) - 1)
    before = float(cum[idx] - lengths[idx])

    ctrl = curve.control[idx]
    t = _local_parameter(ctrl, target - before, steps=FINE_STEPS)

    point = bezier_point(ctrl, t)
    tangent = _normalize(bezier_derivative(ctrl, t))
    normal = np.array([-tangent[1], tangent[0]], dtype=np.float64)
    return PathSample(point=point, tangent=tangent, normal=normal, segment=idx, t=float(t))
