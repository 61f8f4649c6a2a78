"""
Nested curve generation by affine scaling toward a convergence point.

Each step maps every point of the current curve through
    P' = C + s (P - C)
where the scale s blends from ``start_scale`` (at the base size) toward
``end_scale`` (near the minimum size):
    t = clamp((w - min_size) / (W0 - min_size), 0, 1)     (t = 0 if W0 <= min_size)
    s = end_scale + (start_scale - end_scale) * t
Generation stops as soon as the current curve's control-hull width or height
drops below ``min_size``; the curve that crossed the threshold is kept.
"""
from __future__ import annotations

import logging
from typing import List
import numpy as np

from ..models import Curve
from .bbox import curve_bbox

logger = logging.getLogger(__name__)

MAX_NEST_ITERATIONS = 100


def scale_curve(curve: Curve, convergence, s: float) -> Curve:
    """Uniformly scale every start/control/end point toward ``convergence`` by ``s``."""
    C = np.asarray(convergence, dtype=np.float64).reshape(2)
    return Curve(control=C + float(s) * (curve.control - C))


def _below(curve: Curve, min_size: float) -> bool:
    width, height = curve_bbox(curve)
    return width < min_size or height < min_size


def blended_scale(width: float, base_width: float, start_scale: float, end_scale: float, min_size: float) -> float:
    t = 0.0
    if base_width > min_size:
        t = (width - min_size) / (base_width - min_size)
    t = min(max(t, 0.0), 1.0)
    return end_scale + (start_scale - end_scale) * t


def build_nests(
    curve: Curve,
    convergence,
    start_scale: float,
    end_scale: float,
    min_size: float,
    max_iterations: int = MAX_NEST_ITERATIONS,
) -> List[Curve]:
    """
    Return the nest sequence [base, scaled_1, scaled_2, ...].

    The loop appends at most ``max_iterations`` curves. Reaching that bound while
    the last curve is still above ``min_size`` means a non-shrinking
    configuration (scale >= 1, min_size <= 0, ...); the accumulated sequence is
    returned and a warning is logged.
    """
    nests = [curve]
    if curve.is_empty:
        return nests

    base_width, _ = curve_bbox(curve)
    current = curve
    for _ in range(int(max_iterations)):
        if _below(current, min_size):
            break
        width, _ = curve_bbox(current)
        s = blended_scale(width, base_width, start_scale, end_scale, min_size)
        current = scale_curve(current, convergence, s)
        nests.append(current)

    if not _below(current, min_size):
        logger.warning(
            "Nest generation hit the %d-iteration cap (start_scale=%g, end_scale=%g, min_size=%g); "
            "returning %d curves.",
            int(max_iterations), start_scale, end_scale, min_size, len(nests),
        )
    else:
        logger.debug("Generated %d nests (base width %.4f).", len(nests), base_width)
    return nests
