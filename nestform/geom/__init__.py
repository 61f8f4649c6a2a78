"""Curve construction, nesting and arc-length sampling."""

from .spline import build_spline
from .bbox import curve_bbox, curve_bounds, nests_bounds
from .nesting import build_nests, scale_curve
from .arclength import sample_at, segment_lengths

__all__ = [
    "build_spline",
    "curve_bbox",
    "curve_bounds",
    "nests_bounds",
    "build_nests",
    "scale_curve",
    "sample_at",
    "segment_lengths",
]
