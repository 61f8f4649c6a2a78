"""
nestform: concentric nesting of closed organic outlines for layered laser-cut artwork.

This package exposes:
- Core dataclasses (Curve, BezierSegment, PathSample, RibLayer, LayerConfig, DesignState)
- The geometry pipeline: build_spline -> build_nests -> composite_layers, plus sample_at
- SVG path serialization for the 2D and export renderers
- Control polygon edits for editor front ends (insert_point, move_point, delete_point)
"""

from .models import (
    BezierSegment,
    Curve,
    PathSample,
    Mesh3D,
    RibLayer,
    LayerConfig,
    DesignState,
    NestResult,
)
from .geom.spline import build_spline
from .geom.nesting import build_nests
from .geom.arclength import sample_at
from .layers.compositor import composite_layers
from .export.svg import path_to_svg_d
from .pipeline import recompute
from .polygon import insert_point, move_point, delete_point

__all__ = [
    "BezierSegment",
    "Curve",
    "PathSample",
    "Mesh3D",
    "RibLayer",
    "LayerConfig",
    "DesignState",
    "NestResult",
    "build_spline",
    "build_nests",
    "sample_at",
    "composite_layers",
    "path_to_svg_d",
    "recompute",
    "insert_point",
    "move_point",
    "delete_point",
]

__version__ = "0.1.0"
