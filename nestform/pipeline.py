"""
Full recompute from a design snapshot: spline -> nests -> rib layers.

Every state change reruns the whole pipeline on an immutable DesignState; there
is no incremental update and nothing is shared between calls.
"""
from __future__ import annotations

import logging

from .models import DesignState, NestResult
from .geom.spline import build_spline
from .geom.nesting import build_nests
from .layers.compositor import composite_layers

logger = logging.getLogger(__name__)


def recompute(state: DesignState, with_layers: bool = True) -> NestResult:
    """
    Run the geometry pipeline on ``state``.

    Args:
        state: immutable design snapshot.
        with_layers: skip rib composition when only the 2D nests are needed.
    """
    curve = build_spline(state.points)
    if curve.is_empty:
        logger.debug("Fewer than 3 control points (%d); nothing to draw.", len(state.points))
    nests = build_nests(curve, state.convergence, state.start_scale, state.end_scale, state.min_size)
    layers = composite_layers(nests, state.layers) if with_layers else []
    return NestResult(curve=curve, nests=nests, layers=layers)
