"""
Stacked rib layers between adjacent nests.

For each adjacent pair (outer = nests[k], inner = nests[k+1]) a flat ring is
sampled in planar (y-up) coordinates and placed by

    M_k = T(world_pivot_k + k*thickness*ez) · Rz(k * base_rotation) · T(-local_pivot_k)

so the rotation is always about the chosen pivot regardless of where the shape
sits. Pivots come from arc-length sampling:

  aligned  one global pivot at ``pivot_start`` on the base curve; each layer's
           local pivot (at ``pivot_start`` on its own outer curve) is brought onto
           it, so all pivots stack vertically.
  walking  the position moves from ``pivot_start`` to ``pivot_end`` with the
           layer index, t_rib = k / max(1, count - 2); each layer rotates in
           place about its own pivot.
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence
import numpy as np
from trimesh import transformations as tf

from ..models import Curve, LayerConfig, RibLayer
from ..geom.arclength import sample_at
from ..geom.bbox import curve_bounds
from ..geom.bezier import flatten_curve
from .gradient import gradient_colors, to_rgb

logger = logging.getLogger(__name__)


def planar_curve(curve: Curve, flip_y: bool = True) -> Curve:
    """Map editor coordinates (y down) to preview coordinates (y up)."""
    if not flip_y:
        return curve
    ctrl = curve.control.copy()
    ctrl[..., 1] *= -1.0
    return Curve(control=ctrl)


def _pivot_on(curve: Curve, s: float) -> Optional[np.ndarray]:
    sample = sample_at(curve, s)
    if sample is None:
        return None
    return np.asarray(sample.point, dtype=np.float64)


def rib_position(k: int, count: int, pivot_start: float, pivot_end: float) -> float:
    """Normalized pivot position for layer k of a nest sequence of ``count`` curves (walking mode)."""
    t_rib = k / max(1, count - 2)
    return pivot_start + (pivot_end - pivot_start) * t_rib


def layer_transform(local_pivot: np.ndarray, world_pivot: np.ndarray, angle: float, z_offset: float) -> np.ndarray:
    """Translate local pivot to origin, rotate about +z by ``angle``, move to world pivot + z."""
    to_origin = tf.translation_matrix([-local_pivot[0], -local_pivot[1], 0.0])
    rotate = tf.rotation_matrix(angle, [0.0, 0.0, 1.0])
    to_world = tf.translation_matrix([world_pivot[0], world_pivot[1], z_offset])
    return tf.concatenate_matrices(to_world, rotate, to_origin)


def composite_layers(nests: Sequence[Curve], config: Optional[LayerConfig] = None) -> List[RibLayer]:
    """
    Build one RibLayer per adjacent nest pair; fewer than two nests yields none.
    """
    if config is None:
        config = LayerConfig()
    count = len(nests)
    if count < 2:
        return []

    planar = [planar_curve(c, config.flip_y) for c in nests]

    global_pivot = _pivot_on(planar[0], config.pivot_start)
    if global_pivot is None:
        global_pivot = np.zeros(2, dtype=np.float64)

    side_color = to_rgb(config.color_sides)
    layers: List[RibLayer] = []
    for k in range(count - 1):
        outer, inner = planar[k], planar[k + 1]
        z_offset = k * float(config.thickness)
        angle = math.radians(k * float(config.base_rotation))

        if config.pivot_mode == "walking":
            position = rib_position(k, count, config.pivot_start, config.pivot_end)
            local_pivot = _pivot_on(outer, position)
            if local_pivot is None:
                local_pivot = global_pivot
            world_pivot = local_pivot
        else:
            local_pivot = _pivot_on(outer, config.pivot_start)
            if local_pivot is None:
                local_pivot = global_pivot
            world_pivot = global_pivot

        outline = flatten_curve(outer, config.samples_per_segment)
        hole = flatten_curve(inner, config.samples_per_segment)

        lo, hi = curve_bounds(outer)
        width = float(hi[0] - lo[0])
        cap_colors = gradient_colors(outline[:, 0], lo[0], width, config.color_start, config.color_end, config.gradient_center)
        hole_colors = gradient_colors(hole[:, 0], lo[0], width, config.color_start, config.color_end, config.gradient_center)

        layers.append(
            RibLayer(
                index=k,
                outer=outer,
                inner=inner,
                outline=outline,
                hole=hole,
                z_offset=z_offset,
                angle=angle,
                local_pivot=np.array(local_pivot, dtype=np.float64),
                world_pivot=np.array(world_pivot, dtype=np.float64),
                transform=layer_transform(local_pivot, world_pivot, angle, z_offset),
                thickness=float(config.thickness),
                cap_colors=cap_colors,
                hole_colors=hole_colors,
                side_color=side_color.copy(),
            )
        )

    logger.debug("Composited %d rib layers (pivot mode %s).", len(layers), config.pivot_mode)
    return layers
