from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional, Tuple
import numpy as np
from matplotlib import colors as mcolors


_VALID_PIVOT_MODES = {"aligned", "walking"}
_LAYER_NUMBERS = ("thickness", "base_rotation", "pivot_start", "pivot_end", "gradient_center")


@dataclass
class BezierSegment:
    """
    One cubic Bézier segment in inches.
    - p1: start point (2,)
    - c1, c2: control points (2,)
    - p2: end point (2,)
    """
    p1: np.ndarray
    c1: np.ndarray
    c2: np.ndarray
    p2: np.ndarray

    def as_array(self) -> np.ndarray:
        return np.stack([self.p1, self.c1, self.c2, self.p2], axis=0).astype(np.float64)


@dataclass
class Curve:
    """
    Closed loop of cubic Bézier segments.

    Storage:
        control: (N, 4, 2) float64 array, rows are (p1, c1, c2, p2) per segment.
    Segment i's p2 coincides with segment (i+1 mod N)'s p1. A curve built from a
    control polygon of N points has exactly N segments; an empty curve has N = 0
    and means "nothing to draw".
    """
    control: np.ndarray = field(default_factory=lambda: np.zeros((0, 4, 2), dtype=np.float64))

    def __post_init__(self) -> None:
        ctrl = np.asarray(self.control, dtype=np.float64)
        if ctrl.size == 0:
            ctrl = ctrl.reshape(0, 4, 2)
        if ctrl.ndim != 3 or ctrl.shape[1:] != (4, 2):
            raise ValueError(f"Curve expects control of shape (N,4,2), got {ctrl.shape}.")
        self.control = ctrl

    def __len__(self) -> int:
        return int(self.control.shape[0])

    def __iter__(self) -> Iterator[BezierSegment]:
        for i in range(len(self)):
            yield self.segment(i)

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def segment(self, i: int) -> BezierSegment:
        p1, c1, c2, p2 = self.control[i]
        return BezierSegment(p1=p1.copy(), c1=c1.copy(), c2=c2.copy(), p2=p2.copy())

    def points(self) -> np.ndarray:
        """All start/control/end points flattened to (4N, 2)."""
        return self.control.reshape(-1, 2)

    @property
    def start_point(self) -> Optional[np.ndarray]:
        if self.is_empty:
            return None
        return self.control[0, 0].copy()

    @staticmethod
    def from_segments(segments: List[BezierSegment]) -> "Curve":
        if not segments:
            return Curve()
        return Curve(control=np.stack([seg.as_array() for seg in segments], axis=0))


@dataclass
class PathSample:
    """
    Result of arc-length sampling on a closed curve.
    - point:   (2,) position
    - tangent: (2,) unit tangent
    - normal:  (2,) unit normal, tangent rotated by (x, y) -> (-y, x)
    - segment: index of the segment containing the sample
    - t:       local Bézier parameter within that segment
    """
    point: np.ndarray
    tangent: np.ndarray
    normal: np.ndarray
    segment: int = 0
    t: float = 0.0


@dataclass
class Mesh3D:
    """
    Triangle mesh in inches.
    - vertices: (N,3) float64 array
    - faces:    (M,3) int32 array indexing into vertices
    - colors:   optional (N,3) RGB floats in [0,1] per vertex
    """
    vertices: np.ndarray
    faces: np.ndarray
    colors: Optional[np.ndarray] = None
    units: str = "in"


@dataclass
class RibLayer:
    """
    Flat ring between two adjacent nests, placed in the stacked 3D preview.

    Planar coordinates are y-up (editor y is negated when LayerConfig.flip_y).
    - outline, hole:          (M, 2) rings sampled from the outer/inner curve
    - cap_colors, hole_colors: (M, 3) RGB in [0, 1] per ring vertex
    - side_color:             (3,) RGB for extruded side walls
    - transform:              (4, 4) homogeneous matrix, planar -> world
    """
    index: int
    outer: Curve
    inner: Curve
    outline: np.ndarray
    hole: np.ndarray
    z_offset: float
    angle: float
    local_pivot: np.ndarray
    world_pivot: np.ndarray
    transform: np.ndarray
    thickness: float
    cap_colors: np.ndarray
    hole_colors: np.ndarray
    side_color: np.ndarray

    def world_outline(self) -> np.ndarray:
        """Outline ring mapped through the layer transform, (M, 3)."""
        return _apply_transform(self.transform, self.outline)

    def world_hole(self) -> np.ndarray:
        return _apply_transform(self.transform, self.hole)


def _apply_transform(matrix: np.ndarray, ring: np.ndarray) -> np.ndarray:
    ring = np.asarray(ring, dtype=np.float64)
    homog = np.column_stack([ring, np.zeros(len(ring)), np.ones(len(ring))])
    return (homog @ np.asarray(matrix, dtype=np.float64).T)[:, :3]


def _number(name: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def _check_color(name: str, value: str) -> None:
    if not mcolors.is_color_like(value):
        raise ValueError(f"{name} is not a valid colour: {value!r}")


@dataclass(frozen=True)
class LayerConfig:
    """Parameters of the stacked rib preview."""

    thickness: float = 0.11
    base_rotation: float = 0.0
    pivot_start: float = 0.0
    pivot_end: float = 0.2
    pivot_mode: str = "aligned"
    gradient_center: float = 0.5
    color_start: str = "#646cff"
    color_end: str = "#ff4488"
    color_sides: str = "#3d2817"
    samples_per_segment: int = 16
    flip_y: bool = True

    def validate(self) -> None:
        """Validate configuration values."""
        thickness = _number("thickness", self.thickness)
        if not np.isfinite(thickness) or thickness < 0.0:
            raise ValueError("thickness must be a finite value >= 0")
        if not np.isfinite(_number("base_rotation", self.base_rotation)):
            raise ValueError("base_rotation must be finite")
        if not (np.isfinite(_number("pivot_start", self.pivot_start)) and np.isfinite(_number("pivot_end", self.pivot_end))):
            raise ValueError("pivot_start and pivot_end must be finite")
        if self.pivot_mode not in _VALID_PIVOT_MODES:
            raise ValueError(f"pivot_mode must be one of {sorted(_VALID_PIVOT_MODES)}")
        if not (0.0 <= _number("gradient_center", self.gradient_center) <= 1.0):
            raise ValueError("gradient_center must be in [0, 1]")
        if _number("samples_per_segment", self.samples_per_segment) < 1:
            raise ValueError("samples_per_segment must be >= 1")
        _check_color("color_start", self.color_start)
        _check_color("color_end", self.color_end)
        _check_color("color_sides", self.color_sides)

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "thickness": float(self.thickness),
            "base_rotation": float(self.base_rotation),
            "pivot_start": float(self.pivot_start),
            "pivot_end": float(self.pivot_end),
            "pivot_mode": self.pivot_mode,
            "gradient_center": float(self.gradient_center),
            "color_start": self.color_start,
            "color_end": self.color_end,
            "color_sides": self.color_sides,
            "samples_per_segment": int(self.samples_per_segment),
            "flip_y": bool(self.flip_y),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "LayerConfig":
        known = set(LayerConfig.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown layer settings: {sorted(unknown)}")
        data = dict(data)
        for key in _LAYER_NUMBERS:
            if key in data:
                data[key] = _number(key, data[key])
        if "samples_per_segment" in data:
            data["samples_per_segment"] = int(_number("samples_per_segment", data["samples_per_segment"]))
        return LayerConfig(**data)


def _default_points() -> np.ndarray:
    return np.array([[2.0, 5.0], [5.0, 2.0], [8.0, 5.0], [5.0, 8.0]], dtype=np.float64)


@dataclass(frozen=True, eq=False)
class DesignState:
    """
    Immutable snapshot of everything the geometry pipeline reads.

    Defaults reproduce the editor's initial design: a diamond around (5, 5)
    nested by 0.9 per step down to 1 inch.
    """
    points: np.ndarray = field(default_factory=_default_points)
    convergence: Tuple[float, float] = (5.0, 5.0)
    start_scale: float = 0.9
    end_scale: float = 0.9
    min_size: float = 1.0
    layers: LayerConfig = field(default_factory=LayerConfig)

    def __post_init__(self) -> None:
        pts = np.array(self.points, dtype=np.float64)
        if pts.size == 0:
            pts = pts.reshape(0, 2)
        pts.setflags(write=False)
        object.__setattr__(self, "points", pts)
        cx, cy = self.convergence
        object.__setattr__(self, "convergence", (float(cx), float(cy)))

    def replace(self, **changes: Any) -> "DesignState":
        return replace(self, **changes)

    def validate(self) -> None:
        if self.points.ndim != 2 or self.points.shape[1] != 2:
            raise ValueError("points must have shape (N, 2)")
        if not np.all(np.isfinite(self.points)):
            raise ValueError("points must be finite")
        if not np.all(np.isfinite(self.convergence)):
            raise ValueError("convergence must be finite")
        if not (np.isfinite(_number("start_scale", self.start_scale)) and np.isfinite(_number("end_scale", self.end_scale))):
            raise ValueError("start_scale and end_scale must be finite")
        min_size = _number("min_size", self.min_size)
        if not np.isfinite(min_size) or min_size <= 0.0:
            raise ValueError("min_size must be > 0")
        self.layers.validate()

    def to_dict(self) -> Dict[str, object]:
        return {
            "points": self.points.tolist(),
            "convergence": list(self.convergence),
            "start_scale": float(self.start_scale),
            "end_scale": float(self.end_scale),
            "min_size": float(self.min_size),
            "layers": self.layers.to_dict(),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "DesignState":
        data = dict(data)
        layers = data.pop("layers", None)
        known = set(DesignState.__dataclass_fields__) - {"layers"}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown design settings: {sorted(unknown)}")
        for key in ("start_scale", "end_scale", "min_size"):
            if key in data:
                data[key] = _number(key, data[key])
        if "points" in data:
            try:
                data["points"] = np.array(data["points"], dtype=np.float64)
            except (TypeError, ValueError):
                raise ValueError(f"points must be a list of [x, y] pairs, got {data['points']!r}") from None
        if "convergence" in data:
            conv = data["convergence"]
            if not isinstance(conv, (list, tuple)) or len(conv) != 2:
                raise ValueError(f"convergence must be an [x, y] pair, got {conv!r}")
            data["convergence"] = (_number("convergence", conv[0]), _number("convergence", conv[1]))
        if layers is not None:
            if not isinstance(layers, dict):
                raise ValueError("layers must be an object of layer settings")
            data["layers"] = LayerConfig.from_dict(layers)
        return DesignState(**data)


@dataclass
class NestResult:
    """Output of one full recompute: base curve, nest sequence and rib layers."""
    curve: Curve
    nests: List[Curve]
    layers: List[RibLayer]
