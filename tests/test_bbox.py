import numpy as np

from nestform.models import Curve
from nestform.geom.spline import build_spline
from nestform.geom.bbox import curve_bbox, curve_bounds, nests_bounds
from nestform.geom.bezier import flatten_curve


def test_diamond_hull_box():
    curve = build_spline([[2.0, 5.0], [5.0, 2.0], [8.0, 5.0], [5.0, 8.0]])
    w, h = curve_bbox(curve)
    assert abs(w - 6.0) < 1e-12
    assert abs(h - 6.0) < 1e-12


def test_hull_box_contains_true_curve():
    rng = np.random.default_rng(0)
    pts = rng.uniform(0.0, 10.0, size=(9, 2))
    curve = build_spline(pts)
    lo, hi = curve_bounds(curve)
    ring = flatten_curve(curve, samples_per_segment=64)
    assert np.all(ring >= lo - 1e-12)
    assert np.all(ring <= hi + 1e-12)


def test_empty_curve_has_zero_size():
    assert curve_bbox(Curve()) == (0.0, 0.0)
    assert nests_bounds([Curve()]) is None
