import numpy as np
import pytest

from nestform.geom.spline import build_spline
from nestform.geom.bezier import bezier_point, bezier_derivative, flatten_curve


def _diamond():
    return np.array([[2.0, 5.0], [5.0, 2.0], [8.0, 5.0], [5.0, 8.0]])


def _blob(n=7, seed=3):
    rng = np.random.default_rng(seed)
    ang = np.sort(rng.uniform(0.0, 2 * np.pi, n))
    r = rng.uniform(3.0, 5.0, n)
    return np.column_stack([10.0 + r * np.cos(ang), 10.0 + r * np.sin(ang)])


@pytest.mark.parametrize("pts", [_diamond(), _blob(3), _blob(7), _blob(12, seed=9)])
def test_closure_and_segment_count(pts):
    curve = build_spline(pts)
    n = len(pts)
    assert len(curve) == n
    for i in range(n):
        # exact equality: end of segment i is the start of segment i+1
        assert np.array_equal(curve.control[i, 3], curve.control[(i + 1) % n, 0])
        assert np.array_equal(curve.control[i, 0], pts[i])


def test_catmull_rom_control_points():
    pts = _diamond()
    curve = build_spline(pts)
    seg = curve.segment(0)
    # T1 = (P1 - P3) / 2 = (0, -3); C1 = P0 + T1/3
    np.testing.assert_allclose(seg.c1, [2.0, 4.0])
    # T2 = (P2 - P0) / 2 = (3, 0); C2 = P1 - T2/3
    np.testing.assert_allclose(seg.c2, [4.0, 2.0])


def test_fewer_than_three_points_gives_empty_curve():
    assert build_spline([]).is_empty
    assert build_spline([[0.0, 0.0]]).is_empty
    assert build_spline([[0.0, 0.0], [1.0, 1.0]]).is_empty


def test_bad_shape_raises():
    with pytest.raises(ValueError):
        build_spline(np.zeros((4, 3)))


def test_spline_passes_through_control_points():
    pts = _blob(6)
    curve = build_spline(pts)
    starts = bezier_point(curve.control, 0.0)
    ends = bezier_point(curve.control, 1.0)
    np.testing.assert_allclose(starts, pts, atol=1e-12)
    np.testing.assert_allclose(ends, np.roll(pts, -1, axis=0), atol=1e-12)


def test_tangent_continuity_at_joins():
    pts = _blob(8)
    curve = build_spline(pts)
    d_end = bezier_derivative(curve.control, 1.0)
    d_start = bezier_derivative(np.roll(curve.control, -1, axis=0), 0.0)
    np.testing.assert_allclose(d_end, d_start, atol=1e-10)


def test_flatten_curve_shape_no_duplicate_joins():
    curve = build_spline(_diamond())
    ring = flatten_curve(curve, samples_per_segment=8)
    assert ring.shape == (32, 2)
    d = np.linalg.norm(np.diff(np.vstack([ring, ring[:1]]), axis=0), axis=1)
    assert np.all(d > 1e-9)
