import numpy as np
import pytest

from nestform.polygon import dist_to_segment, insert_point, move_point, delete_point


def _diamond():
    return np.array([[2.0, 5.0], [5.0, 2.0], [8.0, 5.0], [5.0, 8.0]])


def test_dist_to_segment():
    assert dist_to_segment([0.0, 1.0], [-1.0, 0.0], [1.0, 0.0]) == pytest.approx(1.0)
    assert dist_to_segment([3.0, 0.0], [-1.0, 0.0], [1.0, 0.0]) == pytest.approx(2.0)
    assert dist_to_segment([3.0, 4.0], [0.0, 0.0], [0.0, 0.0]) == pytest.approx(5.0)


def test_insert_appends_below_three():
    P = insert_point(np.zeros((0, 2)), [1.0, 1.0])
    P = insert_point(P, [2.0, 2.0])
    np.testing.assert_array_equal(P, [[1.0, 1.0], [2.0, 2.0]])


def test_insert_on_nearest_edge():
    P = _diamond()
    out = insert_point(P, [3.0, 3.0])
    assert out.shape == (5, 2)
    np.testing.assert_array_equal(out[1], [3.0, 3.0])
    # closing edge P3 -> P0 inserts at the end
    out = insert_point(P, [3.0, 7.0])
    np.testing.assert_array_equal(out[-1], [3.0, 7.0])
    np.testing.assert_array_equal(P, _diamond())


def test_insert_tie_takes_first_edge():
    square = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
    out = insert_point(square, [0.5, 0.5])
    np.testing.assert_array_equal(out[1], [0.5, 0.5])


def test_move_point():
    P = _diamond()
    out = move_point(P, 2, [9.0, 9.0])
    np.testing.assert_array_equal(out[2], [9.0, 9.0])
    np.testing.assert_array_equal(P[2], [8.0, 5.0])
    np.testing.assert_array_equal(move_point(P, 7, [0.0, 0.0]), P)


def test_delete_keeps_three():
    P = _diamond()
    out = delete_point(P, 0)
    assert out.shape == (3, 2)
    np.testing.assert_array_equal(delete_point(out, 0), out)


def test_bad_shape():
    with pytest.raises(ValueError):
        insert_point(np.zeros((3, 3)), [0.0, 0.0])
