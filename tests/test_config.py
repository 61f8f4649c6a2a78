import json

import numpy as np
import pytest

from nestform.io import load_design
from nestform.models import DesignState, LayerConfig
from nestform.pipeline import recompute


def test_defaults():
    state = DesignState()
    assert state.points.shape == (4, 2)
    assert state.convergence == (5.0, 5.0)
    assert state.start_scale == state.end_scale == 0.9
    assert state.min_size == 1.0
    cfg = state.layers
    assert cfg.thickness == pytest.approx(0.11)
    assert cfg.pivot_mode == "aligned"
    state.validate()


def test_points_are_read_only():
    state = DesignState()
    with pytest.raises(ValueError):
        state.points[0, 0] = 1.0


def test_replace_returns_new_state():
    state = DesignState()
    other = state.replace(min_size=2.0)
    assert other is not state
    assert other.min_size == 2.0 and state.min_size == 1.0
    np.testing.assert_array_equal(other.points, state.points)


@pytest.mark.parametrize(
    "changes",
    [
        {"min_size": 0.0},
        {"start_scale": float("nan")},
        {"points": np.zeros((3, 3))},
        {"layers": LayerConfig(pivot_mode="spiral")},
        {"layers": LayerConfig(gradient_center=1.5)},
        {"layers": LayerConfig(thickness=-1.0)},
        {"layers": LayerConfig(color_end="not-a-colour")},
        {"layers": LayerConfig(samples_per_segment=0)},
    ],
)
def test_validate_rejects(changes):
    with pytest.raises(ValueError):
        DesignState().replace(**changes).validate()


def test_dict_round_trip():
    state = DesignState(convergence=(1.0, 2.0), layers=LayerConfig(pivot_mode="walking"))
    data = json.loads(json.dumps(state.to_dict()))
    back = DesignState.from_dict(data)
    np.testing.assert_array_equal(back.points, state.points)
    assert back.convergence == (1.0, 2.0)
    assert back.layers == state.layers


def test_unknown_keys_rejected():
    with pytest.raises(ValueError):
        DesignState.from_dict({"scale": 0.5})
    with pytest.raises(ValueError):
        LayerConfig.from_dict({"thicknes": 0.2})


def test_load_design(tmp_path):
    path = tmp_path / "design.json"
    path.write_text(json.dumps({"points": [[0, 0], [4, 0], [4, 4], [0, 4]], "convergence": [2, 2],
                                "layers": {"base_rotation": 2.0}}), encoding="utf-8")
    state = load_design(path)
    assert state.points.shape == (4, 2)
    assert state.convergence == (2.0, 2.0)
    assert state.layers.base_rotation == 2.0
    assert state.min_size == 1.0


def test_load_design_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_design(tmp_path / "missing.json")
    bad = tmp_path / "list.json"
    bad.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_design(bad)


def test_recompute_default_design():
    result = recompute(DesignState())
    assert len(result.curve) == 4
    assert len(result.nests) == 19
    assert len(result.layers) == 18
    assert result.nests[0] is result.curve


def test_recompute_without_layers():
    assert recompute(DesignState(), with_layers=False).layers == []


def test_recompute_too_few_points():
    result = recompute(DesignState(points=[[0.0, 0.0], [1.0, 1.0]]))
    assert result.curve.is_empty
    assert len(result.nests) == 1
    assert result.layers == []


def test_from_dict_coerces_numeric_strings():
    state = DesignState.from_dict({"min_size": "2", "layers": {"thickness": "0.1", "samples_per_segment": "8"}})
    assert state.min_size == 2.0
    assert state.layers.thickness == pytest.approx(0.1)
    assert state.layers.samples_per_segment == 8
    state.validate()


@pytest.mark.parametrize(
    "data",
    [
        {"layers": {"thickness": "thick"}},
        {"layers": {"gradient_center": None}},
        {"layers": [1, 2]},
        {"start_scale": "fast"},
        {"points": [[0, 0], [1]]},
        {"points": {"x": 1}},
        {"convergence": 5},
        {"convergence": ["a", 1]},
    ],
)
def test_from_dict_rejects_non_numeric(data):
    with pytest.raises(ValueError):
        DesignState.from_dict(data)


def test_validate_rejects_non_numeric_fields():
    with pytest.raises(ValueError):
        LayerConfig(thickness="0.1x").validate()
    with pytest.raises(ValueError):
        DesignState(min_size=None).validate()
