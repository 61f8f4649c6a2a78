from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from ..models import DesignState


def load_design(path: str | Path) -> DesignState:
    """
    Read a design snapshot from JSON.

    Expected keys mirror DesignState (``points``, ``convergence``, ``start_scale``,
    ``end_scale``, ``min_size``) plus an optional nested ``layers`` object; any
    key may be omitted to keep its default.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Design file '{path}' not found.")
    with path.open("r", encoding="utf-8") as handle:
        data: Dict[str, Any] = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError(f"Design file '{path}' must contain a JSON object.")
    state = DesignState.from_dict(data)
    state.validate()
    return state


__all__ = ["load_design"]
