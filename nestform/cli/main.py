#!/usr/bin/env python
from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Any, Dict

import numpy as np

from nestform.io import load_design
from nestform.logging_config import setup_logging
from nestform.models import DesignState, LayerConfig
from nestform.pipeline import recompute
from nestform.export.svg import save_svg
from nestform.layers.mesh import export_stack
from nestform.figures import render_preview


def _parse_pair(value: str) -> tuple[float, float]:
    parts = value.replace(",", " ").split()
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"Expected 'x,y', got '{value}'.")
    return float(parts[0]), float(parts[1])


def _parse_points(value: str) -> np.ndarray:
    pairs = [_parse_pair(chunk) for chunk in value.replace(";", " ").split()]
    return np.asarray(pairs, dtype=float).reshape(-1, 2)


def _ensure_parent(path: str | os.PathLike[str]) -> None:
    parent = Path(path).expanduser().parent
    if parent != Path('.'):
        parent.mkdir(parents=True, exist_ok=True)


def _add_design_arguments(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("--design", default=None, help="JSON design file (points, convergence, scales, layers).")
    sub.add_argument("--points", type=_parse_points, default=None, help="Control polygon as 'x,y x,y x,y ...' (inches).")
    sub.add_argument("--convergence", type=_parse_pair, default=None, help="Convergence point 'x,y' (inches).")
    sub.add_argument("--start-scale", type=float, default=None, help="Per-step scale at the outermost nest.")
    sub.add_argument("--end-scale", type=float, default=None, help="Per-step scale near the minimum size.")
    sub.add_argument("--min-size", type=float, default=None, help="Stop once a nest is narrower or shorter than this (inches).")
    sub.add_argument("--thickness", type=float, default=None, help="Material thickness / vertical step per rib (inches).")
    sub.add_argument("--rotation", type=float, default=None, help="Base rotation per rib (degrees).")
    sub.add_argument("--pivot-start", type=float, default=None, help="Pivot position along the curve in [0,1).")
    sub.add_argument("--pivot-end", type=float, default=None, help="Final pivot position for the walking pivot mode.")
    sub.add_argument("--pivot-mode", choices=["aligned", "walking"], default=None, help="Pivot alignment mode.")
    sub.add_argument("--gradient-center", type=float, default=None, help="Gradient centre in [0,1].")
    sub.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity.")
    sub.add_argument("--log-file", default=None, help="Also write log messages to this file.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nestform", description="Nested curve export / rib mesh / preview CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    svg_parser = subparsers.add_parser("svg", help="Export all nests as an SVG document sized in inches.")
    _add_design_arguments(svg_parser)
    svg_parser.add_argument("--out", required=True, help="Output SVG path.")
    svg_parser.add_argument("--padding", type=float, default=0.5, help="Padding around the nests (inches).")

    mesh_parser = subparsers.add_parser("mesh", help="Export the extruded rib stack (STL/PLY/GLB/OBJ).")
    _add_design_arguments(mesh_parser)
    mesh_parser.add_argument("--out", required=True, help="Output mesh path; format from extension.")
    mesh_parser.add_argument("--samples", type=int, default=None, help="Ring samples per Bezier segment.")
    mesh_parser.add_argument("--markers", action="store_true", help="Add a sphere at each rib pivot.")

    preview_parser = subparsers.add_parser("preview", help="Render a 2D preview figure of the nests.")
    _add_design_arguments(preview_parser)
    preview_parser.add_argument("--out", required=True, help="Output figure path (.png/.pdf/.svg).")
    preview_parser.add_argument("--dpi", type=int, default=150, help="Figure DPI for raster outputs.")

    return parser


def _state_from_args(args: argparse.Namespace) -> DesignState:
    state = load_design(args.design) if args.design else DesignState()

    changes: Dict[str, Any] = {}
    if args.points is not None:
        changes["points"] = args.points
    if args.convergence is not None:
        changes["convergence"] = args.convergence
    if args.start_scale is not None:
        changes["start_scale"] = float(args.start_scale)
    if args.end_scale is not None:
        changes["end_scale"] = float(args.end_scale)
    if args.min_size is not None:
        changes["min_size"] = float(args.min_size)

    layer_changes: Dict[str, Any] = {}
    for attr, key in (
        ("thickness", "thickness"),
        ("rotation", "base_rotation"),
        ("pivot_start", "pivot_start"),
        ("pivot_end", "pivot_end"),
        ("pivot_mode", "pivot_mode"),
        ("gradient_center", "gradient_center"),
        ("samples", "samples_per_segment"),
    ):
        value = getattr(args, attr, None)
        if value is not None:
            layer_changes[key] = value
    if layer_changes:
        merged = dict(state.layers.to_dict(), **layer_changes)
        changes["layers"] = LayerConfig.from_dict(merged)

    state = state.replace(**changes) if changes else state
    state.validate()
    return state


def _run_svg(args: argparse.Namespace, state: DesignState) -> None:
    result = recompute(state, with_layers=False)
    _ensure_parent(args.out)
    save_svg(result.nests, args.out, padding=float(args.padding))
    print(f"[svg] wrote {args.out} ({len(result.nests)} nests)")


def _run_mesh(args: argparse.Namespace, state: DesignState) -> None:
    result = recompute(state)
    _ensure_parent(args.out)
    export_stack(result.layers, args.out, markers=bool(args.markers))
    print(f"[mesh] wrote {args.out} ({len(result.layers)} ribs)")


def _run_preview(args: argparse.Namespace, state: DesignState) -> None:
    result = recompute(state, with_layers=False)
    _ensure_parent(args.out)
    out = render_preview(
        result.nests,
        args.out,
        config=state.layers,
        convergence=state.convergence,
        points=state.points,
        dpi=int(args.dpi),
    )
    print(f"[preview] wrote {out}")


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(getattr(logging, args.log_level), log_file=args.log_file)

    try:
        state = _state_from_args(args)
    except (ValueError, FileNotFoundError) as exc:
        parser.error(str(exc))

    if args.command == "svg":
        _run_svg(args, state)
    elif args.command == "mesh":
        try:
            _run_mesh(args, state)
        except ValueError as exc:
            parser.error(str(exc))
    elif args.command == "preview":
        _run_preview(args, state)
    else:
        parser.error(f"Unknown command: {args.command}")


if __name__ == "__main__":
    main()
