"""
Extrusion of rib layers into closed triangle meshes.

Outline and hole rings of a layer are sampled at identical parameters (the
inner curve is an affine copy of the outer one), so each wall is a strip
between two rings of equal length:

    outer wall   outline(z=0)  -> outline(z=h)
    inner wall   hole(z=0)     -> hole(z=h)

The caps are the planar region between the rings, triangulated as a polygon
with one hole. The triangulation uses only ring vertices, so cap and wall
edges coincide.

Caps carry the gradient colours, walls the side colour. Each part keeps its own
vertices so colours stay per-part; welding by position closes the solid.
"""
from __future__ import annotations

from typing import List, Sequence
from pathlib import Path
import numpy as np
import trimesh
from shapely.geometry import Polygon

from ..models import Mesh3D, RibLayer
from .gradient import to_rgb


def _strip_faces(m: int, flip: bool = False) -> np.ndarray:
    """Two triangles per quad between ring A (0..m-1) and ring B (m..2m-1), periodic wrap."""
    j = np.arange(m, dtype=np.int32)
    j2 = (j + 1) % m
    a, b, c, d = j, m + j, m + j2, j2
    F = np.concatenate([np.column_stack([a, b, c]), np.column_stack([a, c, d])], axis=0)
    if flip:
        F[:, [1, 2]] = F[:, [2, 1]]
    return F


def _cap_faces(outline: np.ndarray, hole: np.ndarray) -> np.ndarray:
    """
    Triangulate the planar region between ``outline`` and ``hole``.

    Faces index into vstack([outline, hole]) and are wound counter-clockwise
    (normal +z).
    """
    ring = np.vstack([outline, hole])
    verts, faces = trimesh.creation.triangulate_polygon(Polygon(outline, [hole]), engine="earcut")
    # triangulation vertices are the ring vertices, possibly reordered or with closing duplicates
    d = np.linalg.norm(np.asarray(verts)[:, None, :2] - ring[None, :, :], axis=2)
    F = np.argmin(d, axis=1)[np.asarray(faces, dtype=np.int64)].astype(np.int32)
    F = F[(F[:, 0] != F[:, 1]) & (F[:, 1] != F[:, 2]) & (F[:, 0] != F[:, 2])]

    a, b, c = ring[F[:, 0]], ring[F[:, 1]], ring[F[:, 2]]
    cross = (b - a)[:, 0] * (c - a)[:, 1] - (b - a)[:, 1] * (c - a)[:, 0]
    cw = cross < 0.0
    F[cw] = F[cw][:, [0, 2, 1]]
    return F


def _signed_area(ring: np.ndarray) -> float:
    x, y = ring[:, 0], ring[:, 1]
    return 0.5 * float(np.sum(x * np.roll(y, -1) - y * np.roll(x, -1)))


def _lift(ring: np.ndarray, z: float) -> np.ndarray:
    return np.column_stack([ring, np.full(len(ring), float(z))])


def _concat_meshes(meshes: List[Mesh3D]) -> Mesh3D:
    verts = []
    faces = []
    cols = []
    off = 0
    for m in meshes:
        v = np.asarray(m.vertices, dtype=np.float64)
        f = np.asarray(m.faces, dtype=np.int32)
        verts.append(v)
        faces.append(f + off)
        cols.append(np.asarray(m.colors, dtype=np.float64) if m.colors is not None else np.ones((len(v), 3)))
        off += v.shape[0]
    if not verts:
        return Mesh3D(vertices=np.zeros((0, 3)), faces=np.zeros((0, 3), dtype=np.int32), colors=np.zeros((0, 3)))
    return Mesh3D(vertices=np.vstack(verts), faces=np.vstack(faces), colors=np.vstack(cols))


def rib_mesh(layer: RibLayer) -> Mesh3D:
    """Extrude one layer by its thickness and place it with the layer transform."""
    outline = np.asarray(layer.outline, dtype=np.float64)
    hole = np.asarray(layer.hole, dtype=np.float64)
    m = outline.shape[0]
    if m < 3 or hole.shape[0] != m:
        return Mesh3D(vertices=np.zeros((0, 3)), faces=np.zeros((0, 3), dtype=np.int32), colors=np.zeros((0, 3)))

    h = float(layer.thickness)
    ccw = _signed_area(outline) >= 0.0
    side = np.tile(layer.side_color, (2 * m, 1))
    caps_rgb = np.vstack([layer.cap_colors, layer.hole_colors])
    top = _cap_faces(outline, hole)

    parts = [
        Mesh3D(np.vstack([_lift(outline, 0.0), _lift(hole, 0.0)]), top[:, [0, 2, 1]], caps_rgb),
        Mesh3D(np.vstack([_lift(outline, h), _lift(hole, h)]), top.copy(), caps_rgb.copy()),
        Mesh3D(np.vstack([_lift(outline, 0.0), _lift(outline, h)]), _strip_faces(m, flip=ccw), side),
        Mesh3D(np.vstack([_lift(hole, 0.0), _lift(hole, h)]), _strip_faces(m, flip=not ccw), side.copy()),
    ]
    full = _concat_meshes(parts)

    V = np.column_stack([full.vertices, np.ones(len(full.vertices))]) @ np.asarray(layer.transform).T
    return Mesh3D(vertices=V[:, :3], faces=full.faces, colors=full.colors)


def to_trimesh(mesh: Mesh3D, weld: bool = False) -> trimesh.Trimesh:
    """Convert Mesh3D -> trimesh.Trimesh with vertex colours (RGBA uint8)."""
    kwargs = {}
    if mesh.colors is not None and len(mesh.colors) == len(mesh.vertices):
        rgba = np.column_stack([np.clip(mesh.colors, 0.0, 1.0), np.ones(len(mesh.colors))])
        kwargs["vertex_colors"] = np.round(rgba * 255.0).astype(np.uint8)
    return trimesh.Trimesh(
        vertices=np.asarray(mesh.vertices, dtype=np.float64),
        faces=np.asarray(mesh.faces, dtype=np.int64),
        process=weld,
        **kwargs,
    )


def stack_mesh(layers: Sequence[RibLayer]) -> Mesh3D:
    """All rib layers as one mesh."""
    return _concat_meshes([rib_mesh(layer) for layer in layers])


def pivot_markers(layers: Sequence[RibLayer], radius: float | None = None, color="#ffff00") -> Mesh3D:
    """Small spheres at each layer's world pivot and vertical offset."""
    rgb = to_rgb(color)
    parts = []
    for layer in layers:
        r = float(radius) if radius is not None else max(layer.thickness / 2.0, 1e-3)
        sphere = trimesh.creation.icosphere(subdivisions=1, radius=r)
        sphere.apply_translation([layer.world_pivot[0], layer.world_pivot[1], layer.z_offset])
        V = np.asarray(sphere.vertices)
        parts.append(Mesh3D(vertices=V, faces=np.asarray(sphere.faces, dtype=np.int32), colors=np.tile(rgb, (len(V), 1))))
    return _concat_meshes(parts)


def export_stack(layers: Sequence[RibLayer], path: str | Path, markers: bool = False) -> None:
    """
    Write the rib stack to any trimesh-supported format chosen by extension
    (.stl, .ply, .glb, .obj). PLY/GLB keep vertex colours.
    """
    path = Path(path)
    if path.parent and path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)
    meshes = [stack_mesh(layers)]
    if markers:
        meshes.append(pivot_markers(layers))
    full = _concat_meshes(meshes)
    if full.faces.size == 0:
        raise ValueError("No rib layers to export; need at least two nests.")
    to_trimesh(full).export(str(path))
