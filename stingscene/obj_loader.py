"""Reader for Wavefront OBJ meshes producing indexed vertex data."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field

import numpy as np

_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def _atof(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _next(text: str, start: int, token: str) -> int:
    """Position of ``token`` after ``start`` (exclusive), or the text length."""
    if start >= len(text):
        return start
    found = text.find(token, start + 1)
    return len(text) if found == -1 else found


def _fields(line: str, start: int, count: int) -> tuple[float, ...]:
    while start < len(line) and line[start] == " ":
        start += 1
    values = []
    for _ in range(count):
        if start > len(line):
            raise ValueError(f"too few components in line {line!r}")
        end = _next(line, start, " ")
        values.append(_atof(line[start:end]))
        start = end + 1
    return tuple(values)


@dataclass(frozen=True)
class ObjIndex:
    """Zero-based vertex, texture-coordinate and normal indices of a face corner."""

    vertex_index: int
    uv_index: int = 0
    normal_index: int = 0


def parse_index(token: str) -> tuple[ObjIndex, bool, bool]:
    """Parse a face corner such as ``3``, ``3/5`` or ``3/5/7``.

    Returns the index and whether a texture-coordinate and a normal part were present.
    """
    end = _next(token, 0, "/")
    vertex = _atoi(token[:end]) - 1
    if end >= len(token):
        return ObjIndex(vertex), False, False
    start = end + 1
    end = _next(token, start, "/")
    uv = _atoi(token[start:end]) - 1
    if end >= len(token):
        return ObjIndex(vertex, uv), True, False
    start = end + 1
    end = _next(token, start, "/")
    normal = _atoi(token[start:end]) - 1
    return ObjIndex(vertex, uv, normal), True, True


@dataclass
class IndexedModel:
    """Per-vertex attribute lists and the triangle index list into them."""

    positions: list[tuple[float, float, float]] = field(default_factory=list)
    tex_coords: list[tuple[float, float]] = field(default_factory=list)
    normals: list[tuple[float, float, float]] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)

    def calc_normals(self) -> None:
        """Replace the normals by smoothed face normals, adding to the current ones."""
        if len(self.normals) < len(self.positions):
            raise ValueError("normals must hold one entry per position")
        positions = np.asarray(self.positions, dtype=np.float64).reshape(-1, 3)
        summed = np.asarray(self.normals, dtype=np.float64).reshape(-1, 3).copy()
        count = len(positions)
        with np.errstate(invalid="ignore", divide="ignore"):
            for i0, i1, i2 in zip(*[iter(self.indices)] * 3):
                face = np.cross(positions[i1] - positions[i0], positions[i2] - positions[i0])
                face = face / np.linalg.norm(face)
                summed[i0] += face
                summed[i1] += face
                summed[i2] += face
            lengths = np.linalg.norm(summed[:count], axis=1, keepdims=True)
            summed[:count] = summed[:count] / lengths
        self.normals = [tuple(float(c) for c in n) for n in summed]


@dataclass
class ObjModel:
    """Raw contents of an OBJ file: attribute lists and face corners."""

    obj_indices: list[ObjIndex] = field(default_factory=list)
    vertices: list[tuple[float, float, float]] = field(default_factory=list)
    uvs: list[tuple[float, float]] = field(default_factory=list)
    normals: list[tuple[float, float, float]] = field(default_factory=list)
    has_uvs: bool = False
    has_normals: bool = False

    def _add_corner(self, token: str) -> None:
        index, has_uv, has_normal = parse_index(token)
        self.obj_indices.append(index)
        self.has_uvs |= has_uv
        self.has_normals |= has_normal

    def _add_face(self, line: str) -> None:
        tokens = line.split(" ")
        if len(tokens) < 4:
            raise ValueError(f"face needs three corners: {line!r}")
        corners = tokens[1:4]
        if len(tokens) > 4:
            corners += [tokens[1], tokens[3], tokens[4]]
        for token in corners:
            self._add_corner(token)

    def _attributes(self, index: ObjIndex):
        position = self.vertices[index.vertex_index]
        tex = self.uvs[index.uv_index] if self.has_uvs else (0.0, 0.0)
        normal = self.normals[index.normal_index] if self.has_normals else (0.0, 0.0, 0.0)
        return position, tex, normal

    def _match_key(self, index: ObjIndex):
        return (
            index.vertex_index,
            index.uv_index if self.has_uvs else None,
            index.normal_index if self.has_normals else None,
        )

    def to_indexed_model(self) -> IndexedModel:
        """Build indexed vertex data, merging identical corners.

        Normals are generated from the faces when the file has none.
        """
        result = IndexedModel()
        normal_model = IndexedModel()
        key_counts = Counter(self._match_key(index) for index in self.obj_indices)
        normal_slots: dict[int, int] = {}
        value_slots: dict[tuple, int] = {}
        index_map: dict[int, int] = {}

        for index in self.obj_indices:
            position, tex, normal = self._attributes(index)

            normal_slot = normal_slots.get(index.vertex_index)
            if normal_slot is None:
                normal_slot = len(normal_model.positions)
                normal_slots[index.vertex_index] = normal_slot
                normal_model.positions.append(position)
                normal_model.tex_coords.append(tex)
                normal_model.normals.append(normal)

            value_key = (
                position,
                tex if self.has_uvs else None,
                normal if self.has_normals else None,
            )
            slot = value_slots.get(value_key) if key_counts[self._match_key(index)] > 1 else None
            if slot is None:
                slot = len(result.positions)
                value_slots.setdefault(value_key, slot)
                result.positions.append(position)
                result.tex_coords.append(tex)
                result.normals.append(normal)

            normal_model.indices.append(normal_slot)
            result.indices.append(slot)
            index_map.setdefault(slot, normal_slot)

        if not self.has_normals:
            normal_model.calc_normals()
            result.normals = [
                normal_model.normals[index_map[slot]] for slot in range(len(result.positions))
            ]
        return result


def parse_obj(text: str) -> ObjModel:
    """Parse OBJ text: ``v``, ``vt``, ``vn`` and ``f`` lines; others are ignored."""
    model = ObjModel()
    for line in text.split("\n"):
        if len(line) < 2:
            continue
        kind, second = line[0], line[1]
        if kind == "v":
            if second == "t":
                model.uvs.append(_fields(line, 3, 2))
            elif second == "n":
                model.normals.append(_fields(line, 2, 3))
            elif second in " \t":
                model.vertices.append(_fields(line, 2, 3))
        elif kind == "f":
            model._add_face(line)
    return model


def load_obj(filename) -> ObjModel:
    """Read and parse an OBJ file."""
    with open(filename, encoding="utf-8", errors="replace") as handle:
        return parse_obj(handle.read())