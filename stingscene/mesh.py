"""Vertex data uploaded to GPU buffers and drawn as triangles or a quad."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from stingscene.obj_loader import IndexedModel, load_obj

_POSITION = 0
_TEX_COORD = 1
_NORMAL = 2
_INDEX = 3
_NUM_BUFFERS = 4


def _default_gl():
    from pyglet import gl

    return gl


def _floats(values, width: int) -> tuple[float, ...]:
    result = tuple(float(v) for v in values)
    if len(result) != width:
        raise ValueError(f"expected {width} components, got {len(result)}")
    return result


@dataclass(frozen=True)
class Vertex:
    """A corner with a position, a texture coordinate and a normal."""

    pos: tuple[float, float, float]
    tex_coord: tuple[float, float]
    normal: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pos", _floats(self.pos, 3))
        object.__setattr__(self, "tex_coord", _floats(self.tex_coord, 2))
        object.__setattr__(self, "normal", _floats(self.normal, 3))


class Mesh:
    """A vertex array object and its buffers on the GPU."""

    def __init__(self, gl=None) -> None:
        self._gl = gl if gl is not None else _default_gl()
        self.vertex_array_object: int | None = None
        self.vertex_array_buffers: list[int] = []
        self.draw_count = 0

    def __enter__(self) -> Mesh:
        return self

    def __exit__(self, *exc_info) -> None:
        self.delete()

    def _handles(self, count: int, values=()):
        return (self._gl.GLuint * count)(*values)

    def _generate(self) -> None:
        gl = self._gl
        vao = self._handles(1)
        gl.glGenVertexArrays(1, vao)
        self.vertex_array_object = vao[0]
        gl.glBindVertexArray(self.vertex_array_object)
        buffers = self._handles(_NUM_BUFFERS)
        gl.glGenBuffers(_NUM_BUFFERS, buffers)
        self.vertex_array_buffers = list(buffers)

    def _upload(self, target, slot: int, array: np.ndarray) -> None:
        gl = self._gl
        data = np.ascontiguousarray(array).tobytes()
        gl.glBindBuffer(target, self.vertex_array_buffers[slot])
        gl.glBufferData(target, len(data), data, gl.GL_STATIC_DRAW)

    def _attribute(self, location: int, size: int) -> None:
        gl = self._gl
        gl.glEnableVertexAttribArray(location)
        gl.glVertexAttribPointer(location, size, gl.GL_FLOAT, gl.GL_FALSE, 0, 0)

    def load_model(self, filename) -> None:
        """Load an OBJ file and upload it."""
        self.init_model(load_obj(filename).to_indexed_model())

    def init_model(self, model: IndexedModel) -> None:
        """Upload positions, texture coordinates, normals and indices."""
        if not model.positions:
            raise ValueError("model has no positions")
        gl = self._gl
        self.draw_count = len(model.indices)
        self._generate()

        self._upload(
            gl.GL_ARRAY_BUFFER, _POSITION, np.asarray(model.positions, np.float32).reshape(-1, 3)
        )
        self._attribute(0, 3)
        self._upload(
            gl.GL_ARRAY_BUFFER, _TEX_COORD, np.asarray(model.tex_coords, np.float32).reshape(-1, 2)
        )
        self._attribute(1, 2)
        self._upload(
            gl.GL_ARRAY_BUFFER, _NORMAL, np.asarray(model.normals, np.float32).reshape(-1, 3)
        )
        self._attribute(2, 3)
        self._upload(
            gl.GL_ELEMENT_ARRAY_BUFFER, _INDEX, np.asarray(model.indices, np.uint32)
        )
        gl.glBindVertexArray(0)

    def init_plane(self, vertices) -> None:
        """Upload positions and texture coordinates of vertices drawn as quads."""
        vertices = list(vertices)
        if not vertices:
            raise ValueError("a plane needs vertices")
        gl = self._gl
        self.draw_count = len(vertices)
        self._generate()

        positions = np.array([v.pos for v in vertices], dtype=np.float32)
        tex_coords = np.array([v.tex_coord for v in vertices], dtype=np.float32)
        self._upload(gl.GL_ARRAY_BUFFER, _POSITION, positions)
        self._attribute(0, 3)
        self._upload(gl.GL_ARRAY_BUFFER, _TEX_COORD, tex_coords)
        self._attribute(1, 2)
        gl.glBindVertexArray(0)

    def init(self, vertices, indices) -> None:
        """Upload vertices with their normals and an index list."""
        vertices = list(vertices)
        model = IndexedModel(
            positions=[v.pos for v in vertices],
            tex_coords=[v.tex_coord for v in vertices],
            normals=[v.normal for v in vertices],
            indices=[int(i) for i in indices],
        )
        self.init_model(model)

    def _require_data(self) -> None:
        if self.vertex_array_object is None:
            raise RuntimeError("mesh has no uploaded data")

    def draw(self) -> None:
        """Draw the indexed triangles."""
        self._require_data()
        gl = self._gl
        gl.glBindVertexArray(self.vertex_array_object)
        gl.glDrawElements(gl.GL_TRIANGLES, self.draw_count, gl.GL_UNSIGNED_INT, 0)
        gl.glBindVertexArray(0)

    def draw_plane(self) -> None:
        """Draw the vertices as quads."""
        self._require_data()
        gl = self._gl
        gl.glBindVertexArray(self.vertex_array_object)
        gl.glDrawArrays(gl.GL_QUADS, 0, self.draw_count)
        gl.glBindVertexArray(0)

    def delete(self) -> None:
        """Free the vertex array object and its buffers."""
        if self.vertex_array_object is None:
            return
        gl = self._gl
        gl.glDeleteVertexArrays(1, self._handles(1, (self.vertex_array_object,)))
        count = len(self.vertex_array_buffers)
        gl.glDeleteBuffers(count, self._handles(count, self.vertex_array_buffers))
        self.vertex_array_object = None
        self.vertex_array_buffers = []