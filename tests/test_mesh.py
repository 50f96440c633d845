import numpy as np
import pytest

from stingscene.mesh import Mesh, Vertex
from stingscene.obj_loader import IndexedModel, load_obj


class _ArrayType(type):
    def __mul__(cls, count):
        def make(*values):
            return list(values) + [0] * (count - len(values))

        return make


class _UInt(metaclass=_ArrayType):
    pass


class FakeGL:
    GLuint = _UInt

    def __init__(self):
        self.calls = []
        self.uploads = {}
        self.bound = {}
        self._constants = {}
        self._next_id = 0

    def __getattr__(self, name):
        if name.startswith("GL_"):
            return self._constants.setdefault(name, 0x10000 + 64 * len(self._constants))
        if name.startswith("gl"):
            return lambda *args: self.calls.append((name, args))
        raise AttributeError(name)

    def _new_id(self):
        self._next_id += 1
        return self._next_id

    def glGenVertexArrays(self, count, handles):
        for i in range(count):
            handles[i] = self._new_id()

    def glGenBuffers(self, count, handles):
        for i in range(count):
            handles[i] = self._new_id()

    def glBindBuffer(self, target, handle):
        self.bound[target] = handle

    def glBufferData(self, target, size, data, usage):
        self.uploads[self.bound[target]] = bytes(data[:size])

    def called(self, name):
        return [args for call, args in self.calls if call == name]


def floats(data, width):
    return np.frombuffer(data, dtype=np.float32).reshape(-1, width)


@pytest.fixture
def gl():
    return FakeGL()


@pytest.fixture
def square():
    return [
        Vertex((-5.0, 0.0, 0.0), (0.5, 0.0)),
        Vertex((-5.0, 5.0, 0.0), (0.0, 0.5)),
        Vertex((5.0, 5.0, 0.0), (-0.5, 0.0)),
        Vertex((5.0, -5.0, 0.0), (0.0, -0.5)),
    ]


def test_vertex_normal_defaults_to_zero():
    assert Vertex((1, 2, 3), (0, 1)).normal == (0.0, 0.0, 0.0)


def test_vertex_rejects_wrong_component_count():
    with pytest.raises(ValueError):
        Vertex((1, 2), (0, 1))


def test_init_plane_uploads_positions_and_tex_coords(gl, square):
    mesh = Mesh(gl=gl)
    mesh.init_plane(square)
    assert mesh.draw_count == len(square)
    positions = floats(gl.uploads[mesh.vertex_array_buffers[0]], 3)
    tex_coords = floats(gl.uploads[mesh.vertex_array_buffers[1]], 2)
    np.testing.assert_allclose(positions, [v.pos for v in square])
    np.testing.assert_allclose(tex_coords, [v.tex_coord for v in square])


def test_init_plane_without_vertices_fails(gl):
    with pytest.raises(ValueError):
        Mesh(gl=gl).init_plane([])


def test_draw_plane_draws_quads(gl, square):
    mesh = Mesh(gl=gl)
    mesh.init_plane(square)
    mesh.draw_plane()
    assert gl.called("glDrawArrays") == [(gl.GL_QUADS, 0, len(square))]


def test_init_model_uploads_indices(gl):
    model = IndexedModel(
        positions=[(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)],
        tex_coords=[(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)],
        normals=[(0.0, 0.0, 1.0)] * 3,
        indices=[0, 1, 2],
    )
    mesh = Mesh(gl=gl)
    mesh.init_model(model)
    assert mesh.draw_count == 3
    indices = np.frombuffer(gl.uploads[mesh.vertex_array_buffers[3]], dtype=np.uint32)
    assert indices.tolist() == [0, 1, 2]
    normals = floats(gl.uploads[mesh.vertex_array_buffers[2]], 3)
    np.testing.assert_allclose(normals, model.normals)


def test_init_model_without_positions_fails(gl):
    with pytest.raises(ValueError):
        Mesh(gl=gl).init_model(IndexedModel())


def test_init_keeps_vertex_normals(gl):
    vertices = [
        Vertex((0, 0, 0), (0, 0), (0, 1, 0)),
        Vertex((1, 0, 0), (1, 0), (0, 1, 0)),
        Vertex((0, 0, 1), (0, 1), (0, 1, 0)),
    ]
    mesh = Mesh(gl=gl)
    mesh.init(vertices, [0, 2, 1])
    normals = floats(gl.uploads[mesh.vertex_array_buffers[2]], 3)
    np.testing.assert_allclose(normals, [v.normal for v in vertices])
    indices = np.frombuffer(gl.uploads[mesh.vertex_array_buffers[3]], dtype=np.uint32)
    assert indices.tolist() == [0, 2, 1]


def test_draw_issues_indexed_triangles(gl):
    mesh = Mesh(gl=gl)
    mesh.init([Vertex((0, 0, 0), (0, 0)), Vertex((1, 0, 0), (1, 0)), Vertex((0, 1, 0), (0, 1))], [0, 1, 2])
    mesh.draw()
    assert gl.called("glDrawElements") == [(gl.GL_TRIANGLES, 3, gl.GL_UNSIGNED_INT, 0)]
    assert gl.called("glBindVertexArray")[-1] == (0,)


def test_draw_before_upload_fails(gl):
    with pytest.raises(RuntimeError):
        Mesh(gl=gl).draw()


def test_load_model_matches_obj_loader(gl, tmp_path):
    path = tmp_path / "quad.obj"
    path.write_text("v 0 0 0\nv 1 0 0\nv 1 1 0\nv 0 1 0\nf 1 2 3 4\n")
    mesh = Mesh(gl=gl)
    mesh.load_model(path)
    expected = load_obj(path).to_indexed_model()
    assert mesh.draw_count == len(expected.indices)
    indices = np.frombuffer(gl.uploads[mesh.vertex_array_buffers[3]], dtype=np.uint32)
    assert indices.tolist() == expected.indices
    positions = floats(gl.uploads[mesh.vertex_array_buffers[0]], 3)
    np.testing.assert_allclose(positions, expected.positions)


def test_delete_frees_vertex_array(gl, square):
    mesh = Mesh(gl=gl)
    mesh.init_plane(square)
    vao = mesh.vertex_array_object
    buffers = list(mesh.vertex_array_buffers)
    mesh.delete()
    (count, handles), = gl.called("glDeleteVertexArrays")
    assert (count, handles[0]) == (1, vao)
    (buffer_count, buffer_handles), = gl.called("glDeleteBuffers")
    assert (buffer_count, list(buffer_handles)) == (4, buffers)
    assert mesh.vertex_array_object is None


def test_context_manager_deletes(gl, square):
    with Mesh(gl=gl) as mesh:
        mesh.init_plane(square)
    assert len(gl.called("glDeleteVertexArrays")) == 1