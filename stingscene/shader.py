"""GLSL program built from a ``.vert`` and ``.frag`` file pair."""

from __future__ import annotations

import os

import numpy as np


class ShaderError(Exception):
    """A shader could not be read, compiled, linked or given a uniform."""


def _default_gl():
    from pyglet import gl

    return gl


def load_shader(filename) -> str:
    """Read a shader source file, ending every line with a newline."""
    try:
        with open(filename, encoding="utf-8", newline="") as handle:
            text = handle.read()
    except OSError as error:
        raise ShaderError(f"Unable to load shader: {os.fspath(filename)}") from error
    return "".join(f"{line}\n" for line in text.split("\n"))


def _components(args, count: int) -> list[float]:
    if len(args) == 1:
        values = np.asarray(args[0], dtype=np.float64).reshape(-1)
    else:
        values = np.asarray(args, dtype=np.float64).reshape(-1)
    if values.size != count:
        raise TypeError(f"expected {count} components, got {values.size}")
    return [float(v) for v in values]


def _matrix(gl, matrix, size: int):
    values = np.asarray(matrix, dtype=np.float32)
    if values.shape != (size, size):
        raise ValueError(f"expected a {size}x{size} matrix, got shape {values.shape}")
    column_major = values.flatten(order="F").tolist()
    return (gl.GLfloat * len(column_major))(*column_major)


class Shader:
    """A linked vertex and fragment shader program."""

    def __init__(self, filename, gl=None) -> None:
        self._gl = gl if gl is not None else _default_gl()
        gl = self._gl
        base = os.fspath(filename)
        self.program = gl.glCreateProgram()
        self.shaders = [
            self._create_shader(load_shader(f"{base}.vert"), gl.GL_VERTEX_SHADER),
            self._create_shader(load_shader(f"{base}.frag"), gl.GL_FRAGMENT_SHADER),
        ]
        for shader in self.shaders:
            gl.glAttachShader(self.program, shader)

        gl.glBindAttribLocation(self.program, 0, b"position")
        gl.glBindAttribLocation(self.program, 1, b"texCoord")

        gl.glLinkProgram(self.program)
        self._check(self.program, gl.GL_LINK_STATUS, True, "Shader program linking failed")
        gl.glValidateProgram(self.program)
        self._check(self.program, gl.GL_VALIDATE_STATUS, True, "Shader program not valid")

        self._transform_location = gl.glGetUniformLocation(self.program, b"transform")

    def __enter__(self) -> Shader:
        return self

    def __exit__(self, *exc_info) -> None:
        self.delete()

    def _create_shader(self, text: str, shader_type) -> int:
        gl = self._gl
        shader = gl.glCreateShader(shader_type)
        if shader == 0:
            raise ShaderError(f"shader creation failed for type {shader_type}")
        encoded = text.encode("utf-8")
        buffer = gl.create_string_buffer(encoded)
        char_pointer = gl.POINTER(gl.GLchar)
        sources = (char_pointer * 1)(gl.cast(buffer, char_pointer))
        lengths = (gl.GLint * 1)(len(encoded))
        gl.glShaderSource(shader, 1, sources, lengths)
        gl.glCompileShader(shader)
        self._check(shader, gl.GL_COMPILE_STATUS, False, "Error compiling shader")
        return shader

    def _check(self, handle: int, flag, is_program: bool, message: str) -> None:
        gl = self._gl
        status = (gl.GLint * 1)()
        if is_program:
            gl.glGetProgramiv(handle, flag, status)
        else:
            gl.glGetShaderiv(handle, flag, status)
        if status[0]:
            return
        log = gl.create_string_buffer(1024)
        if is_program:
            gl.glGetProgramInfoLog(handle, len(log), None, log)
        else:
            gl.glGetShaderInfoLog(handle, len(log), None, log)
        raise ShaderError(f"{message}: '{log.value.decode('utf-8', 'replace')}'")

    def _location(self, name: str, checked: bool = True) -> int:
        location = self._gl.glGetUniformLocation(self.program, name.encode("utf-8"))
        if checked and location == -1:
            raise ShaderError(f"Unable to load uniform: {name}")
        return location

    def bind(self) -> None:
        """Make this program the current one."""
        self._gl.glUseProgram(self.program)

    def update(self, transform, camera) -> None:
        """Upload the model-view-projection matrix to the ``transform`` uniform."""
        mvp = camera.view_projection() @ transform.model()
        self._gl.glUniformMatrix4fv(
            self._transform_location, 1, self._gl.GL_FALSE, _matrix(self._gl, mvp, 4)
        )

    def set_bool(self, name: str, value) -> None:
        self._gl.glUniform1i(self._location(name), int(bool(value)))

    def set_int(self, name: str, value) -> None:
        self._gl.glUniform1i(self._location(name), int(value))

    def set_float(self, name: str, value) -> None:
        """Set a float uniform; a missing uniform is silently ignored."""
        self._gl.glUniform1f(self._location(name, checked=False), float(value))

    def set_vec2(self, name: str, *args) -> None:
        """Set from one 2-vector or two numbers."""
        self._gl.glUniform2f(self._location(name), *_components(args, 2))

    def set_vec3(self, name: str, *args) -> None:
        """Set from one 3-vector or three numbers."""
        self._gl.glUniform3f(self._location(name), *_components(args, 3))

    def set_vec4(self, name: str, *args) -> None:
        """Set from one 4-vector or four numbers."""
        self._gl.glUniform4f(self._location(name), *_components(args, 4))

    def set_mat2(self, name: str, matrix) -> None:
        gl = self._gl
        gl.glUniformMatrix2fv(self._location(name), 1, gl.GL_FALSE, _matrix(gl, matrix, 2))

    def set_mat3(self, name: str, matrix) -> None:
        gl = self._gl
        gl.glUniformMatrix3fv(self._location(name), 1, gl.GL_FALSE, _matrix(gl, matrix, 3))

    def set_mat4(self, name: str, matrix) -> None:
        gl = self._gl
        gl.glUniformMatrix4fv(self._location(name), 1, gl.GL_FALSE, _matrix(gl, matrix, 4))

    def delete(self) -> None:
        """Detach and delete the shaders and the program."""
        gl = self._gl
        for shader in self.shaders:
            gl.glDetachShader(self.program, shader)
            gl.glDeleteShader(shader)
        self.shaders = []
        gl.glDeleteProgram(self.program)