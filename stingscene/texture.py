"""Images uploaded as repeating, linearly filtered 2D textures."""

from __future__ import annotations

from PIL import Image

_MAX_UNIT = 31


def _default_gl():
    from pyglet import gl

    return gl


def _handles(gl, count: int, values=()):
    """An array of texture names in the form the GL binding accepts."""
    uint = getattr(gl, "GLuint", None)
    if uint is None:
        # Bindings without their own integer types take plain sequences.
        return list(values) + [0] * (count - len(values))
    return (uint * count)(*values)


def load_image(filename) -> tuple[int, int, bytes]:
    """Read an image as RGBA rows from the top left: ``(width, height, data)``."""
    with Image.open(filename) as image:
        rgba = image.convert("RGBA")
        return rgba.width, rgba.height, rgba.tobytes()


class Texture:
    """A texture loaded from an image file, with an optional normal map."""

    def __init__(self, filename, gl=None) -> None:
        self._gl = gl if gl is not None else _default_gl()
        self.id = self._upload(filename, self._gl.GL_RGBA)
        self.normal_id: int | None = None

    def __enter__(self) -> Texture:
        return self

    def __exit__(self, *exc_info) -> None:
        self.delete()

    def _upload(self, filename, internal_format) -> int:
        gl = self._gl
        width, height, data = load_image(filename)
        handle = _handles(gl, 1)
        gl.glGenTextures(1, handle)
        gl.glBindTexture(gl.GL_TEXTURE_2D, handle[0])

        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_WRAP_S, gl.GL_REPEAT)
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_WRAP_T, gl.GL_REPEAT)
        gl.glTexParameterf(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MIN_FILTER, gl.GL_LINEAR)
        gl.glTexParameterf(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MAG_FILTER, gl.GL_LINEAR)

        gl.glTexImage2D(
            gl.GL_TEXTURE_2D, 0, internal_format, width, height, 0,
            gl.GL_RGBA, gl.GL_UNSIGNED_BYTE, data,
        )
        return handle[0]

    def load_normals(self, filename) -> None:
        """Load a normal map into a second texture."""
        self.normal_id = self._upload(filename, self._gl.GL_RGB)

    def bind(self, unit: int) -> None:
        """Bind the texture to one of the 32 texture units."""
        if not 0 <= unit <= _MAX_UNIT:
            raise ValueError(f"texture unit must be between 0 and {_MAX_UNIT}, got {unit}")
        gl = self._gl
        gl.glActiveTexture(gl.GL_TEXTURE0 + unit)
        gl.glBindTexture(gl.GL_TEXTURE_2D, self.id)

    def delete(self) -> None:
        """Free the texture."""
        self._gl.glDeleteTextures(1, _handles(self._gl, 1, (self.id,)))