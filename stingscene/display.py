"""The game window and its OpenGL state."""

from __future__ import annotations


class DisplayError(Exception):
    """The window or its rendering context could not be set up."""


def _default_gl():
    from pyglet import gl

    return gl


def _pyglet_window(width, height, title):
    import pyglet

    config = pyglet.gl.Config(
        red_size=8, green_size=8, blue_size=8, depth_size=24, double_buffer=True
    )
    return pyglet.window.Window(
        width=int(width), height=int(height), caption=title, config=config
    )


class Display:
    """A double-buffered window with depth testing and back-face culling."""

    def __init__(
        self,
        width: float = 1024,
        height: float = 768,
        title: str = "Game Window",
        gl=None,
        window_factory=None,
    ) -> None:
        self.width = width
        self.height = height
        self.title = title
        self.window = None
        self._gl = gl
        self._window_factory = window_factory or _pyglet_window

    def __enter__(self) -> Display:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def aspect(self) -> float:
        return self.width / self.height

    def _api(self):
        if self._gl is None:
            self._gl = _default_gl()
        return self._gl

    def init_display(self) -> None:
        """Create the window and set the initial rendering state."""
        try:
            self.window = self._window_factory(self.width, self.height, self.title)
        except Exception as error:
            raise DisplayError("window failed to create") from error
        if self.window is None:
            raise DisplayError("window failed to create")
        gl = self._api()
        gl.glEnable(gl.GL_DEPTH_TEST)
        gl.glEnable(gl.GL_CULL_FACE)
        gl.glClearColor(0.0, 1.0, 1.0, 1.0)

    def swap_buffer(self) -> None:
        """Show the frame that was drawn."""
        if self.window is None:
            raise DisplayError("display is not initialised")
        self.window.flip()

    def clear_display(self, r: float, g: float, b: float, a: float) -> None:
        """Clear the colour and depth buffers to the given colour."""
        gl = self._api()
        gl.glClearColor(r, g, b, a)
        gl.glClear(gl.GL_COLOR_BUFFER_BIT | gl.GL_DEPTH_BUFFER_BIT)

    def close(self) -> None:
        """Close the window if it is open."""
        if self.window is not None:
            self.window.close()
            self.window = None