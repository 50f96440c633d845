"""The demo scene: models, shaders and textures drawn around a movable camera."""

from __future__ import annotations

import argparse
import enum
import os
from pathlib import Path

import numpy as np

from stingscene.camera import Camera
from stingscene.display import Display
from stingscene.mesh import Mesh, Vertex
from stingscene.shader import Shader
from stingscene.texture import Texture
from stingscene.transform import Transform, look_at

# Key symbols as reported by the window's key events.
KEY_LEFT = 0xFF51
KEY_UP = 0xFF52
KEY_RIGHT = 0xFF53
KEY_DOWN = 0xFF54
KEY_A = ord("a")
KEY_D = ord("d")
KEY_S = ord("s")
KEY_W = ord("w")
KEY_1 = ord("1")

_COUNTER_STEP = 0.05

_MODELS = ("monkey3.obj", "Sting.obj", "Sting.obj", "Satellite.obj")
_SHADERS = ("shader", "Rim", "Plaid", "Flat", "Toon")
_TEXTURES = ("bricks.jpg", "water.jpg", "Rainbow.jpg", "Metal.jpg", "brickwall.jpg")


def _default_gl():
    from pyglet import gl

    return gl


class GameState(enum.Enum):
    PLAY = enum.auto()
    EXIT = enum.auto()


class MainGame:
    """Owns the window, the camera and the scene, and runs the frame loop."""

    def __init__(
        self,
        res_dir="../res",
        display=None,
        gl=None,
        mesh_factory=None,
        shader_factory=None,
        texture_factory=None,
    ) -> None:
        self.res_dir = Path(res_dir)
        self._gl = gl
        self.display = display if display is not None else Display(gl=gl)
        self._mesh_factory = mesh_factory or (lambda: Mesh(gl=self._api()))
        self._shader_factory = shader_factory or (lambda path: Shader(path, gl=self._api()))
        self._texture_factory = texture_factory or (lambda path: Texture(path, gl=self._api()))

        self.state = GameState.PLAY
        self.counter = 0.0
        self.press1 = False
        self.flip_counter = False
        self.camera = self._new_camera()
        self.transforms = [Transform() for _ in range(5)]
        self.meshes: list = []
        self.shaders: dict = {}
        self.textures: dict = {}

    def _api(self):
        if self._gl is None:
            self._gl = _default_gl()
        return self._gl

    def _new_camera(self) -> Camera:
        return Camera(
            pos=(0.0, 0.0, -10.0),
            fov=70.0,
            aspect=self.display.aspect,
            z_near=0.01,
            z_far=1000.0,
        )

    def _resource(self, name: str) -> str:
        return str(self.res_dir / name)

    def run(self) -> None:
        """Set everything up and draw frames until the window is closed."""
        self.init_systems()
        try:
            while self.state is not GameState.EXIT:
                self.display.window.dispatch_events()
                if self.state is GameState.EXIT:
                    break
                self.draw_game()
        finally:
            self.display.close()

    def init_systems(self) -> None:
        """Open the window, load the models, shaders and textures, place the camera."""
        self.display.init_display()
        self.display.window.push_handlers(
            on_key_press=self._on_key_press, on_close=self._on_close
        )
        self.meshes = []
        for name in _MODELS:
            mesh = self._mesh_factory()
            mesh.load_model(self._resource(name))
            self.meshes.append(mesh)
        self.shaders = {name: self._shader_factory(self._resource(name)) for name in _SHADERS}
        self.textures = {
            name: self._texture_factory(self._resource(name)) for name in _TEXTURES
        }
        self.camera = self._new_camera()

    def _on_key_press(self, symbol, modifiers) -> bool:
        self.process_key(symbol)
        return True

    def _on_close(self) -> bool:
        self.state = GameState.EXIT
        return True

    def process_key(self, symbol: int) -> None:
        """Move or turn the camera, or switch the shading mode with ``1``."""
        camera = self.camera
        actions = {
            KEY_RIGHT: lambda: camera.move_right(-0.1),
            KEY_LEFT: lambda: camera.move_right(0.1),
            KEY_UP: lambda: camera.move_forward(0.5),
            KEY_DOWN: lambda: camera.move_forward(-0.5),
            KEY_W: lambda: camera.pitch(-0.1),
            KEY_S: lambda: camera.pitch(0.1),
            KEY_D: lambda: camera.rotate_y(-0.1),
            KEY_A: lambda: camera.rotate_y(0.1),
            KEY_1: self._toggle_mode,
        }
        action = actions.get(symbol)
        if action is not None:
            action()

    def _toggle_mode(self) -> None:
        self.press1 = not self.press1
        self.flip_counter = not self.flip_counter

    def advance_counter(self) -> None:
        """Step the animation counter up or down depending on the mode."""
        if self.flip_counter:
            self.counter += _COUNTER_STEP
        else:
            self.counter -= _COUNTER_STEP

    def _square_vertices(self) -> list[Vertex]:
        c = self.counter
        return [
            Vertex((-5.0, 0.0, 0.0), (c, 0.0)),
            Vertex((-5.0, 5.0, 0.0), (0.0, c)),
            Vertex((5.0, 5.0, 0.0), (-c, 0.0)),
            Vertex((5.0, -5.0, 0.0), (0.0, -c)),
        ]

    def _use(self, shader, transform, link=None) -> None:
        shader.bind()
        if link is not None:
            link(shader, transform)
        shader.update(transform, self.camera)

    def _face_camera(self, transform: Transform) -> None:
        view = look_at(self.camera.pos, transform.pos, self.camera.up)
        looked = np.linalg.inv(view) @ np.append(self.camera.forward, 1.0)
        transform.rot = looked[:3]

    def draw_game(self) -> None:
        """Draw one frame of the scene and show it."""
        self.display.clear_display(0.0, 0.0, 0.0, 1.0)
        square = self._mesh_factory()
        square.init_plane(self._square_vertices())

        basic = self.shaders["shader"]
        rim = self.shaders["Rim"]
        plaid = self.shaders["Plaid"]
        flat = self.shaders["Flat"]
        toon = self.shaders["Toon"]
        c = self.counter
        t1, t2, t3, t4, t5 = self.transforms

        t1.pos = (0.0, 0.0, 0.0)
        t1.rot = (0.0, c * 0.1, 0.0)
        t1.scale = (1.0, 1.0, 1.0)
        self.textures["bricks.jpg"].bind(0)
        self._use(plaid if self.press1 else basic, t1)
        self.meshes[0].draw()

        t2.pos = (5.0, 0.0, 0.0)
        t2.scale = (0.1, 0.1, 0.1)
        self.textures["water.jpg"].bind(0)
        if self.press1:
            t2.rot = (-c, -c, -c)
            self._use(rim, t2, self._link_rim)
        else:
            self._face_camera(t2)
            self._use(toon, t2, self._link_toon)
        self.meshes[1].draw()

        t3.pos = (-5.0, 0.0, -0.3)
        t3.rot = (c, c, c)
        t3.scale = (0.1, 0.1, 0.1)
        self.textures["brickwall.jpg"].bind(0)
        if self.press1:
            self._use(flat, t3, self._link_flat)
        else:
            self._use(basic, t3)
        self.meshes[2].draw()

        t5.pos = (3.0, 3.0, 3.0)
        t5.rot = (0.0, c * 0.1, 0.0)
        t5.scale = (1.0, 1.0, 1.0)
        self.textures["Metal.jpg"].bind(0)
        if self.press1:
            self._use(plaid, t5)
        else:
            self._use(rim, t5, self._link_rim)
        self.meshes[3].draw()

        t4.pos = (0.0, -3.0, -3.0)
        t4.rot = (1.5, 0.0, 0.0)
        t4.scale = (10.0, 10.0, 10.0)
        self.textures["Rainbow.jpg"].bind(0)
        self._use(basic, t4)
        square.draw_plane()
        square.delete()

        self.advance_counter()
        self.display.swap_buffer()

    def _enable_blend(self) -> None:
        gl = self._api()
        gl.glEnable(gl.GL_BLEND)
        gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)

    def _link_rim(self, shader, transform: Transform) -> None:
        self._enable_blend()
        shader.set_mat4("modelMatrix", transform.model())
        shader.set_float("rimPower", 3.0)
        shader.set_vec3("rimColor", (0.8, 0.0, 0.0))
        shader.set_vec3("camPos", self.camera.pos)

    def _link_fog(self, shader) -> None:
        shader.set_float("maxDist", 20.0)
        shader.set_float("minDist", 0.0)
        shader.set_vec3("fogColor", (0.0, 0.0, 0.0))

    def _link_toon(self, shader, transform: Transform) -> None:
        shader.set_mat4("modelMatrix", transform.model())
        shader.set_vec3("lightDir", (0.5, 0.5, 0.5))

    def _link_bump(self, shader, texture, bump) -> None:
        gl = self._api()
        diffuse_location = gl.glGetUniformLocation(shader.program, b"diffuse")
        normal_location = gl.glGetUniformLocation(shader.program, b"normalT")
        gl.glActiveTexture(gl.GL_TEXTURE0)
        gl.glBindTexture(gl.GL_TEXTURE_2D, texture.id)
        gl.glUniform1i(diffuse_location, 0)
        gl.glActiveTexture(gl.GL_TEXTURE1)
        gl.glBindTexture(gl.GL_TEXTURE_2D, bump.normal_id)
        gl.glUniform1i(normal_location, 1)

    def _link_plaid(self, shader, transform: Transform) -> None:
        self._enable_blend()

    def _link_flat(self, shader, transform: Transform) -> None:
        self._enable_blend()


def main(argv=None) -> int:
    """Open the scene window and run until it is closed."""
    parser = argparse.ArgumentParser(description="Render the demo scene.")
    parser.add_argument(
        "--res",
        default=os.path.join("..", "res"),
        help="directory holding models, shaders and textures",
    )
    args = parser.parse_args(argv)
    MainGame(res_dir=args.res).run()
    return 0