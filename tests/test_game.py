from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import numpy as np
import pytest

from stingscene.camera import Camera
from stingscene.display import Display
from stingscene.game import (
    KEY_1,
    KEY_A,
    KEY_DOWN,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_S,
    KEY_UP,
    KEY_W,
    GameState,
    MainGame,
)


def _res(name):
    return str(Path("res") / name)


def make_scene():
    gl = MagicMock()
    window = MagicMock()
    display = Display(gl=gl, window_factory=lambda w, h, t: window)
    meshes = []
    shaders = {}
    textures = {}

    def mesh_factory():
        mesh = MagicMock()
        meshes.append(mesh)
        return mesh

    game = MainGame(
        res_dir="res",
        display=display,
        gl=gl,
        mesh_factory=mesh_factory,
        shader_factory=lambda path: shaders.setdefault(path, MagicMock()),
        texture_factory=lambda path: textures.setdefault(path, MagicMock()),
    )
    return SimpleNamespace(
        game=game, gl=gl, window=window, meshes=meshes, shaders=shaders, textures=textures
    )


def reference_camera():
    return Camera(pos=(0.0, 0.0, -10.0), fov=70.0, aspect=1024 / 768, z_near=0.01, z_far=1000.0)


@pytest.mark.parametrize(
    "symbol, method, amount",
    [
        (KEY_RIGHT, "move_right", -0.1),
        (KEY_LEFT, "move_right", 0.1),
        (KEY_UP, "move_forward", 0.5),
        (KEY_DOWN, "move_forward", -0.5),
        (KEY_W, "pitch", -0.1),
        (KEY_S, "pitch", 0.1),
        (KEY_A, "rotate_y", 0.1),
    ],
)
def test_keys_move_camera(symbol, method, amount):
    scene = make_scene()
    scene.game.process_key(symbol)
    expected = reference_camera()
    getattr(expected, method)(amount)
    assert np.allclose(scene.game.camera.pos, expected.pos)
    assert np.allclose(scene.game.camera.forward, expected.forward)
    assert np.allclose(scene.game.camera.up, expected.up)


def test_unknown_key_changes_nothing():
    scene = make_scene()
    before = scene.game.camera.view_projection()
    scene.game.process_key(ord("z"))
    assert np.allclose(scene.game.camera.view_projection(), before)
    assert scene.game.press1 is False


def test_key_one_toggles_mode_and_counter_direction():
    game = make_scene().game
    game.advance_counter()
    assert game.counter == pytest.approx(-0.05)
    game.process_key(KEY_1)
    assert game.press1 is True
    assert game.flip_counter is True
    game.advance_counter()
    game.advance_counter()
    assert game.counter == pytest.approx(0.05)
    game.process_key(KEY_1)
    assert game.press1 is False


def test_init_systems_loads_resources():
    scene = make_scene()
    scene.game.init_systems()
    assert len(scene.meshes) == 4
    scene.meshes[0].load_model.assert_called_once_with(_res("monkey3.obj"))
    scene.meshes[1].load_model.assert_called_once_with(_res("Sting.obj"))
    scene.meshes[2].load_model.assert_called_once_with(_res("Sting.obj"))
    scene.meshes[3].load_model.assert_called_once_with(_res("Satellite.obj"))
    assert _res("Toon") in scene.shaders
    assert _res("Rainbow.jpg") in scene.textures
    scene.gl.glEnable.assert_any_call(scene.gl.GL_DEPTH_TEST)


def test_window_handlers_drive_the_game():
    scene = make_scene()
    scene.game.init_systems()
    handlers = scene.window.push_handlers.call_args.kwargs
    handlers["on_key_press"](KEY_UP, 0)
    expected = reference_camera()
    expected.move_forward(0.5)
    assert np.allclose(scene.game.camera.pos, expected.pos)
    assert handlers["on_close"]() is True
    assert scene.game.state is GameState.EXIT


def test_draw_game_default_mode():
    scene = make_scene()
    game = scene.game
    game.init_systems()
    game.draw_game()
    basic = scene.shaders[_res("shader")]
    updated = [c.args[0] for c in basic.update.call_args_list]
    assert any(t is game.transforms[0] for t in updated)
    assert any(t is game.transforms[3] for t in updated)
    scene.shaders[_res("Toon")].bind.assert_called_once()
    scene.shaders[_res("Plaid")].bind.assert_not_called()
    for mesh in scene.meshes[:4]:
        mesh.draw.assert_called_once()
    plane = scene.meshes[4]
    plane.draw_plane.assert_called_once()
    plane.delete.assert_called_once()
    assert game.counter == pytest.approx(-0.05)
    scene.gl.glClearColor.assert_called_with(0.0, 0.0, 0.0, 1.0)
    scene.window.flip.assert_called_once()


def test_draw_game_rim_uniforms():
    scene = make_scene()
    scene.game.init_systems()
    scene.game.draw_game()
    rim = scene.shaders[_res("Rim")]
    rim.set_float.assert_any_call("rimPower", 3.0)
    cam_calls = [c for c in rim.set_vec3.call_args_list if c.args[0] == "camPos"]
    assert cam_calls
    assert np.allclose(cam_calls[-1].args[1], scene.game.camera.pos)


def test_plane_texture_coordinates_follow_counter():
    scene = make_scene()
    game = scene.game
    game.init_systems()
    game.counter = 0.25
    game.draw_game()
    vertices = scene.meshes[4].init_plane.call_args.args[0]
    assert [v.tex_coord for v in vertices] == [
        (0.25, 0.0),
        (0.0, 0.25),
        (-0.25, 0.0),
        (0.0, -0.25),
    ]


def test_draw_game_alternate_mode():
    scene = make_scene()
    game = scene.game
    game.init_systems()
    game.process_key(KEY_1)
    game.draw_game()
    game.draw_game()
    assert np.allclose(game.transforms[1].rot, -0.05)
    plaid = scene.shaders[_res("Plaid")]
    assert any(c.args[0] is game.transforms[0] for c in plaid.update.call_args_list)
    scene.shaders[_res("Toon")].bind.assert_not_called()
    scene.shaders[_res("Flat")].bind.assert_called()
    assert game.counter == pytest.approx(0.1)


def test_run_stops_on_close_and_closes_window():
    scene = make_scene()
    game = scene.game
    frames = []

    def dispatch():
        frames.append(1)
        if len(frames) > 1:
            game.state = GameState.EXIT

    scene.window.dispatch_events.side_effect = dispatch
    game.run()
    assert scene.window.flip.call_count == 1
    scene.window.close.assert_called_once()
    assert game.display.window is None