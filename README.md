# stingscene

A small interactive 3D scene rendered with OpenGL through pyglet. It loads
Wavefront OBJ models, builds GLSL programs from vertex/fragment shader file
pairs, uploads images as textures and lets you fly a camera around the scene.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running the scene

```
stingscene
```

By default the scene reads its files from `../res`, relative to the working
directory. Point it somewhere else with `--res`:

```
stingscene --res path/to/res
```

The resource directory must hold:

- models: `monkey3.obj`, `Sting.obj`, `Satellite.obj`
- shader pairs (`<name>.vert` and `<name>.frag`): `shader`, `Rim`, `Plaid`,
  `Flat`, `Toon`
- textures: `bricks.jpg`, `water.jpg`, `Rainbow.jpg`, `Metal.jpg`,
  `brickwall.jpg`

The scene draws four models and a textured quad floor. An animation counter
drives the models' rotation and the floor's texture coordinates.

### Controls

| Key          | Action                                               |
|--------------|------------------------------------------------------|
| Up / Down    | move the camera forward / back                       |
| Left / Right | strafe left / right                                  |
| W / S        | pitch the camera                                     |
| A / D        | turn the camera about the vertical axis              |
| 1            | switch the shader set and reverse the animation      |

Close the window to quit.

## Using the pieces

The building blocks can be used on their own:

- `stingscene.transform`: `Transform` (position, Euler rotation in radians,
  scale) with its `model()` matrix, and the matrix helpers `translate`,
  `scale_matrix`, `rotation`, `perspective` and `look_at`. Matrices are 4x4
  numpy arrays acting on column vectors.
- `stingscene.camera`: `Camera` with `view_projection()`, `move_forward`,
  `move_right`, `pitch` and `rotate_y`.
- `stingscene.obj_loader`: `load_obj(filename)` or `parse_obj(text)` give an
  `ObjModel`; its `to_indexed_model()` returns an `IndexedModel` with merged
  vertices, computing smooth normals with `calc_normals()` when the file has
  none. `parse_index(token)` parses one face corner such as `3/5/7`.
- `stingscene.mesh`: `Vertex` and `Mesh` (`load_model`, `init_model`,
  `init`, `init_plane`, `draw`, `draw_plane`, `delete`).
- `stingscene.shader`: `Shader` (`bind`, `update`, `set_bool`, `set_int`,
  `set_float`, `set_vec2`/`3`/`4`, `set_mat2`/`3`/`4`, `delete`),
  `load_shader` and `ShaderError`, raised when a file cannot be read, a
  shader does not compile or link, or a uniform is missing (`set_float`
  ignores missing uniforms).
- `stingscene.texture`: `Texture` (`bind`, `load_normals`, `delete`) and
  `load_image`. `bind` accepts texture units 0 to 31.
- `stingscene.display`: `Display` (`init_display`, `clear_display`,
  `swap_buffer`, `close`) and `DisplayError`.
- `stingscene.game`: `MainGame`, `GameState` and the `main` entry point.

`Mesh`, `Shader`, `Texture` and `Display` can be used as context managers
that free their resources on exit.

```python
from stingscene.obj_loader import parse_obj

model = parse_obj("v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n").to_indexed_model()
print(model.indices)   # [0, 1, 2]
```

## What it does not do

- It ships no models, shaders or textures; the scene cannot start without a
  resource directory laid out as above.
- Only `v`, `vt`, `vn` and `f` lines of OBJ files are read; materials,
  groups and other statements are ignored.
- The floor is drawn as quads, which needs an OpenGL compatibility context.