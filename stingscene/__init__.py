"""Interactive OpenGL scene with OBJ meshes, GLSL shaders, textures and a camera."""

__version__ = "0.1.0"