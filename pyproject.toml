[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stingscene"
version = "0.1.0"
description = "A small OpenGL scene viewer: OBJ meshes, GLSL shaders, textures and a free-flying camera."
requires-python = ">=3.10"
keywords = ["opengl", "3d", "obj", "wavefront", "shader", "camera", "rendering"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]
dependencies = [
    "numpy",
    "pyglet",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-mock",
]

[project.scripts]
stingscene = "stingscene.game:main"

[tool.hatch.build.targets.wheel]
packages = ["stingscene"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
