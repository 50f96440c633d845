"""Affine and projective 4x4 matrices and the per-object transform.

Matrices act on column vectors, so a point ``p`` is transformed as
``matrix @ [x, y, z, 1]``. Angles are in radians.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

_X_AXIS = np.array([1.0, 0.0, 0.0])
_Y_AXIS = np.array([0.0, 1.0, 0.0])
_Z_AXIS = np.array([0.0, 0.0, 1.0])


def _vec3(values) -> np.ndarray:
    """Return a fresh float vector of length 3; a single number fills all three."""
    vector = np.asarray(values, dtype=np.float64).reshape(-1)
    if vector.size == 1:
        return np.full(3, float(vector[0]))
    if vector.shape != (3,):
        raise ValueError(f"expected 3 components, got {vector.size}")
    return vector.copy()


def _normalize(vector: np.ndarray) -> np.ndarray:
    with np.errstate(invalid="ignore", divide="ignore"):
        return vector / np.linalg.norm(vector)


def translate(offset) -> np.ndarray:
    """Matrix that moves points by ``offset``."""
    matrix = np.eye(4)
    matrix[:3, 3] = _vec3(offset)
    return matrix


def scale_matrix(factors) -> np.ndarray:
    """Matrix that scales each axis by the matching factor."""
    matrix = np.eye(4)
    matrix[:3, :3] = np.diag(_vec3(factors))
    return matrix


def rotation(angle: float, axis) -> np.ndarray:
    """Matrix rotating counter-clockwise by ``angle`` radians about ``axis``."""
    n = _normalize(_vec3(axis))
    c = math.cos(angle)
    s = math.sin(angle)
    cross = np.array(
        [
            [0.0, -n[2], n[1]],
            [n[2], 0.0, -n[0]],
            [-n[1], n[0], 0.0],
        ]
    )
    matrix = np.eye(4)
    matrix[:3, :3] = c * np.eye(3) + s * cross + (1.0 - c) * np.outer(n, n)
    return matrix


def perspective(fov: float, aspect: float, z_near: float, z_far: float) -> np.ndarray:
    """Right-handed perspective projection mapping depth to [-1, 1]."""
    if aspect == 0:
        raise ValueError("aspect ratio must not be zero")
    if z_far == z_near:
        raise ValueError("near and far planes must differ")
    focal = 1.0 / math.tan(fov / 2.0)
    matrix = np.zeros((4, 4))
    matrix[0, 0] = focal / aspect
    matrix[1, 1] = focal
    matrix[2, 2] = -(z_far + z_near) / (z_far - z_near)
    matrix[2, 3] = -(2.0 * z_far * z_near) / (z_far - z_near)
    matrix[3, 2] = -1.0
    return matrix


def look_at(eye, center, up) -> np.ndarray:
    """Right-handed view matrix looking from ``eye`` towards ``center``."""
    eye = _vec3(eye)
    f = _normalize(_vec3(center) - eye)
    s = _normalize(np.cross(f, _vec3(up)))
    u = np.cross(s, f)
    matrix = np.eye(4)
    matrix[0, :3] = s
    matrix[1, :3] = u
    matrix[2, :3] = -f
    matrix[0, 3] = -np.dot(s, eye)
    matrix[1, 3] = -np.dot(u, eye)
    matrix[2, 3] = np.dot(f, eye)
    return matrix


@dataclass
class Transform:
    """Position, Euler rotation (radians) and scale of an object."""

    pos: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rot: np.ndarray = field(default_factory=lambda: np.zeros(3))
    scale: np.ndarray = field(default_factory=lambda: np.ones(3))

    def __post_init__(self) -> None:
        self.pos = _vec3(self.pos)
        self.rot = _vec3(self.rot)
        self.scale = _vec3(self.scale)

    def __setattr__(self, name, value) -> None:
        if name in ("pos", "rot", "scale"):
            value = _vec3(value)
        super().__setattr__(name, value)

    def model(self) -> np.ndarray:
        """Model matrix: translation * (Rx * Ry * Rz) * scale."""
        rotation_matrix = (
            rotation(self.rot[0], _X_AXIS)
            @ rotation(self.rot[1], _Y_AXIS)
            @ rotation(self.rot[2], _Z_AXIS)
        )
        return translate(self.pos) @ rotation_matrix @ scale_matrix(self.scale)