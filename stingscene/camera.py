"""A free-flying perspective camera."""

from __future__ import annotations

import numpy as np

from stingscene.transform import look_at, perspective, rotation

_WORLD_UP = np.array([0.0, 1.0, 0.0])


def _vec3(values) -> np.ndarray:
    vector = np.asarray(values, dtype=np.float64).reshape(-1)
    if vector.size == 1:
        return np.full(3, float(vector[0]))
    if vector.shape != (3,):
        raise ValueError(f"expected 3 components, got {vector.size}")
    return vector.copy()


def _normalize(vector: np.ndarray) -> np.ndarray:
    with np.errstate(invalid="ignore", divide="ignore"):
        return vector / np.linalg.norm(vector)


def _turn(matrix: np.ndarray, direction: np.ndarray) -> np.ndarray:
    return _normalize((matrix @ np.append(direction, 0.0))[:3])


class Camera:
    """Camera with a position, a forward and an up direction and a projection.

    ``fov`` is in radians and is passed to the projection as given.
    """

    def __init__(
        self,
        pos=(0.0, 0.0, 0.0),
        fov: float = 70.0,
        aspect: float = 1024.0 / 768.0,
        z_near: float = 0.01,
        z_far: float = 1000.0,
    ) -> None:
        self.pos = _vec3(pos)
        self.forward = np.array([0.0, 0.0, 1.0])
        self.up = np.array([0.0, 1.0, 0.0])
        self.projection = perspective(fov, aspect, z_near, z_far)

    def view_projection(self) -> np.ndarray:
        """Projection matrix times the view matrix."""
        return self.projection @ look_at(self.pos, self.pos + self.forward, self.up)

    def move_forward(self, amount: float) -> None:
        self.pos = self.pos + self.forward * amount

    def move_right(self, amount: float) -> None:
        self.pos = self.pos + np.cross(self.up, self.forward) * amount

    def pitch(self, angle: float) -> None:
        """Tilt up or down about the camera's own right axis."""
        right = _normalize(np.cross(self.up, self.forward))
        self.forward = _turn(rotation(angle, right), self.forward)
        self.up = _normalize(np.cross(self.forward, right))

    def rotate_y(self, angle: float) -> None:
        """Turn about the world's vertical axis."""
        turn = rotation(angle, _WORLD_UP)
        self.forward = _turn(turn, self.forward)
        self.up = _turn(turn, self.up)