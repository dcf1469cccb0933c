"""Orbiting camera and directional light of the viewer."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

_Y_UP = np.array([0.0, 1.0, 0.0])
_PITCH_LIMIT = 0.99
_DEFAULT_PIVOT = (0.0, 0.4, 0.0)


def _vec3(*values: float) -> np.ndarray:
    return np.array(values, dtype=np.float64)


def _normalize(v: np.ndarray) -> np.ndarray:
    norm = float(np.linalg.norm(v))
    return v / norm if norm > 0.0 else np.zeros(3)


def _rotation(angle: float, axis: np.ndarray) -> np.ndarray:
    """3x3 rotation of ``angle`` radians about ``axis`` (a zero axis scales by cos)."""
    a = _normalize(np.asarray(axis, dtype=np.float64))
    c, s = math.cos(angle), math.sin(angle)
    skew = np.array([[0.0, -a[2], a[1]], [a[2], 0.0, -a[0]], [-a[1], a[0], 0.0]])
    return c * np.eye(3) + s * skew + (1.0 - c) * np.outer(a, a)


@dataclass
class Camera:
    """A camera that orbits, pans and dollies around a pivot point."""

    position: np.ndarray = field(default_factory=lambda: _vec3(0.0, 0.4, -4.0))
    pivot: np.ndarray = field(default_factory=lambda: _vec3(*_DEFAULT_PIVOT))
    up: np.ndarray = field(default_factory=lambda: _vec3(0.0, 1.0, 0.0))
    near: float = 0.1
    far: float = 1000.0

    def __post_init__(self) -> None:
        self.position = np.array(self.position, dtype=np.float64)
        self.pivot = np.array(self.pivot, dtype=np.float64)
        self.up = np.array(self.up, dtype=np.float64)

    def tumble(self, dx: float, dy: float) -> None:
        """Orbit around the pivot: ``dx`` yaws, ``dy`` pitches (radians)."""
        forward = _normalize(self.pivot - self.position)
        right = np.cross(_Y_UP, forward)
        self.up = _normalize(np.cross(forward, right))

        dot = float(np.dot(forward, _Y_UP))
        if (dot <= -_PITCH_LIMIT and dy > 0.0) or (dot >= _PITCH_LIMIT and dy < 0.0):
            dy = 0.0

        tumble = _rotation(-dx, self.up) @ _rotation(dy, right)
        self.position = self.pivot + tumble @ (self.position - self.pivot)

    def pan(self, dx: float, dy: float) -> None:
        """Move camera and pivot sideways, scaled by the distance to the pivot."""
        offset = self.pivot - self.position
        distance = float(np.linalg.norm(offset))
        forward = _normalize(offset)
        right = _normalize(np.cross(self.up, forward))

        move = self.up * (dy * distance) + right * (dx * distance)
        self.position = self.position + move
        self.pivot = self.pivot + move

    def dolly(self, dx: float, dy: float) -> None:
        """Move towards the pivot by a tenth of the distance per unit of ``dy``."""
        offset = self.pivot - self.position
        distance = float(np.linalg.norm(offset))
        forward = _normalize(offset)
        move = distance - dy * distance / 10.0
        self.position = self.pivot - forward * move

    def reset_pivot(self) -> None:
        self.pivot = _vec3(*_DEFAULT_PIVOT)

    def view_matrix(self) -> np.ndarray:
        """Right-handed look-at matrix from the position to the pivot, Y up."""
        f = _normalize(self.pivot - self.position)
        s = _normalize(np.cross(f, _Y_UP))
        u = np.cross(s, f)
        eye = self.position
        return np.array(
            [
                [s[0], s[1], s[2], -np.dot(s, eye)],
                [u[0], u[1], u[2], -np.dot(u, eye)],
                [-f[0], -f[1], -f[2], np.dot(f, eye)],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    def proj_matrix(self, aspect: float, fov: float) -> np.ndarray:
        """Right-handed perspective matrix with depth in [-1, 1]; ``fov`` is in radians."""
        f = 1.0 / math.tan(fov * 0.5)
        fn = 1.0 / (self.near - self.far)
        return np.array(
            [
                [f / aspect, 0.0, 0.0, 0.0],
                [0.0, f, 0.0, 0.0],
                [0.0, 0.0, (self.near + self.far) * fn, 2.0 * self.near * self.far * fn],
                [0.0, 0.0, -1.0, 0.0],
            ]
        )


@dataclass
class Light:
    """A directional light pointing from ``position`` towards the origin."""

    position: np.ndarray = field(default_factory=lambda: _vec3(1.0, 1.0, -1.0))

    def __post_init__(self) -> None:
        self.position = np.array(self.position, dtype=np.float64)

    def tumble(self, dx: float, dy: float) -> None:
        """Rotate the light about the Y axis by ``dx`` radians; ``dy`` is unused."""
        self.position = _rotation(dx, _Y_UP) @ self.position

    def direction(self) -> np.ndarray:
        return _normalize(-self.position)