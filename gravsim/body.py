"""Point-mass celestial bodies and their motion under gravity."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

import numpy as np

MAX_TRAJECTORY_POINTS = 500
MIN_DISTANCE = 0.1


def _vec3(values) -> np.ndarray:
    vector = np.array(values, dtype=float)
    if vector.shape != (3,):
        raise ValueError(f"expected a 3-component vector, got shape {vector.shape}")
    return vector


@dataclass(eq=False)
class CelestialBody:
    """A massive body with position, velocity, colour and a bounded trail."""

    position: np.ndarray
    velocity: np.ndarray
    mass: float
    radius: float
    color: np.ndarray
    fixed: bool = False
    acceleration: np.ndarray = field(init=False)
    trajectory: deque = field(init=False)

    MAX_TRAJECTORY_POINTS = MAX_TRAJECTORY_POINTS

    def __post_init__(self) -> None:
        self.position = _vec3(self.position)
        self.velocity = _vec3(self.velocity)
        self.color = _vec3(self.color)
        self.mass = float(self.mass)
        self.radius = float(self.radius)
        self.acceleration = np.zeros(3)
        self.trajectory = deque(maxlen=MAX_TRAJECTORY_POINTS)

    def apply_gravity(self, other: CelestialBody, g: float) -> None:
        """Add the acceleration that ``other`` exerts on this body."""
        if other is self:
            return
        direction = other.position - self.position
        length = float(np.linalg.norm(direction))
        distance = max(length, MIN_DISTANCE)
        with np.errstate(invalid="ignore", divide="ignore"):
            direction = direction / length
        force = g * self.mass * other.mass / (distance * distance)
        self.acceleration += direction * (force / self.mass)

    def update(self, delta_time: float) -> None:
        """Integrate one step and reset the accumulated acceleration."""
        if self.fixed:
            self.acceleration = np.zeros(3)
            return
        self.velocity += self.acceleration * delta_time
        self.position += (
            self.velocity * delta_time
            + 0.5 * self.acceleration * delta_time * delta_time
        )
        self.acceleration = np.zeros(3)

    def add_trajectory_point(self) -> None:
        """Record the current position, dropping the oldest point when full."""
        self.trajectory.append(self.position.copy())

    def clear_trajectory(self) -> None:
        """Restart the trail at the current position."""
        self.trajectory.clear()
        self.trajectory.append(self.position.copy())