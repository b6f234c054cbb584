"""Simulation state: the bodies, the gravity solvers and the view settings."""

from __future__ import annotations

import math
import random

import numpy as np

from gravsim.body import CelestialBody
from gravsim.octree import BARNES_HUT_THETA, OctreeNode

DEFAULT_GRAVITATIONAL_CONSTANT = 0.1
DEFAULT_CAMERA_DISTANCE = 50.0
DEFAULT_TIME_SCALE = 1.0
CAMERA_ROTATION_SPEED = 0.001
CAMERA_ELEVATION_FACTOR = 0.3
MIN_CAMERA_DISTANCE = 10.0
MAX_CAMERA_DISTANCE = 200.0
MIN_TIME_SCALE = 0.1
MAX_TIME_SCALE = 10.0
TIME_SCALE_FACTOR = 1.1
TIME_SLOW_FACTOR = 0.9
ZOOM_SPEED = 1.0
POINT_SCALE_SIZE = 500.0
MIN_POINT_SIZE = 2.0
MAX_POINT_SIZE = 50.0

CENTRAL_MASS = 1000.0
DEFAULT_SPACE_EXTENT = 1000.0
MIN_SPACE_SIZE = 100.0
TRAJECTORY_RECORD_INTERVAL = 1


class Simulation:
    """A central fixed star with orbiting bodies, advanced step by step."""

    def __init__(self, seed: int | None = None) -> None:
        self.bodies: list[CelestialBody] = []
        self.g = DEFAULT_GRAVITATIONAL_CONSTANT
        self.camera_distance = DEFAULT_CAMERA_DISTANCE
        self.camera_angle = 0.0
        self.paused = False
        self.time_scale = DEFAULT_TIME_SCALE
        self.show_trajectories = False
        self.use_barnes_hut = True
        self._trajectory_counter = 0
        self.space_min = np.full(3, -DEFAULT_SPACE_EXTENT)
        self.space_max = np.full(3, DEFAULT_SPACE_EXTENT)
        self._rng = random.Random(seed)

        self.setup_scene()
        self.calculate_bounds()
        self.octree_root = self._new_root()

    def _new_root(self) -> OctreeNode:
        center = (self.space_min + self.space_max) * 0.5
        size = float(np.linalg.norm(self.space_max - self.space_min))
        return OctreeNode(center, size)

    def _orbiter(self, distance: float, speed_factor: float, y: float = 0.0):
        angle = self._rng.uniform(0.0, 2.0 * math.pi)
        speed = math.sqrt(self.g * CENTRAL_MASS / distance) * speed_factor
        position = (distance * math.cos(angle), y, distance * math.sin(angle))
        velocity = (-speed * math.sin(angle), 0.0, speed * math.cos(angle))
        return position, velocity

    def setup_scene(self) -> None:
        """Add the central star, inner and outer orbiters and a debris ring."""
        self.bodies.append(
            CelestialBody(
                (0.0, 0.0, 0.0), (0.0, 0.0, 0.0), CENTRAL_MASS, 5.0,
                (1.0, 1.0, 0.0), fixed=True,
            )
        )

        for i in range(100):
            position, velocity = self._orbiter(8.0 + i * 4.0, 0.8)
            self.bodies.append(
                CelestialBody(
                    position, velocity, 1.0 + i * 0.5, 0.3 + i * 0.1,
                    (0.3 + i * 0.2, 0.5, 1.0 - i * 0.2),
                )
            )

        for i in range(100):
            position, velocity = self._orbiter(25.0 + i * 8.0, 0.7)
            self.bodies.append(
                CelestialBody(
                    position, velocity, 0.5 + i * 0.3, 0.2 + i * 0.1,
                    (1.0 - i * 0.2, 0.3 + i * 0.2, 0.5),
                )
            )

        for i in range(500):
            distance = 15.0 + (i % 3) * 5.0
            angle = self._rng.uniform(0.0, 2.0 * math.pi)
            speed = math.sqrt(self.g * CENTRAL_MASS / distance) * (
                0.6 + 0.2 * self._rng.random()
            )
            y = (self._rng.random() - 0.5) * 2.0
            position = (distance * math.cos(angle), y, distance * math.sin(angle))
            velocity = (-speed * math.sin(angle), 0.0, speed * math.cos(angle))
            self.bodies.append(
                CelestialBody(position, velocity, 0.1, 0.05, (0.6, 0.6, 0.6))
            )

        self.calculate_bounds()

    def calculate_bounds(self) -> None:
        """Fit the simulated region to the bodies, at least MIN_SPACE_SIZE across."""
        if not self.bodies:
            self.space_min = np.full(3, -DEFAULT_SPACE_EXTENT)
            self.space_max = np.full(3, DEFAULT_SPACE_EXTENT)
            return

        positions = np.array([body.position for body in self.bodies])
        self.space_min = positions.min(axis=0)
        self.space_max = positions.max(axis=0)

        if float(np.linalg.norm(self.space_max - self.space_min)) < MIN_SPACE_SIZE:
            center = (self.space_min + self.space_max) * 0.5
            self.space_min = center - MIN_SPACE_SIZE * 0.5
            self.space_max = center + MIN_SPACE_SIZE * 0.5

    def build_octree(self) -> OctreeNode:
        """Rebuild the octree over the current bodies and return its root."""
        self.calculate_bounds()
        self.octree_root = self._new_root()
        for body in self.bodies:
            self.octree_root.insert_body(body)
        self.octree_root.update_mass_properties()
        return self.octree_root

    def update_gravity_barnes_hut(self) -> None:
        """Accumulate accelerations using the octree approximation."""
        root = self.build_octree()
        for body in self.bodies:
            if not body.fixed:
                body.acceleration = np.zeros(3)
                root.calculate_force(body, self.g, BARNES_HUT_THETA)

    def update_gravity_direct(self) -> None:
        """Accumulate accelerations by summing over every pair of bodies."""
        for body in self.bodies:
            if not body.fixed:
                body.acceleration = np.zeros(3)
            for other in self.bodies:
                if other is not body:
                    body.apply_gravity(other, self.g)

    def update(self, delta_time: float) -> None:
        """Advance the simulation by ``delta_time`` scaled by the time scale."""
        if self.paused:
            return

        dt = delta_time * self.time_scale
        if self.use_barnes_hut:
            self.update_gravity_barnes_hut()
        else:
            self.update_gravity_direct()

        for body in self.bodies:
            body.update(dt)

        self._trajectory_counter += 1
        if self._trajectory_counter >= TRAJECTORY_RECORD_INTERVAL:
            self._trajectory_counter = 0
            for body in self.bodies:
                if not body.fixed:
                    body.add_trajectory_point()

    def advance_camera(self) -> None:
        """Rotate the camera one step around the origin."""
        self.camera_angle += CAMERA_ROTATION_SPEED

    def camera_position(self) -> np.ndarray:
        """Current camera position on its elevated circular orbit."""
        return np.array(
            [
                self.camera_distance * math.cos(self.camera_angle),
                self.camera_distance * CAMERA_ELEVATION_FACTOR,
                self.camera_distance * math.sin(self.camera_angle),
            ]
        )

    def point_size(self, body: CelestialBody) -> float:
        """On-screen size of a body, shrinking with distance from the camera."""
        distance = float(np.linalg.norm(body.position - self.camera_position()))
        if distance == 0.0:
            return MAX_POINT_SIZE
        size = body.radius * POINT_SCALE_SIZE / distance
        return min(max(size, MIN_POINT_SIZE), MAX_POINT_SIZE)

    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        return self.paused

    def toggle_trajectories(self) -> bool:
        self.show_trajectories = not self.show_trajectories
        return self.show_trajectories

    def toggle_algorithm(self) -> bool:
        """Switch between Barnes-Hut and direct summation; True means Barnes-Hut."""
        self.use_barnes_hut = not self.use_barnes_hut
        return self.use_barnes_hut

    def speed_up(self) -> float:
        self.time_scale = min(self.time_scale * TIME_SCALE_FACTOR, MAX_TIME_SCALE)
        return self.time_scale

    def slow_down(self) -> float:
        self.time_scale = max(self.time_scale * TIME_SLOW_FACTOR, MIN_TIME_SCALE)
        return self.time_scale

    def zoom_in(self) -> float:
        self.camera_distance = max(
            self.camera_distance - ZOOM_SPEED, MIN_CAMERA_DISTANCE
        )
        return self.camera_distance

    def zoom_out(self) -> float:
        self.camera_distance = min(
            self.camera_distance + ZOOM_SPEED, MAX_CAMERA_DISTANCE
        )
        return self.camera_distance

    def reset(self) -> None:
        """Discard all bodies and build a fresh scene."""
        self.bodies.clear()
        self.setup_scene()