"""Barnes-Hut octree for approximate gravitational forces."""

from __future__ import annotations

import numpy as np

from gravsim.body import MIN_DISTANCE, CelestialBody

BARNES_HUT_THETA = 0.5
OCTREE_MAX_DEPTH = 10
OCTREE_MIN_SIZE = 0.1


class OctreeNode:
    """A cubic cell that holds one body or eight child cells."""

    def __init__(self, center, size: float, depth: int = 0) -> None:
        self.center = np.array(center, dtype=float)
        self.size = float(size)
        self.depth = depth
        self.total_mass = 0.0
        self.center_of_mass = np.zeros(3)
        self.children: list[OctreeNode] = []
        self.body: CelestialBody | None = None
        self.is_leaf = True

    def insert_body(self, body: CelestialBody) -> None:
        """Place a body in the tree; bodies outside this cell are ignored."""
        if not self.contains(body.position):
            return

        if self.total_mass == 0.0:
            self.body = body
            self.total_mass = body.mass
            self.center_of_mass = body.position.copy()
            self.is_leaf = True
            return

        if self.is_leaf and self.body is not None:
            if self.depth >= OCTREE_MAX_DEPTH or self.size < OCTREE_MIN_SIZE:
                new_total = self.total_mass + body.mass
                self.center_of_mass = (
                    self.center_of_mass * self.total_mass + body.position * body.mass
                ) / new_total
                self.total_mass = new_total
                return

            existing = self.body
            self.body = None
            self.is_leaf = False
            self._subdivide()
            self.children[self.get_octant(existing.position)].insert_body(existing)
            self.children[self.get_octant(body.position)].insert_body(body)
        elif not self.is_leaf:
            self.children[self.get_octant(body.position)].insert_body(body)

        self.update_mass_properties()

    def calculate_force(
        self, target: CelestialBody, g: float, theta: float = BARNES_HUT_THETA
    ) -> None:
        """Add this cell's gravitational pull to ``target.acceleration``."""
        if self.total_mass == 0.0:
            return

        if self.is_leaf and self.body is not None:
            if self.body is target:
                return
            target.apply_gravity(self.body, g)
            return

        if not self.is_leaf:
            if self._should_use_approximation(target.position, theta):
                direction = self.center_of_mass - target.position
                length = float(np.linalg.norm(direction))
                distance = max(length, MIN_DISTANCE)
                direction = direction / length
                force = g * target.mass * self.total_mass / (distance * distance)
                target.acceleration += direction * (force / target.mass)
            else:
                for child in self.children:
                    child.calculate_force(target, g, theta)

    def update_mass_properties(self) -> None:
        """Recompute total mass and centre of mass from the direct contents."""
        if self.is_leaf and self.body is not None:
            self.total_mass = self.body.mass
            self.center_of_mass = self.body.position.copy()
        elif not self.is_leaf:
            occupied = [child for child in self.children if child.total_mass > 0.0]
            self.total_mass = sum(child.total_mass for child in occupied)
            if self.total_mass > 0.0:
                weighted = sum(
                    (child.center_of_mass * child.total_mass for child in occupied),
                    np.zeros(3),
                )
                self.center_of_mass = weighted / self.total_mass
            else:
                self.center_of_mass = self.center.copy()

    def clear(self) -> None:
        """Empty the cell and drop its children."""
        self.total_mass = 0.0
        self.center_of_mass = np.zeros(3)
        self.body = None
        self.is_leaf = True
        self.children = []

    def get_octant(self, position) -> int:
        """Index 0-7 of the child cell that ``position`` falls in."""
        x, y, z = position
        octant = 0
        if x >= self.center[0]:
            octant |= 1
        if y >= self.center[1]:
            octant |= 2
        if z >= self.center[2]:
            octant |= 4
        return octant

    def get_octant_center(self, octant: int) -> np.ndarray:
        """Centre of the child cell with the given index."""
        quarter = self.size * 0.25
        offsets = [quarter if octant & bit else -quarter for bit in (1, 2, 4)]
        return self.center + np.array(offsets)

    def contains(self, position) -> bool:
        """Whether ``position`` lies in this cell's half-open cube."""
        half = self.size * 0.5
        return all(
            c - half <= p < c + half for p, c in zip(position, self.center)
        )

    def _subdivide(self) -> None:
        child_size = self.size * 0.5
        self.children = [
            OctreeNode(self.get_octant_center(octant), child_size, self.depth + 1)
            for octant in range(8)
        ]

    def _should_use_approximation(self, target_position, theta: float) -> bool:
        distance = float(np.linalg.norm(self.center_of_mass - target_position))
        if distance < MIN_DISTANCE:
            return False
        return (self.size / distance) < theta