"""Interactive window: camera maths, keyboard controls and drawing."""

from __future__ import annotations

import argparse
import math
import sys
from collections.abc import Callable, Collection

import numpy as np
import pygame

from gravsim.simulation import Simulation

WINDOW_WIDTH = 1920
WINDOW_HEIGHT = 1080
WINDOW_TITLE = "Gravity Simulator"
FIELD_OF_VIEW = math.radians(45.0)
NEAR_PLANE = 0.1
FAR_PLANE = 1000.0
TRAJECTORY_ALPHA = 0.2
TRAJECTORY_LINE_WIDTH = 2
BACKGROUND = (0, 0, 0)

CONTROLS = """\
========================================
    Gravity Simulator - Controls
========================================
SPACE - Pause/Resume
W/S - Speed up/slow down time
A/D - zoom in/out
T - Toggle trajectory
B - Toggle algorithm
R - reset simulation
Esc - Exit
========================================"""


def _normalize(vector: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(vector))
    if length == 0.0:
        raise ValueError("cannot normalise a zero-length vector")
    return vector / length


def look_at(eye, target, up) -> np.ndarray:
    """Right-handed view matrix looking from ``eye`` towards ``target``."""
    eye = np.asarray(eye, dtype=float)
    target = np.asarray(target, dtype=float)
    up = np.asarray(up, dtype=float)
    forward = _normalize(target - eye)
    side = _normalize(np.cross(forward, up))
    upward = np.cross(side, forward)
    view = np.identity(4)
    view[0, :3] = side
    view[1, :3] = upward
    view[2, :3] = -forward
    view[0, 3] = -float(np.dot(side, eye))
    view[1, 3] = -float(np.dot(upward, eye))
    view[2, 3] = float(np.dot(forward, eye))
    return view


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Perspective projection to clip space with depth in [-1, 1]."""
    if aspect == 0.0:
        raise ValueError("aspect ratio must be non-zero")
    if near == far:
        raise ValueError("near and far planes must differ")
    tan_half = math.tan(fovy / 2.0)
    if tan_half == 0.0:
        raise ValueError("field of view must be non-zero")
    projection = np.zeros((4, 4))
    projection[0, 0] = 1.0 / (aspect * tan_half)
    projection[1, 1] = 1.0 / tan_half
    projection[2, 2] = -(far + near) / (far - near)
    projection[2, 3] = -(2.0 * far * near) / (far - near)
    projection[3, 2] = -1.0
    return projection


def project(point, view, projection, width: int, height: int):
    """Screen coordinates and depth of ``point``, or None if it is clipped."""
    homogeneous = np.append(np.asarray(point, dtype=float), 1.0)
    clip = projection @ view @ homogeneous
    w = clip[3]
    if w <= 0.0:
        return None
    ndc = clip[:3] / w
    if not -1.0 <= ndc[2] <= 1.0:
        return None
    x = (ndc[0] + 1.0) * 0.5 * width
    y = (1.0 - ndc[1]) * 0.5 * height
    return float(x), float(y), float(ndc[2])


def _report_algorithm(simulation: Simulation) -> None:
    using = simulation.toggle_algorithm()
    print(f"Using {'Barnes-Hut' if using else 'n-body'} algorithm")


_EDGE_ACTIONS: dict[int, Callable[[Simulation], object]] = {
    pygame.K_SPACE: Simulation.toggle_pause,
    pygame.K_t: Simulation.toggle_trajectories,
    pygame.K_b: _report_algorithm,
    pygame.K_r: Simulation.reset,
}

_HELD_ACTIONS: dict[int, Callable[[Simulation], object]] = {
    pygame.K_w: Simulation.speed_up,
    pygame.K_s: Simulation.slow_down,
    pygame.K_a: Simulation.zoom_in,
    pygame.K_d: Simulation.zoom_out,
}

WATCHED_KEYS = (*_EDGE_ACTIONS, *_HELD_ACTIONS, pygame.K_ESCAPE)


class InputHandler:
    """Maps held keys to simulation controls; toggles fire once per press."""

    def __init__(self) -> None:
        self._held: set[int] = set()

    def handle(self, simulation: Simulation, pressed: Collection[int]) -> bool:
        """Apply the keys in ``pressed``; return True when exit is requested."""
        for key, action in _EDGE_ACTIONS.items():
            if key in pressed:
                if key not in self._held:
                    action(simulation)
                    self._held.add(key)
            else:
                self._held.discard(key)

        for key, action in _HELD_ACTIONS.items():
            if key in pressed:
                action(simulation)

        return pygame.K_ESCAPE in pressed


def _rgb(color, scale: float = 1.0, offset: float = 0.0) -> tuple[int, int, int]:
    values = np.clip(np.asarray(color, dtype=float) * scale + offset, 0.0, 1.0)
    return tuple(int(round(v * 255)) for v in values)


class Renderer:
    """Draws the bodies and their trails onto a pygame surface."""

    def __init__(self, fov: float = FIELD_OF_VIEW, near: float = NEAR_PLANE,
                 far: float = FAR_PLANE) -> None:
        self.fov = fov
        self.near = near
        self.far = far

    def render(self, surface: pygame.Surface, simulation: Simulation) -> int:
        """Draw one frame and return how many bodies were drawn."""
        width, height = surface.get_size()
        surface.fill(BACKGROUND)

        simulation.advance_camera()
        view = look_at(simulation.camera_position(), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        projection = perspective(self.fov, width / height, self.near, self.far)

        if simulation.show_trajectories:
            self._render_trajectories(surface, simulation, view, projection)

        visible = []
        for body in simulation.bodies:
            screen = project(body.position, view, projection, width, height)
            if screen is not None:
                visible.append((screen, body))
        visible.sort(key=lambda item: item[0][2], reverse=True)

        for (x, y, _depth), body in visible:
            radius = max(1, round(simulation.point_size(body) / 2.0))
            pygame.draw.circle(surface, _rgb(body.color), (round(x), round(y)), radius)
        return len(visible)

    def _render_trajectories(self, surface, simulation, view, projection) -> None:
        width, height = surface.get_size()
        overlay = pygame.Surface((width, height), pygame.SRCALPHA)
        alpha = int(round(TRAJECTORY_ALPHA * 255))
        for body in simulation.bodies:
            if body.fixed or len(body.trajectory) < 2:
                continue
            points = [
                (screen[0], screen[1])
                for screen in (
                    project(point, view, projection, width, height)
                    for point in body.trajectory
                )
                if screen is not None
            ]
            if len(points) < 2:
                continue
            color = (*_rgb(body.color, 0.3, 0.1), alpha)
            pygame.draw.lines(overlay, color, False, points, TRAJECTORY_LINE_WIDTH)
        surface.blit(overlay, (0, 0))


def main(argv=None) -> int:
    """Open the simulator window and run until it is closed."""
    parser = argparse.ArgumentParser(prog="gravsim", description=WINDOW_TITLE)
    parser.add_argument("--width", type=int, default=WINDOW_WIDTH)
    parser.add_argument("--height", type=int, default=WINDOW_HEIGHT)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    pygame.init()
    try:
        try:
            screen = pygame.display.set_mode((args.width, args.height), pygame.RESIZABLE)
        except pygame.error as error:
            print(f"failed to create window: {error}", file=sys.stderr)
            return 1
        pygame.display.set_caption(WINDOW_TITLE)

        simulation = Simulation(args.seed)
        print("Barnes-Hut algorithm initialized")
        print("Press 'B' to toggle between Barnes-Hut and N-body calculation")
        print(CONTROLS)

        handler = InputHandler()
        renderer = Renderer()
        clock = pygame.time.Clock()
        clock.tick()
        running = True
        while running:
            delta_time = clock.tick() / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
            keys = pygame.key.get_pressed()
            pressed = {key for key in WATCHED_KEYS if keys[key]}
            if handler.handle(simulation, pressed):
                running = False

            simulation.update(delta_time)
            renderer.render(screen, simulation)
            pygame.display.flip()
        return 0
    finally:
        pygame.quit()


if __name__ == "__main__":
    sys.exit(main())