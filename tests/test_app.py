import math
import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import numpy as np
import pygame
import pytest

from gravsim.app import InputHandler, Renderer, look_at, perspective, project
from gravsim.simulation import (
    CAMERA_ROTATION_SPEED,
    DEFAULT_CAMERA_DISTANCE,
    DEFAULT_TIME_SCALE,
    Simulation,
)


@pytest.fixture
def simulation():
    return Simulation(seed=7)


def test_look_at_maps_eye_to_origin():
    eye = (3.0, 4.0, 5.0)
    view = look_at(eye, (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    result = view @ np.array([*eye, 1.0])
    assert np.allclose(result, [0.0, 0.0, 0.0, 1.0])


def test_look_at_target_is_on_negative_z_axis():
    view = look_at((10.0, 2.0, -3.0), (1.0, 1.0, 1.0), (0.0, 1.0, 0.0))
    result = view @ np.array([1.0, 1.0, 1.0, 1.0])
    assert np.allclose(result[:2], [0.0, 0.0])
    assert result[2] < 0.0


def test_look_at_rotation_is_orthonormal():
    view = look_at((7.0, -2.0, 4.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    rotation = view[:3, :3]
    assert np.allclose(rotation @ rotation.T, np.identity(3))


def test_look_at_rejects_coincident_eye_and_target():
    with pytest.raises(ValueError):
        look_at((1.0, 1.0, 1.0), (1.0, 1.0, 1.0), (0.0, 1.0, 0.0))


def test_perspective_maps_near_and_far_planes_to_depth_limits():
    projection = perspective(math.radians(45.0), 1.5, 0.1, 1000.0)
    near = projection @ np.array([0.0, 0.0, -0.1, 1.0])
    far = projection @ np.array([0.0, 0.0, -1000.0, 1.0])
    assert near[2] / near[3] == pytest.approx(-1.0)
    assert far[2] / far[3] == pytest.approx(1.0)


@pytest.mark.parametrize("aspect, near, far", [(0.0, 0.1, 10.0), (1.0, 5.0, 5.0)])
def test_perspective_rejects_degenerate_parameters(aspect, near, far):
    with pytest.raises(ValueError):
        perspective(math.radians(45.0), aspect, near, far)


def test_project_puts_target_at_screen_centre():
    view = look_at((0.0, 0.0, 10.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    projection = perspective(math.radians(45.0), 2.0, 0.1, 1000.0)
    x, y, depth = project((0.0, 0.0, 0.0), view, projection, 200, 100)
    assert x == pytest.approx(100.0)
    assert y == pytest.approx(50.0)
    assert -1.0 <= depth <= 1.0


def test_project_up_is_towards_top_of_screen():
    view = look_at((0.0, 0.0, 10.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    projection = perspective(math.radians(45.0), 1.0, 0.1, 1000.0)
    _, y, _ = project((0.0, 1.0, 0.0), view, projection, 100, 100)
    assert y < 50.0


def test_project_hides_points_behind_camera():
    view = look_at((0.0, 0.0, 10.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    projection = perspective(math.radians(45.0), 1.0, 0.1, 1000.0)
    assert project((0.0, 0.0, 20.0), view, projection, 100, 100) is None


def test_project_nearer_points_have_smaller_depth():
    view = look_at((0.0, 0.0, 10.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    projection = perspective(math.radians(45.0), 1.0, 0.1, 1000.0)
    near = project((0.0, 0.0, 5.0), view, projection, 100, 100)
    far = project((0.0, 0.0, -5.0), view, projection, 100, 100)
    assert near[2] < far[2]


def test_space_toggles_pause_once_per_press(simulation):
    handler = InputHandler()
    handler.handle(simulation, {pygame.K_SPACE})
    assert simulation.paused is True
    handler.handle(simulation, {pygame.K_SPACE})
    assert simulation.paused is True
    handler.handle(simulation, set())
    handler.handle(simulation, {pygame.K_SPACE})
    assert simulation.paused is False


def test_trajectory_and_algorithm_toggles(simulation):
    handler = InputHandler()
    handler.handle(simulation, {pygame.K_t, pygame.K_b})
    assert simulation.show_trajectories is True
    assert simulation.use_barnes_hut is False


def test_held_keys_repeat_every_call(simulation):
    handler = InputHandler()
    handler.handle(simulation, {pygame.K_w})
    first = simulation.time_scale
    handler.handle(simulation, {pygame.K_w})
    assert DEFAULT_TIME_SCALE < first < simulation.time_scale


def test_zoom_keys_change_camera_distance(simulation):
    handler = InputHandler()
    handler.handle(simulation, {pygame.K_a})
    assert simulation.camera_distance < DEFAULT_CAMERA_DISTANCE
    handler.handle(simulation, {pygame.K_d})
    handler.handle(simulation, {pygame.K_d})
    assert simulation.camera_distance > DEFAULT_CAMERA_DISTANCE


def test_escape_requests_exit(simulation):
    handler = InputHandler()
    assert handler.handle(simulation, set()) is False
    assert handler.handle(simulation, {pygame.K_ESCAPE}) is True


def test_reset_key_rebuilds_scene(simulation):
    handler = InputHandler()
    count = len(simulation.bodies)
    before = simulation.bodies[1].position.copy()
    handler.handle(simulation, {pygame.K_r})
    assert len(simulation.bodies) == count
    assert not np.allclose(simulation.bodies[1].position, before)


def test_render_draws_star_at_centre(simulation):
    simulation.bodies = simulation.bodies[:1]
    surface = pygame.Surface((200, 100))
    drawn = Renderer().render(surface, simulation)
    assert drawn == 1
    assert tuple(surface.get_at((100, 50)))[:3] == (255, 255, 0)
    assert tuple(surface.get_at((0, 0)))[:3] == (0, 0, 0)


def test_render_advances_camera(simulation):
    surface = pygame.Surface((160, 120))
    Renderer().render(surface, simulation)
    assert simulation.camera_angle == pytest.approx(CAMERA_ROTATION_SPEED)


def test_render_with_trajectories_draws_bodies(simulation):
    simulation.show_trajectories = True
    simulation.update(0.01)
    simulation.update(0.01)
    surface = pygame.Surface((160, 120))
    drawn = Renderer().render(surface, simulation)
    assert 0 < drawn <= len(simulation.bodies)