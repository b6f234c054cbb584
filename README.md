# gravsim

An interactive three-dimensional gravity simulator. A fixed central star is
orbited by inner and outer rings of planets and a belt of small debris. You
watch the system evolve from a camera that slowly circles the origin.

Gravity is computed in one of two ways. You can switch between them while the
simulation runs:

- **Barnes-Hut**: bodies are sorted into an octree, and distant clusters are
  treated as a single mass at their centre of mass (opening angle 0.5).
- **Direct N-body**: every pair of bodies is summed exactly.

Bodies move by a Verlet-style step. Each moving body keeps a trail of its last
500 positions.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Running

```
gravsim
```

This opens a resizable pygame window and prints the controls to the terminal.
Options:

- `--width`, `--height`: window size in pixels (default 1920×1080)
- `--seed`: seed for the random placement of the orbiting bodies

Bodies are drawn as filled circles. Their size shrinks with distance from the
camera, and nearer bodies are drawn over farther ones. Trails are drawn as
translucent lines.

## Controls

| Key   | Action                               |
|-------|--------------------------------------|
| Space | Pause / resume                       |
| W / S | Speed up / slow down time (0.1–10×)  |
| A / D | Zoom in / out (distance 10–200)      |
| T     | Toggle trajectory trails             |
| B     | Toggle Barnes-Hut / direct N-body    |
| R     | Reset the scene                      |
| Esc   | Quit                                 |

## Using the library

The physics in `gravsim.simulation` runs without a window:

```python
from gravsim.simulation import Simulation

sim = Simulation(seed=42)
for _ in range(100):
    sim.update(1 / 60)

sim.toggle_algorithm()   # switch to direct N-body
sim.update(1 / 60)
```

The building blocks can also be used on their own:

- `gravsim.body.CelestialBody` holds one body's state and its trail. It has
  `apply_gravity`, `update`, `add_trajectory_point` and `clear_trajectory`.
- `gravsim.octree.OctreeNode` is the Barnes-Hut tree. It has `insert_body`,
  `update_mass_properties` and `calculate_force`.
- `gravsim.app` holds the window code. It provides the camera helpers
  `look_at`, `perspective` and `project`, plus the `InputHandler` and
  `Renderer` classes that the `gravsim` command uses.