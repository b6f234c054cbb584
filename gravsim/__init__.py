"""Gravity simulator with Barnes-Hut and direct N-body solvers and a pygame viewer."""

__version__ = "0.1.0"
__all__ = ["app", "body", "octree", "simulation"]