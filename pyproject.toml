[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gravsim"
version = "0.1.0"
description = "Interactive 3D gravity simulator with Barnes-Hut octree and direct N-body solvers"
requires-python = ">=3.10"
keywords = ["gravity", "n-body", "barnes-hut", "octree", "simulation", "physics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
    "Topic :: Scientific/Engineering :: Visualization",
]
dependencies = [
    "numpy",
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
gravsim = "gravsim.app:main"

[tool.hatch.build.targets.wheel]
packages = ["gravsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
