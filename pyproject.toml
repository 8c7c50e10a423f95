[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "quadwalk"
version = "0.1.0"
description = "Kinematics, gait generation and balance control for a four-legged walking robot"
requires-python = ">=3.10"
dependencies = []
keywords = ["robotics", "quadruped", "inverse-kinematics", "gait", "simulation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["quadwalk"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
