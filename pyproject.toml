[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "quadarm"
version = "0.1.0"
description = "Rotation maths, trajectory shaping, IK solution handling, gripper and motor protocol logic for a four-branch manipulator"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "pyyaml",
]
keywords = ["robotics", "kinematics", "trajectory", "gripper", "ikfast", "quaternion"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Human Machine Interfaces",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["quadarm"]

[tool.pytest.ini_options]
addopts = "-ra"
