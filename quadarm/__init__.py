"""Signal shaping, rotation maths, IK solution containers, joint layout, gripper and motor
protocol logic, transform files and a step-driven control loop for a four-branch manipulator."""

__version__ = "0.1.0"

__all__ = [
    "filters",
    "rotations",
    "ikfast",
    "joints",
    "gripper",
    "motors",
    "tf_yaml",
    "control",
]