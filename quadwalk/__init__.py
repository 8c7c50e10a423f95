"""Kinematics, gait generation, sensor decoding and balance control for a four-legged walking robot."""

__version__ = "0.1.0"
__all__ = ["vector", "leg", "sensors", "body", "console", "walk"]