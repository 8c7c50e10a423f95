"""A three-joint leg: kinematic state, inverse kinematics and servo pulses."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Optional

from .vector import Vec3

__all__ = ["PERIOD", "PwmKey", "Leg"]

PERIOD = 0.010  # integration step, seconds


@dataclass(frozen=True)
class PwmKey:
    """Identifies the timer and channel driving one joint's servo."""

    timer: str
    channel: int


PulseSink = Callable[[PwmKey, int], None]


@dataclass
class Leg:
    """Machine parameters and virtual state of one leg.

    ``on_pulse`` receives each joint's PWM key and compare value whenever
    the joint angles are set.
    """

    lengths: tuple[float, float, float] = (0.0, 0.0, 0.0)
    pwm_keys: tuple[Optional[PwmKey], Optional[PwmKey], Optional[PwmKey]] = (None, None, None)
    pulse_width_0deg: tuple[float, float, float] = (0.0, 0.0, 0.0)
    pulse_width_90deg: tuple[float, float, float] = (0.0, 0.0, 0.0)
    posture_dir: tuple[int, int] = (1, 1)
    on_pulse: Optional[PulseSink] = None
    angles: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    pos: Vec3 = Vec3()
    vel: Vec3 = Vec3()
    acc: Vec3 = Vec3()

    def pulse_widths(self) -> tuple[int, int, int]:
        """Servo compare values for the current joint angles."""
        return tuple(
            int((p90 - p0) / math.pi * 2.0 * angle + p0)
            for p0, p90, angle in zip(self.pulse_width_0deg, self.pulse_width_90deg, self.angles)
        )

    def set_joint_angles(self, ang1: float, ang2: float, ang3: float) -> tuple[int, int, int]:
        """Store the joint angles and emit the resulting servo pulses."""
        self.angles = [ang1, ang2, ang3]
        widths = self.pulse_widths()
        if self.on_pulse is not None:
            for key, width in zip(self.pwm_keys, widths):
                if key is not None:
                    self.on_pulse(key, width)
        return widths

    def set_position(self, x: float, y: float, z: float) -> None:
        self.pos = Vec3(x, y, z)

    def set_velocity(self, x: float, y: float, z: float) -> None:
        self.vel = Vec3(x, y, z)

    def set_acceleration(self, x: float, y: float, z: float) -> None:
        self.acc = Vec3(x, y, z)

    def integrate(self) -> None:
        """Advance the foot one step; stop it if it would leave the reach."""
        target = self.pos + (PERIOD * self.vel + (PERIOD * PERIOD / 2.0) * self.acc)
        if target.length() < self.lengths[1] + self.lengths[2]:
            self.pos = target
            self.vel = self.vel + PERIOD * self.acc
        else:
            self.vel = Vec3()

    def apply_inverse_kinematics(self) -> tuple[float, float, float]:
        """Solve the joint angles for the current foot position and apply them.

        Raises ValueError when the position cannot be reached.
        """
        l1, l2, l3 = self.lengths
        x, y, z = self.pos
        r2 = x * x + y * y + z * z
        cos_knee = (-r2 + l1 * l1 + l2 * l2 + l3 * l3) / 2.0 / l2 / l3
        try:
            ang3 = self.posture_dir[1] * (math.pi - math.acos(cos_knee))
            planar = math.sqrt(r2 - l1 * l1)
            ang2 = -(math.asin(l3 * math.sin(ang3) / planar) - math.asin(x / planar))
        except ValueError as exc:
            raise ValueError(f"foot position {self.pos} is out of reach") from exc
        ang1 = math.atan(self.posture_dir[0] * y / -z) - math.atan(
            l1 / (l2 * math.cos(ang2) + l3 * math.cos(ang2 + ang3))
        )
        self.set_joint_angles(ang1, ang2, ang3)
        return ang1, ang2, ang3