"""The robot body: four legs mounted on a rigid frame with simple dynamics."""

from __future__ import annotations

import math
from typing import Optional

from .leg import PERIOD, Leg, PulseSink, PwmKey
from .vector import Vec3

__all__ = [
    "GRAVITY",
    "LW",
    "LD",
    "L1",
    "L2",
    "L3",
    "L2G",
    "L3G",
    "M_BODY",
    "M_L1",
    "M_L2",
    "M_L3",
    "M_L",
    "M_FULLBODY",
    "Body",
]


def _mm(value: float) -> float:
    return value * 0.001


def _grams(value: float) -> float:
    return value * 0.001


GRAVITY = 9.81

LW = _mm(154)  # width between left and right hips
LD = _mm(419.1)  # distance between front and rear hips

L1 = _mm(32)
L2 = _mm(150)
L3 = _mm(170)

L2G = _mm(75)  # centre of mass of the upper link
L3G = _mm(88.3)  # centre of mass of the lower link

M_BODY = _grams(1493)
M_L1 = _grams(40)
M_L2 = _grams(175)
M_L3 = _grams(37)
M_L = M_L1 + M_L2 + M_L3
M_FULLBODY = M_BODY + M_L

# Per leg: timers, channels, pulse width at 0 deg, at 90 deg, posture direction.
_LEG_SETUP = (
    (("TIM1", "TIM2", "TIM3"), (4, 4, 4), (1510, 1480, 1480), (2150, 850, 2110), (1, 1)),
    (("TIM1", "TIM3", "TIM4"), (2, 2, 1), (1520, 1520, 1480), (860, 900, 2140), (1, -1)),
    (("TIM4", "TIM4", "TIM3"), (3, 4, 1), (1470, 1450, 1450), (2110, 2130, 780), (-1, -1)),
    (("TIM2", "TIM2", "TIM3"), (1, 2, 3), (1460, 1450, 1520), (795, 2110, 840), (-1, 1)),
)

_HIPS = (
    Vec3(LD / 2.0, LW / 2.0, 0.0),
    Vec3(-LD / 2.0, LW / 2.0, 0.0),
    Vec3(-LD / 2.0, -LW / 2.0, 0.0),
    Vec3(LD / 2.0, -LW / 2.0, 0.0),
)


class Body:
    """Body state and its four legs, numbered 1 to 4.

    ``on_pulse`` receives every servo compare value the legs produce.
    """

    def __init__(self, on_pulse: Optional[PulseSink] = None) -> None:
        self.legs = [
            Leg(
                lengths=(L1, L2, L3),
                pwm_keys=tuple(PwmKey(t, c) for t, c in zip(timers, channels)),
                pulse_width_0deg=tuple(float(p) for p in p0),
                pulse_width_90deg=tuple(float(p) for p in p90),
                posture_dir=posture,
                on_pulse=on_pulse,
            )
            for timers, channels, p0, p90, posture in _LEG_SETUP
        ]
        self.hips = list(_HIPS)
        self.pos = Vec3()
        self.vel = Vec3()
        self.acc = Vec3()

    def _leg(self, n: int) -> Leg:
        if not 1 <= n <= len(self.legs):
            raise ValueError(f"leg number must be 1..{len(self.legs)}, got {n}")
        return self.legs[n - 1]

    def leg_point(self, n: int) -> Vec3:
        """Foot position of leg ``n`` in body coordinates."""
        return self.hips[n - 1] + self._leg(n).pos

    def leg_position(self, n: int) -> Vec3:
        """Foot position of leg ``n`` relative to its hip."""
        return self._leg(n).pos

    def leg_angle(self, n: int, m: int) -> float:
        return self._leg(n).angles[m]

    def center_of_gravity(self) -> Vec3:
        """Centre of gravity, assuming the first joints stay near zero."""
        thighs = [leg.angles[1] for leg in self.legs]
        shins = [leg.angles[1] + leg.angles[2] for leg in self.legs]

        x = L2G * sum(math.sin(a) for a in thighs) * M_L2 / (M_BODY + M_L2) / 4.0
        x += (
            x * L2 / L2G * 4.0 * (M_BODY + M_L2) / M_L
            + L3G * sum(math.sin(a) for a in shins)
        ) * M_L3 / (M_BODY + M_L3) / 4.0

        z = -L2G * sum(math.cos(a) for a in thighs) * M_L2 / (M_BODY + M_L2) / 4.0
        z += (
            z * L2 / L2G * 4.0 * (M_BODY + M_L2) / M_L
            - L3G * sum(math.cos(a) for a in shins)
        ) * M_L3 / (M_BODY + M_L3) / 4.0

        return Vec3(x, 0.0, z)

    def _offset_from_axis(self, n1: int, n2: int, point: Vec3) -> tuple[Vec3, Vec3]:
        base = self.leg_point(n1)
        axis = self.leg_point(n2) - base
        rel = point - base
        perpendicular = rel - (rel.dot(axis) / axis.length()) * axis.normalized()
        return axis, perpendicular

    def rotate_radius_vector(self, n1: int, n2: int) -> Vec3:
        """Perpendicular from the axis through feet ``n1``, ``n2`` to the body origin."""
        return self._offset_from_axis(n1, n2, Vec3())[1]

    def rotate_radius(self, n1: int, n2: int) -> float:
        return self.rotate_radius_vector(n1, n2).length()

    def moment_by_gravity(self, n1: int, n2: int) -> float:
        """Signed gravity moment about the axis through feet ``n1`` and ``n2``."""
        axis, arm = self._offset_from_axis(n1, n2, self.center_of_gravity())
        moment = arm.cross(Vec3(0.0, 0.0, -GRAVITY))
        if axis.x * moment.x < 0.0:
            return -moment.length()
        return moment.length()

    def add_force(self, fx: float, fy: float, fz: float) -> None:
        """Accelerate the body; the feet accelerate the opposite way."""
        self.acc = Vec3(fx / M_BODY, fy / M_BODY, fz / M_BODY)
        for leg in self.legs:
            leg.acc = -self.acc

    def set_velocity(self, vx: float, vy: float, vz: float) -> None:
        """Set the body velocity; the feet move the opposite way."""
        self.vel = Vec3(vx, vy, vz)
        for leg in self.legs:
            leg.vel = -self.vel

    def set_leg_position(self, n: int, x: float, y: float, z: float) -> None:
        self._leg(n).set_position(x, y, z)

    def set_leg_velocity(self, n: int, x: float, y: float, z: float) -> None:
        self._leg(n).set_velocity(x, y, z)

    def set_leg_acceleration(self, n: int, x: float, y: float, z: float) -> None:
        self._leg(n).set_acceleration(x, y, z)

    def move(self) -> None:
        """Advance one control period and drive the legs to their new positions."""
        self.pos = self.pos + PERIOD * self.vel + (PERIOD * PERIOD / 2.0) * self.acc
        self.vel = self.vel + PERIOD * self.acc
        for leg in self.legs:
            leg.integrate()
        for leg in self.legs:
            leg.apply_inverse_kinematics()