"""Gait sequencing and balance control for the four-legged body."""

from __future__ import annotations

import math
from enum import IntEnum

from .body import Body
from .leg import PERIOD
from .vector import Vec2, Vec3, rodrigues_rp

__all__ = [
    "Gait",
    "DEFAULT_GAIT",
    "ALL_GROUNDED",
    "BALANCE_GAINS",
    "is_right_side",
    "Walker",
]

ALL_GROUNDED = 0x0F
FOOT_LIFT = 0.080  # peak height of a swinging foot, metres
STABLE_GAIN = 6.0
STABLE_TOLERANCE = 0.050
BALANCE_GAINS = (301.7671, 6.1144, 104.7996, 28.1953)

_LEG_COUNT = 4


class Gait(IntEnum):
    CRAWL = 0
    TROT = 1
    STABLE = 2


DEFAULT_GAIT = Gait.TROT

# Crawl and stable gaits lift one leg at a time in the order 2, 1, 3, 4.
_ONE_LEG_CYCLE = ((1, 0x0B, 2), (2, 0x0E, 1), (3, 0x07, 3))
_ONE_LEG_LAST = (0x0D, 0)


def _check_leg(n: int) -> None:
    if not 1 <= n <= _LEG_COUNT:
        raise ValueError(f"leg number must be 1..{_LEG_COUNT}, got {n}")


def is_right_side(n: int) -> bool:
    """Legs 3 and 4 are on the right side of the body."""
    return n >= 3


class Walker:
    """Drives a :class:`Body` through a gait, one control period per tick.

    ``leg_state`` holds one bit per leg (bit 0 is leg 1); a set bit means
    the foot is on the ground.
    """

    def __init__(self, body: Body, gait: Gait = DEFAULT_GAIT) -> None:
        self.body = body
        self.gait = Gait(gait)
        self.leg_state = ALL_GROUNDED
        self.walking = False
        self.internal_time = 0.0
        self.stage = 0
        self.balance_control = False
        self.walk_period = 0.50  # seconds
        self.walk_speed = 0.0  # m/s
        self.walk_height = 0.25  # m
        self.leg_inward = -0.07  # m
        self._theta13 = 0.0
        self._theta42 = 0.0

    def is_ground(self, n: int) -> bool:
        _check_leg(n)
        return bool((self.leg_state >> (n - 1)) & 0x01)

    def max_stage(self) -> int:
        if self.gait == Gait.TROT:
            return 2
        return 4

    def _first_lifted(self) -> int:
        for n in range(1, _LEG_COUNT + 1):
            if not self.is_ground(n):
                return n
        raise ValueError("no leg is lifted")

    def free_leg_path_point(self, n: int, u: float) -> Vec3:
        """Target of swinging leg ``n`` at phase ``u`` (0.0 to 1.0)."""
        leg_pos = self.body.leg_position(n)
        stages = self.max_stage()
        stride = self.walk_speed * self.walk_period * (stages - 1) / stages
        inward = self.leg_inward if is_right_side(n) else -self.leg_inward
        return Vec3(
            u * stride - stride / 2.0,
            (inward - leg_pos.y) * u + leg_pos.y,
            FOOT_LIFT / math.exp(10.0 * (u - 0.5) * (u - 0.5)) - self.walk_height,
        )

    def rotation_axis(self) -> Vec2:
        """Numbers of the two legs the body would tip over, or (0, 0)."""
        if self.gait == Gait.TROT:
            return Vec2(1, 3) if self.is_ground(1) else Vec2(2, 4)
        if self.gait != Gait.CRAWL:
            return Vec2(0, 0)

        gp = self.body.center_of_gravity()
        gp_xy = Vec2(gp.x, gp.y)
        grounded = []
        exc_num = 5
        for n in range(1, _LEG_COUNT + 1):
            if self.is_ground(n):
                grounded.append(self.body.leg_point(n))
            else:
                exc_num = n
        if len(grounded) < 3:
            raise ValueError("at least three legs must be on the ground")

        points = [Vec2(p.x, p.y) for p in grounded[:3]]
        edges = [points[1] - points[0], points[2] - points[1], points[0] - points[2]]

        def outside(i: int) -> bool:
            return (gp_xy - points[i]).rotate(-edges[i].angle()).y < 0.0

        for i in range(2):
            if outside(i):
                if i + 1 >= exc_num:
                    return Vec2(i + 2, i + 3)
                if i + 2 >= exc_num:
                    return Vec2(i + 1, i + 3)
                return Vec2(i + 1, i + 2)
        if outside(2):
            if 3 >= exc_num:
                return Vec2(1, 3)
            if 1 >= exc_num:
                return Vec2(2, 2)
            return Vec2(1, 2)
        return Vec2(0, 0)

    def transition(self) -> int:
        """Switch to the next set of lifted legs; return the new stage number."""
        if self.gait == Gait.TROT:
            self.leg_state = ~self.leg_state & 0x0F
            return self.leg_state & 1
        for n, state, stage in _ONE_LEG_CYCLE:
            if not self.is_ground(n):
                self.leg_state = state
                return stage
        self.leg_state, stage = _ONE_LEG_LAST
        return stage

    def start(self) -> None:
        """Apply the current leg positions and begin a new gait cycle."""
        self.body.move()
        self.walking = True
        self.internal_time = 0.0
        self.leg_state = 0x0A if self.gait == Gait.TROT else 0x0D

    def _swing(self, n: int, u: float) -> None:
        point = self.free_leg_path_point(n, u)
        self.body.set_leg_position(n, point.x, point.y, point.z)
        self.body.set_leg_velocity(n, 0.0, 0.0, 0.0)
        self.body.set_leg_acceleration(n, 0.0, 0.0, 0.0)

    def _advance_cycle(self) -> None:
        self.internal_time += PERIOD
        if self.internal_time >= self.walk_period:
            self.stage = 0
            self.start()

    def tick(self) -> None:
        """Advance the gait by one control period."""
        if not self.walking:
            return
        if self.gait == Gait.CRAWL:
            switching = self.walk_period / 4.0
            if self.internal_time - self.stage * switching >= switching:
                self.stage = self.transition()
            self._advance_cycle()
        elif self.gait == Gait.TROT:
            switching = self.walk_period / 2.0
            if self.internal_time - self.stage * switching >= switching:
                self.stage = self.transition()
            u = self.internal_time / switching - self.stage
            swinging = (2, 4) if self.is_ground(1) else (1, 3)
            for n in swinging:
                self._swing(n, u)
            self._advance_cycle()
        else:
            self._stable_tick()

    def _stable_tick(self) -> None:
        gp = self.body.center_of_gravity()
        tx = ty = 0.0
        for n in range(1, _LEG_COUNT + 1):
            if self.is_ground(n):
                point = self.body.leg_point(n)
                tx += point.x / 3.0
                ty += point.y / 3.0
        ev = Vec2((gp.x - tx) * 0.5, (gp.y - ty) * 0.3)

        self.body.set_velocity(-STABLE_GAIN * ev.x, -STABLE_GAIN * ev.y, 0.0)

        if ev.length() < STABLE_TOLERANCE:
            self._swing(self._first_lifted(), self.internal_time / self.walk_period)
            self.internal_time += PERIOD
            if self.internal_time >= self.walk_period:
                self.stage = self.transition()
                self.internal_time = 0.0

    def start_balance_control(self) -> None:
        self.balance_control = True

    @property
    def is_under_balance_control(self) -> bool:
        return self.balance_control

    def control_balance(self, roll: float, pitch: float) -> tuple[float, float]:
        """Push the body to keep it upright about the diagonal support axes.

        ``roll`` and ``pitch`` are the measured attitude in radians. Returns
        the control inputs for the 1-3 and 4-2 diagonals.
        """
        g0, g1, g2, g3 = BALANCE_GAINS
        body = self.body
        pre13, pre42 = self._theta13, self._theta42

        tilt13 = (body.leg_angle(1, 0) - body.leg_angle(3, 0)) / 2.0
        tilt42 = (body.leg_angle(4, 0) - body.leg_angle(2, 0)) / 2.0

        axis13 = body.leg_point(1) - body.leg_point(3)
        axis42 = body.leg_point(4) - body.leg_point(2)
        angle13 = Vec2(axis13.x, axis13.y).angle()
        angle42 = Vec2(axis42.x, axis42.y).angle()

        self._theta13 = -rodrigues_rp(axis13.normalized(), roll, pitch) + tilt13
        self._theta42 = -rodrigues_rp(axis42.normalized(), roll, pitch) + tilt42
        theta_dot13 = (self._theta13 - pre13) / PERIOD
        theta_dot42 = (self._theta42 - pre42) / PERIOD

        offset = math.hypot(body.pos.x, body.pos.y)
        x = offset if body.pos.y < 0 else -offset
        speed = math.hypot(body.vel.x, body.vel.y)
        x_dot = speed if body.vel.y < 0 else -speed

        input13 = -(g0 * x + g1 * x_dot + g2 * self._theta13 + g3 * theta_dot13)
        input42 = -(g0 * x + g1 * x_dot + g2 * self._theta42 + g3 * theta_dot42)

        body.set_velocity(0.0, 0.0, 0.0)

        if self.is_ground(1):
            body.add_force(
                input13 * abs(math.sin(angle13)) * math.cos(tilt13),
                -input13 * abs(math.cos(angle13)) * math.cos(tilt13),
                input13 * math.sin(tilt13),
            )
            body.set_leg_acceleration(2, 0.0, 0.0, 0.0)
            body.set_leg_acceleration(4, 0.0, 0.0, 0.0)
        else:
            body.add_force(
                input42 * abs(math.sin(angle42)) * math.cos(tilt42),
                input42 * abs(math.cos(angle42)) * math.cos(tilt42),
                input13 * math.sin(tilt42),
            )
            body.set_leg_acceleration(1, 0.0, 0.0, 0.0)
            body.set_leg_acceleration(3, 0.0, 0.0, 0.0)
        return input13, input42