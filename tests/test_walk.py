import math

import pytest

from quadwalk.body import Body
from quadwalk.vector import Vec2, Vec3
from quadwalk.walk import FOOT_LIFT, Gait, Walker, is_right_side


def make_walker(gait=Gait.TROT):
    body = Body()
    body.set_leg_position(1, 0.0, 0.07, -0.25)
    body.set_leg_position(2, 0.0, 0.07, -0.25)
    body.set_leg_position(3, 0.0, -0.07, -0.25)
    body.set_leg_position(4, 0.0, -0.07, -0.25)
    body.move()
    return Walker(body, gait)


def test_right_side_legs():
    assert [is_right_side(n) for n in (1, 2, 3, 4)] == [False, False, True, True]


@pytest.mark.parametrize("gait, stages", [(Gait.CRAWL, 4), (Gait.TROT, 2), (Gait.STABLE, 4)])
def test_max_stage(gait, stages):
    assert make_walker(gait).max_stage() == stages


def test_all_legs_grounded_initially():
    walker = make_walker()
    assert all(walker.is_ground(n) for n in range(1, 5))
    assert walker.walking is False


def test_is_ground_rejects_bad_leg_number():
    with pytest.raises(ValueError):
        make_walker().is_ground(5)


def test_trot_start_lifts_diagonal():
    walker = make_walker()
    walker.start()
    assert walker.leg_state == 0x0A
    assert [walker.is_ground(n) for n in range(1, 5)] == [False, True, False, True]
    assert walker.walking is True
    assert walker.internal_time == 0.0


def test_trot_transition_toggles():
    walker = make_walker()
    walker.start()
    assert walker.transition() == 1
    assert walker.leg_state == 0x05
    assert walker.transition() == 0
    assert walker.leg_state == 0x0A


@pytest.mark.parametrize("gait", [Gait.CRAWL, Gait.STABLE])
def test_one_leg_transition_cycle(gait):
    walker = make_walker(gait)
    walker.start()
    assert walker.leg_state == 0x0D
    stages = [walker.transition() for _ in range(4)]
    assert stages == [1, 2, 3, 0]
    assert walker.leg_state == 0x0D
    # exactly one leg is lifted at each stage
    for _ in range(4):
        walker.transition()
        assert sum(walker.is_ground(n) for n in range(1, 5)) == 3


def test_path_point_endpoints():
    walker = make_walker()
    start_y = walker.body.leg_position(1).y
    assert walker.free_leg_path_point(1, 0.0).y == pytest.approx(start_y)
    assert walker.free_leg_path_point(1, 1.0).y == pytest.approx(-walker.leg_inward)
    assert walker.free_leg_path_point(3, 1.0).y == pytest.approx(walker.leg_inward)
    peak = walker.free_leg_path_point(2, 0.5)
    assert peak.z == pytest.approx(FOOT_LIFT - walker.walk_height)


def test_path_point_stride_is_symmetric():
    walker = make_walker()
    walker.walk_speed = 0.7
    first = walker.free_leg_path_point(4, 0.0)
    last = walker.free_leg_path_point(4, 1.0)
    assert first.x == pytest.approx(-last.x)
    assert walker.free_leg_path_point(4, 0.5).x == pytest.approx(0.0)
    assert first.z == pytest.approx(last.z)


def test_path_point_without_speed_stays_in_place():
    walker = make_walker()
    assert walker.free_leg_path_point(2, 0.3).x == pytest.approx(0.0)


def test_trot_rotation_axis():
    walker = make_walker()
    assert walker.rotation_axis() == Vec2(1, 3)
    walker.start()
    assert walker.rotation_axis() == Vec2(2, 4)


def test_stable_rotation_axis_is_none():
    assert make_walker(Gait.STABLE).rotation_axis() == Vec2(0, 0)


def test_crawl_rotation_axis_needs_three_feet():
    walker = make_walker(Gait.CRAWL)
    walker.leg_state = 0x03
    with pytest.raises(ValueError):
        walker.rotation_axis()


def test_crawl_rotation_axis_names_legs():
    walker = make_walker(Gait.CRAWL)
    walker.start()
    axis = walker.rotation_axis()
    assert axis.x in {0, 1, 2, 3, 4}
    assert axis.y in {0, 1, 2, 3, 4}


def test_tick_does_nothing_before_start():
    walker = make_walker()
    before = [walker.body.leg_position(n) for n in range(1, 5)]
    walker.tick()
    assert [walker.body.leg_position(n) for n in range(1, 5)] == before
    assert walker.internal_time == 0.0


def test_trot_tick_swings_lifted_legs():
    walker = make_walker()
    walker.start()
    grounded_before = walker.body.leg_position(2)
    expected = walker.free_leg_path_point(1, 0.0)
    walker.tick()
    assert walker.body.leg_position(1) == expected
    assert walker.body.legs[0].vel == Vec3()
    assert walker.body.legs[0].acc == Vec3()
    assert walker.body.leg_position(2) == grounded_before
    assert walker.internal_time == pytest.approx(0.01)


def test_trot_switches_stage_mid_cycle():
    walker = make_walker()
    walker.start()
    while walker.internal_time < 0.3:
        walker.tick()
    assert walker.stage == 1
    assert walker.is_ground(1)
    assert not walker.is_ground(2)


@pytest.mark.parametrize("gait", [Gait.TROT, Gait.CRAWL])
def test_cycle_restarts_after_period(gait):
    walker = make_walker(gait)
    walker.start()
    restarted = False
    for _ in range(60):
        walker.tick()
        if walker.internal_time == 0.0:
            restarted = True
            break
    assert restarted
    assert walker.stage == 0
    assert walker.walking


def test_stable_tick_moves_body_against_feet():
    walker = make_walker(Gait.STABLE)
    walker.start()
    walker.tick()
    body = walker.body
    assert body.vel.z == 0.0
    for n in range(1, 5):
        if walker.is_ground(n):
            assert body.legs[n - 1].vel == -body.vel


def test_balance_control_flag():
    walker = make_walker()
    assert walker.is_under_balance_control is False
    walker.start_balance_control()
    assert walker.is_under_balance_control is True


def test_control_balance_with_leg1_grounded():
    walker = make_walker()
    walker.body.set_leg_acceleration(2, 1.0, 1.0, 1.0)
    walker.body.set_leg_acceleration(4, 1.0, 1.0, 1.0)
    inputs = walker.control_balance(0.0, 0.0)
    body = walker.body
    assert all(math.isfinite(v) for v in inputs)
    assert body.vel == Vec3()
    assert body.legs[1].acc == Vec3()
    assert body.legs[3].acc == Vec3()
    assert body.legs[0].acc == -body.acc


def test_control_balance_with_leg1_lifted():
    walker = make_walker()
    walker.start()
    walker.body.set_leg_acceleration(1, 1.0, 1.0, 1.0)
    walker.control_balance(0.0, 0.0)
    body = walker.body
    assert body.legs[0].acc == Vec3()
    assert body.legs[2].acc == Vec3()
    assert body.legs[1].acc == -body.acc