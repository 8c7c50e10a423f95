import math

import pytest

from quadwalk.vector import (
    Vec2,
    Vec3,
    deg_to_rad,
    rad_to_deg,
    rodrigues_rp,
    saturate,
    sign,
)


def test_vec2_add_sub_roundtrip():
    a, b = Vec2(1.5, -2.0), Vec2(0.25, 4.0)
    assert (a + b) - b == a


def test_vec2_scalar_multiplication_both_sides():
    v = Vec2(1.0, -3.0)
    assert 2 * v == v * 2
    assert (v * 2).x == 2.0
    assert (v * 2).y == -6.0


def test_vec2_rotate_preserves_length_and_shifts_angle():
    v = Vec2(3.0, 1.0)
    r = v.rotate(0.4)
    assert r.length() == pytest.approx(v.length())
    assert r.angle() == pytest.approx(v.angle() + 0.4)


def test_vec2_rotate_quarter_turn():
    r = Vec2(1.0, 0.0).rotate(math.pi / 2)
    assert r.x == pytest.approx(0.0, abs=1e-12)
    assert r.y == pytest.approx(1.0)


def test_vec2_angle_and_length():
    v = Vec2(3.0, 4.0)
    assert v.angle() == pytest.approx(math.atan2(4.0, 3.0))
    assert v.length() == pytest.approx(5.0)


def test_vec3_arithmetic_roundtrip():
    a, b = Vec3(1.0, 2.0, 3.0), Vec3(-0.5, 0.25, 8.0)
    assert (a + b) - b == a
    assert -a + a == Vec3(0.0, 0.0, 0.0)
    assert 3 * a == a * 3


def test_vec3_cross_is_orthogonal():
    a, b = Vec3(1.0, 2.0, 3.0), Vec3(-2.0, 0.5, 1.0)
    c = a.cross(b)
    assert c.dot(a) == pytest.approx(0.0, abs=1e-12)
    assert c.dot(b) == pytest.approx(0.0, abs=1e-12)
    assert b.cross(a) == -c


def test_vec3_cross_of_unit_axes():
    assert Vec3(1.0, 0.0, 0.0).cross(Vec3(0.0, 1.0, 0.0)) == Vec3(0.0, 0.0, 1.0)


def test_vec3_normalized_has_unit_length():
    n = Vec3(2.0, -3.0, 6.0).normalized()
    assert n.length() == pytest.approx(1.0)


def test_vec3_normalized_zero_raises():
    with pytest.raises(ZeroDivisionError):
        Vec3().normalized()


def test_vec3_dot_with_self_is_squared_length():
    v = Vec3(1.0, -2.0, 0.5)
    assert v.dot(v) == pytest.approx(v.length() ** 2)


def test_rodrigues_level_gives_zero():
    n = Vec3(1.0, 1.0, 0.0).normalized()
    assert rodrigues_rp(n, 0.0, 0.0) == pytest.approx(0.0)


def test_rodrigues_zero_y_axis_raises():
    with pytest.raises(ZeroDivisionError):
        rodrigues_rp(Vec3(1.0, 0.0, 0.0), 0.1, 0.1)


@pytest.mark.parametrize(
    "x, expected", [(-5.0, -1.0), (0.5, 0.5), (7.0, 2.0)]
)
def test_saturate(x, expected):
    assert saturate(x, -1.0, 2.0) == expected


@pytest.mark.parametrize("x, expected", [(-3.0, -1.0), (0.0, 0.0), (2.5, 1.0)])
def test_sign(x, expected):
    assert sign(x) == expected


def test_angle_conversion():
    assert deg_to_rad(180) == pytest.approx(math.pi)
    assert rad_to_deg(deg_to_rad(37.5)) == pytest.approx(37.5)