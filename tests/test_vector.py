from blockstore.vector import UVec3, Vec3

import pytest


def test_add_and_subtract():
    a = Vec3(1, -2, 3)
    b = Vec3(-4, 5, 0)
    assert a + b == Vec3(-3, 3, 3)
    assert a - b == Vec3(5, -7, 3)
    assert a + UVec3(1, 1, 1) == Vec3(2, -1, 4)


def test_signum_and_abs():
    v = Vec3(-7, 0, 4)
    assert v.signum() == Vec3(-1, 0, 1)
    assert v.abs() == UVec3(7, 0, 4)


def test_size_and_volume_to_are_order_independent():
    a = Vec3(-1, 2, 5)
    b = Vec3(3, -2, 5)
    assert a.size_to(b) == UVec3(5, 5, 1)
    assert b.size_to(a) == a.size_to(b)
    assert a.volume_to(b) == 25
    assert Vec3(-2, 3, -4).volume() == 24


def test_min_max_and_unpacking():
    a = Vec3(1, -5, 2)
    b = Vec3(-1, 4, 2)
    assert a.min(b) == Vec3(-1, -5, 2)
    assert a.max(b) == Vec3(1, 4, 2)
    x, y, z = a
    assert (x, y, z) == (1, -5, 2)
    assert repr(a) == "(1, -5, 2)"


def test_unsigned_rejects_negative_components():
    with pytest.raises(ValueError):
        UVec3(0, -1, 0)


def test_signed_and_unsigned_are_distinct_keys():
    assert Vec3(1, 2, 3) != UVec3(1, 2, 3)
    assert len({Vec3(1, 2, 3), Vec3(1, 2, 3), UVec3(1, 2, 3)}) == 2
