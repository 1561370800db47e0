"""Tests for ordo_manager.dice."""

import random

import pytest

from ordo_manager.dice import DICE, roll


@pytest.mark.parametrize("sides", DICE)
def test_roll_in_range(sides):
    rng = random.Random(1234)
    for _ in range(50):
        assert 1 <= roll(sides, rng) <= sides


def test_roll_is_reproducible_with_seeded_rng():
    assert roll(20, random.Random(7)) == roll(20, random.Random(7))


@pytest.mark.parametrize("sides", [0, 3, 7, 1000])
def test_unsupported_die(sides):
    with pytest.raises(ValueError, match="Unsupported die"):
        roll(sides)
