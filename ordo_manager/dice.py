"""Quick dice rolls for the session table."""

import random

DICE = (4, 6, 8, 10, 12, 20, 100)


def roll(sides: int, rng: random.Random | None = None) -> int:
    """Roll one die with ``sides`` faces (one of DICE) and return 1..sides."""
    if sides not in DICE:
        raise ValueError(f"Unsupported die: d{sides}")
    return (rng or random).randint(1, sides)
