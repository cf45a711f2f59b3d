"""
Dice - The single random draw of a turn.

The random source is injected. By default it is the operating system's
generator, so a value cannot be predicted before it is drawn. Tests pass a
seeded random.Random for replayable games.
"""

from __future__ import annotations
import random

DIE_FACES = 6


class Die:
    """A fair six-sided die over an injectable random source."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.SystemRandom()

    def roll(self) -> int:
        """Uniform integer in [1, 6]."""
        return self.rng.randint(1, DIE_FACES)


def draw_die(rng: random.Random | None = None) -> int:
    """Draw one die value."""
    return Die(rng).roll()
