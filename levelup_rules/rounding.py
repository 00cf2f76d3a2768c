"""Rounding used for user-facing sizes and points."""

import math


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (2.5 -> 3), unlike round()."""
    return math.floor(value + 0.5)
