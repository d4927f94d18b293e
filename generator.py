"""
Deterministic pseudo-random values keyed by a wallet address.

The generator is stateless: ``next_value`` derives its output from the seed
alone, so a given address renders the same synthetic data on every call.
Every draw with the same seed yields the same fraction; only the bounds
change the result. Callers that want decorrelated values must vary the seed.
"""

import math


def seed(address: str) -> int:
    """Sum of the character codes of the address."""
    return sum(ord(ch) for ch in address)


def fraction(seed_value: float) -> float:
    x = math.sin(seed_value * 9999) * 10000
    return x - math.floor(x)


def next_value(seed_value: float, minimum: float, maximum: float) -> float:
    """Value in [minimum, maximum) for the given seed."""
    return minimum + fraction(seed_value) * (maximum - minimum)
