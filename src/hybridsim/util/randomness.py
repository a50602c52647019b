"""Shared randomness for robots, generators, and schedulers.

A single :class:`random.Random` instance so that one ``seed`` call makes a
whole experiment reproducible.  Loaded algorithm and generator scripts
should draw from ``rng`` as well.
"""

from __future__ import annotations

import random

rng = random.Random()


def seed(value: int | None) -> None:
    """Reseed the shared generator (``None`` reseeds from system entropy)."""
    rng.seed(value)
