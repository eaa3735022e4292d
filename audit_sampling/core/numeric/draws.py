"""Seeded uniform draws for selection start points."""

from __future__ import annotations

import time

import numpy as np


def resolve_seed(seed: int | None) -> int:
    """Return ``seed`` or a time-derived seed when none was supplied."""
    if seed is not None:
        return seed
    return time.time_ns()


def draw_uniform(seed: int, high: float) -> float:
    """Draw one value from [0, high) with a generator seeded by ``seed``."""
    rng = np.random.default_rng(seed)
    return float(rng.uniform(0.0, high))
