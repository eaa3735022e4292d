"""
Sampling result models.

Plans, extractions and selections are immutable values. Every item keeps
its position (``index``) in the caller's book-value sequence so a selection
can be mapped back to the source record.
"""

# pylint: disable=missing-class-docstring
from __future__ import annotations

import math
from dataclasses import dataclass

from audit_sampling.core.domain.advisories import Advisory

# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Plan:
    """
    Result of MUS planning for one population.

    ``values`` is the original book-value sequence. Negative and non-finite
    values stay in place but contribute nothing to ``book_value``.

    Invariants:
    - ``n`` is an integer >= the configured floor
    - ``high_value_threshold`` is finite iff ``n > 0``
    """

    values: tuple[float, ...]
    confidence_level: float
    tolerable_error: float
    expected_error: float
    book_value: float
    n: int
    high_value_threshold: float
    tolerable_taintings: float
    combined: bool = False
    advisories: tuple[Advisory, ...] = ()

    @property
    def sampling_required(self) -> bool:
        return self.n > 0 and math.isfinite(self.high_value_threshold)


# ---------------------------------------------------------------------------
# Extraction (high value partition + systematic grid)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HighValueItem:
    index: int
    book_value: float


@dataclass(frozen=True, slots=True)
class SamplingUnit:
    """Member of the sampling population with its cumulative monetary units."""

    index: int
    book_value: float
    cumulative_units: int


@dataclass(frozen=True, slots=True)
class ExtractedItem:
    """
    Item hit by the selection grid.

    ``mus_hit`` is the monetary unit that selected the item; it lies in
    ``(cum_before, cum_after]`` except for a hit at unit 0, which covers the
    first item.
    """

    index: int
    book_value: float
    mus_hit: int
    cum_before: int
    cum_after: int


@dataclass(frozen=True, slots=True)
class Extraction:
    plan: Plan
    start_point: float
    seed: int | None
    obey_n_as_min: bool
    high_values: tuple[HighValueItem, ...]
    sample_population: tuple[SamplingUnit, ...]
    sampling_interval: float
    sample: tuple[ExtractedItem, ...]
    extensions: int
    combined: bool = False

    @property
    def selected_indices(self) -> list[int]:
        """Ascending original positions of every audited item."""
        indices = {item.index for item in self.high_values}
        indices.update(item.index for item in self.sample)
        return sorted(indices)


# ---------------------------------------------------------------------------
# Strategy-neutral selection result
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PpsSelection:
    """
    Result of a systematic PPS selection.

    - indices: unique selected positions, strictly increasing
    - requested: the sample size asked for
    - hits: selection points that landed on an item (before de-duplication)
    """

    indices: tuple[int, ...]
    requested: int
    hits: int

    @property
    def merged_hits(self) -> int:
        return self.hits - len(self.indices)

    @property
    def shortfall(self) -> int:
        return max(self.requested - len(self.indices), 0)
