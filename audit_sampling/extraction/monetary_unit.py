"""
Systematic monetary unit extraction with guaranteed high values.

Items at or above the sampling interval are audited with certainty. The
remaining sampling population is laid out on a monetary unit axis and hit
by a fixed grid ``round(start + j * interval)``; each hit selects the item
whose cumulative unit range covers it.
"""

from __future__ import annotations

import logging
import math
from bisect import bisect_left
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from audit_sampling.core.domain.errors import CalculationError, InvalidInputError
from audit_sampling.core.domain.types import (
    ExtractedItem,
    Extraction,
    HighValueItem,
    PpsSelection,
    SamplingUnit,
)
from audit_sampling.core.events.events import (
    ExtractionCompletedEvent,
    SelectionDeduplicatedEvent,
)
from audit_sampling.core.numeric.draws import draw_uniform, resolve_seed
from audit_sampling.core.numeric.rounding import round_cents, round_units
from audit_sampling.extraction.options import ExtractionOptions
from audit_sampling.extraction.selector import SystematicSelector

if TYPE_CHECKING:
    from audit_sampling.core.domain.types import Plan
    from audit_sampling.core.events.event_bus import EventBus

LOGGER = logging.getLogger(__name__)

MAX_STABILIZATION_ROUNDS = 1000


@dataclass(frozen=True, slots=True)
class _GridOutcome:
    start_point: float
    seed: int | None
    interval: float
    high_values: tuple[HighValueItem, ...]
    sample_population: tuple[SamplingUnit, ...]
    sample: tuple[ExtractedItem, ...]
    rounds: int


def _eligible_items(values: Sequence[float]) -> list[tuple[int, float]]:
    # Non-finite, zero and negative values can never be selected.
    return [(i, v) for i, v in enumerate(values) if math.isfinite(v) and v > 0.0]


def _partition(
    items: list[tuple[int, float]],
    interval: float,
) -> tuple[list[HighValueItem], list[tuple[int, float]]]:
    high_values: list[HighValueItem] = []
    population: list[tuple[int, float]] = []
    for index, value in items:
        if value >= interval:
            high_values.append(HighValueItem(index=index, book_value=value))
        else:
            population.append((index, value))
    return high_values, population


def _run_grid(
    values: Sequence[float],
    n: int,
    threshold: float,
    *,
    start_point: float | None,
    seed: int | None,
    obey_n_as_min: bool,
) -> _GridOutcome:
    # pylint: disable=too-many-locals
    items = _eligible_items(values)

    # ------------------------------------------------------------------
    # 1. High value partition (optionally stabilized)
    # ------------------------------------------------------------------

    interval = threshold
    high_values, population = _partition(items, interval)

    rounds = 0
    if obey_n_as_min:
        while True:
            slots = n - len(high_values)
            if slots <= 0:
                raise CalculationError(
                    "no items left for sampling after removing high values "
                    f"(n={n}, high values={len(high_values)})"
                )

            previous = interval
            interval = sum(v for _, v in population) / slots
            rounds += 1

            if interval == previous:
                break

            if rounds >= MAX_STABILIZATION_ROUNDS:
                raise CalculationError(
                    f"sampling interval did not stabilize within {MAX_STABILIZATION_ROUNDS} rounds"
                )

            high_values, population = _partition(items, interval)

    # ------------------------------------------------------------------
    # 2. Start point
    # ------------------------------------------------------------------

    if start_point is not None:
        if not (math.isfinite(start_point) and 0.0 <= start_point <= interval):
            raise InvalidInputError(
                f"start_point must be in [0, {interval}] (got {start_point})"
            )
        start = float(start_point)
    else:
        seed = resolve_seed(seed)
        start = draw_uniform(seed, interval)

    # ------------------------------------------------------------------
    # 3. Cumulative monetary units of the sampling population
    # ------------------------------------------------------------------

    cumulative: list[int] = []
    running = 0
    for _, value in population:
        running += round_units(value)
        cumulative.append(running)
    total_units = running

    sample_population = tuple(
        SamplingUnit(index=index, book_value=value, cumulative_units=units)
        for (index, value), units in zip(population, cumulative, strict=True)
    )

    # ------------------------------------------------------------------
    # 4. Selection grid
    # ------------------------------------------------------------------

    draws = max(n - len(high_values), 0)
    step = round_cents(interval)

    hits: list[ExtractedItem] = []
    for j in range(draws + 1):
        unit = max(round(start + j * step), 0)
        if unit > total_units:
            break

        # Smallest position whose cumulative sum covers the hit.
        position = bisect_left(cumulative, unit)
        if position >= len(cumulative):
            continue

        index, value = population[position]
        hits.append(
            ExtractedItem(
                index=index,
                book_value=value,
                mus_hit=unit,
                cum_before=cumulative[position - 1] if position > 0 else 0,
                cum_after=cumulative[position],
            )
        )

    # The grid has draws + 1 points; never take more than the free slots.
    sample = tuple(hits[:draws])

    return _GridOutcome(
        start_point=start,
        seed=seed,
        interval=interval,
        high_values=tuple(high_values),
        sample_population=sample_population,
        sample=sample,
        rounds=rounds,
    )


class MonetaryUnitSelector(SystematicSelector):
    """Systematic MUS selection that audits every high value item."""

    guarantees_high_values = True

    def __init__(
        self,
        *,
        obey_n_as_min: bool = False,
        event_bus: EventBus | None = None,
    ) -> None:
        self._obey_n_as_min = obey_n_as_min
        self._event_bus = event_bus

    def extract(self, plan: Plan, options: ExtractionOptions | None = None) -> Extraction:
        """Draw the sample for ``plan``.

        ``options.obey_n_as_min`` must match the selector's own setting.
        """
        if options is None:
            options = ExtractionOptions(obey_n_as_min=self._obey_n_as_min)
        elif options.obey_n_as_min != self._obey_n_as_min:
            raise InvalidInputError(
                f"options.obey_n_as_min={options.obey_n_as_min} disagrees with the "
                f"selector (obey_n_as_min={self._obey_n_as_min})"
            )

        if plan.n <= 0:
            raise InvalidInputError("plan.n must be > 0 for extraction")

        outcome = _run_grid(
            plan.values,
            plan.n,
            plan.high_value_threshold,
            start_point=options.start_point,
            seed=options.seed,
            obey_n_as_min=options.obey_n_as_min,
        )

        # Reassessed for reporting only; selection is already fixed.
        population_sum = sum(unit.book_value for unit in outcome.sample_population)
        sampling_interval = (
            population_sum / len(outcome.sample) if outcome.sample else math.inf
        )

        extraction = Extraction(
            plan=plan,
            start_point=outcome.start_point,
            seed=outcome.seed,
            obey_n_as_min=options.obey_n_as_min,
            high_values=outcome.high_values,
            sample_population=outcome.sample_population,
            sampling_interval=sampling_interval,
            sample=outcome.sample,
            extensions=outcome.rounds,
            combined=options.combined,
        )

        LOGGER.info(
            "Extracted %d sampled + %d high value items (n=%d, start=%.4f, interval=%.4f)",
            len(extraction.sample),
            len(extraction.high_values),
            plan.n,
            extraction.start_point,
            outcome.interval,
        )

        if self._event_bus is not None:
            self._event_bus.emit(
                ExtractionCompletedEvent(
                    start_point=extraction.start_point,
                    seed=extraction.seed,
                    high_values=len(extraction.high_values),
                    sample_size=len(extraction.sample),
                    sampling_interval=extraction.sampling_interval,
                    extensions=extraction.extensions,
                )
            )

        return extraction

    def select(
        self,
        amounts: Sequence[float],
        n: int,
        *,
        seed: int | None = None,
    ) -> PpsSelection:
        values = [float(a) for a in amounts]
        total = sum(v for _, v in _eligible_items(values))

        if n <= 0 or total <= 0.0:
            return PpsSelection(indices=(), requested=n, hits=0)

        outcome = _run_grid(
            values,
            n,
            total / n,
            start_point=None,
            seed=seed,
            obey_n_as_min=self._obey_n_as_min,
        )

        indices = {item.index for item in outcome.high_values}
        indices.update(item.index for item in outcome.sample)
        selection = PpsSelection(
            indices=tuple(sorted(indices)),
            requested=n,
            hits=len(outcome.high_values) + len(outcome.sample),
        )

        if selection.merged_hits > 0 and self._event_bus is not None:
            self._event_bus.emit(
                SelectionDeduplicatedEvent(
                    requested=n,
                    hits=selection.hits,
                    unique=len(selection.indices),
                )
            )

        return selection


def extract_sample(
    plan: Plan,
    options: ExtractionOptions | None = None,
    *,
    event_bus: EventBus | None = None,
) -> Extraction:
    """Systematic MUS extraction for a computed plan."""
    if options is None:
        options = ExtractionOptions()
    selector = MonetaryUnitSelector(
        obey_n_as_min=options.obey_n_as_min,
        event_bus=event_bus,
    )
    return selector.extract(plan, options)
