"""Per-population sampling runner."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Sequence

import numpy as np

from audit_sampling.core.domain.advisories import Advisory
from audit_sampling.core.events.events import PopulationSampledEvent
from audit_sampling.core.events.reporting import report_advisory
from audit_sampling.core.numeric.draws import resolve_seed
from audit_sampling.core.numeric.rounding import eligible_value
from audit_sampling.extraction.factory import make_selector
from audit_sampling.extraction.monetary_unit import MonetaryUnitSelector
from audit_sampling.planning.planner import plan_sample

if TYPE_CHECKING:
    from audit_sampling.core.domain.types import Extraction, Plan
    from audit_sampling.core.events.event_bus import EventBus
    from audit_sampling.workflow.parameters import SamplingParameters

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PopulationResult:
    """
    Outcome of sampling one population.

    ``selected_indices`` are positions in the population's value sequence,
    ascending (original record order).
    """

    population: str
    method: str
    population_size: int
    selected_indices: tuple[int, ...]
    plan: Plan | None = None
    extraction: Extraction | None = None
    advisories: tuple[Advisory, ...] = ()

    @property
    def sample_size(self) -> int:
        return len(self.selected_indices)


def random_indices(population_size: int, size: int, *, seed: int | None = None) -> list[int]:
    """Simple random selection without replacement, in original order."""
    if size >= population_size:
        return list(range(population_size))
    rng = np.random.default_rng(resolve_seed(seed))
    chosen = rng.choice(population_size, size=size, replace=False)
    return sorted(int(i) for i in chosen)


def run_population(
    name: str,
    values: Sequence[float],
    params: SamplingParameters,
    *,
    event_bus: EventBus | None = None,
) -> PopulationResult:
    """
    Sample a single population.

    - empty populations are skipped with an advisory
    - MUS plans with n == 0 produce an empty sample (no extraction)
    - planning/extraction failures propagate as SamplingError
    """
    book_values = [float(v) for v in values]
    advisories: list[Advisory] = []

    if not book_values:
        advisories.append(
            report_advisory(
                Advisory.EMPTY_POPULATION,
                f"population '{name}' is empty; skipped",
                logger=LOGGER,
                event_bus=event_bus,
            )
        )
        result = PopulationResult(
            population=name,
            method=params.method,
            population_size=0,
            selected_indices=(),
            advisories=tuple(advisories),
        )
        _emit_sampled(result, event_bus)
        return result

    if params.method == "random":
        # validated: random parameters always carry a size
        size = params.size or 0
        result = PopulationResult(
            population=name,
            method=params.method,
            population_size=len(book_values),
            selected_indices=tuple(
                random_indices(len(book_values), size, seed=params.seed)
            ),
        )
        _emit_sampled(result, event_bus)
        return result

    options = params.to_planning_options()
    book_value = sum(eligible_value(v) for v in book_values)
    LOGGER.info(
        "[MUS] population='%s' BV=%.2f TE=%.2f EE=%.2f Conf=%.2f BV/TE=%.2f",
        name,
        book_value,
        options.tolerable_error,
        options.expected_error,
        options.confidence_level,
        book_value / options.tolerable_error if options.tolerable_error > 0 else math.inf,
    )

    plan = plan_sample(book_values, options, event_bus=event_bus)
    advisories.extend(plan.advisories)

    selector = make_selector(
        guarantee_high_values=params.guarantee_high_values,
        obey_n_as_min=params.obey_n_as_min,
        event_bus=event_bus,
    )

    extraction: Extraction | None = None
    if plan.n == 0:
        selected: tuple[int, ...] = ()
    elif isinstance(selector, MonetaryUnitSelector):
        # Plan-driven path keeps the full audit trail.
        extraction = selector.extract(plan, params.to_extraction_options())
        selected = tuple(extraction.selected_indices)
    else:
        selection = selector.select(book_values, plan.n, seed=params.seed)
        if selection.merged_hits > 0:
            advisories.append(Advisory.DUPLICATE_HITS_MERGED)
        selected = selection.indices

    result = PopulationResult(
        population=name,
        method=params.method,
        population_size=len(book_values),
        selected_indices=selected,
        plan=plan,
        extraction=extraction,
        advisories=tuple(advisories),
    )
    _emit_sampled(result, event_bus)
    return result


def run_populations(
    populations: Mapping[str, Sequence[float]],
    params: SamplingParameters,
    *,
    event_bus: EventBus | None = None,
) -> list[PopulationResult]:
    """Sample each population in turn, in mapping order."""
    return [
        run_population(name, values, params, event_bus=event_bus)
        for name, values in populations.items()
    ]


def _emit_sampled(result: PopulationResult, event_bus: EventBus | None) -> None:
    LOGGER.info(
        "Population '%s': %d of %d items selected (%s)",
        result.population,
        result.sample_size,
        result.population_size,
        result.method,
    )
    if event_bus is not None:
        event_bus.emit(
            PopulationSampledEvent(
                population=result.population,
                method=result.method,
                population_size=result.population_size,
                sample_size=result.sample_size,
            )
        )
