"""
Semantic test: per-population sampling workflow.

Invariants:
- selected indices are unique, ascending positions in the population
- an empty population is skipped with an advisory, never an error
- a plan with n == 0 yields an empty sample without extraction
- the high value policy picks the selection strategy
"""

from __future__ import annotations

import logging
from typing import Any

import pytest

from audit_sampling.core.domain.advisories import Advisory
from audit_sampling.core.domain.errors import InvalidInputError
from audit_sampling.core.events.event_bus import EventBus
from audit_sampling.core.events.events import PopulationSampledEvent
from audit_sampling.workflow.parameters import SamplingParameters
from audit_sampling.workflow.runner import random_indices, run_population, run_populations

RAMP = [float(i) for i in range(1, 501)]


class _CollectingSink:
    def __init__(self) -> None:
        self.events: list[Any] = []

    def on_event(self, event: Any) -> None:
        self.events.append(event)


def mus_params(**overrides: Any) -> SamplingParameters:
    data: dict[str, Any] = {
        "method": "mus",
        "materiality": 100_000.0,
        "risk_factor": 0.2,
        "confidence": 0.90,
        "seed": 0,
    }
    data.update(overrides)
    return SamplingParameters.from_json_obj(data)


def test_mus_population_is_planned_and_extracted() -> None:
    result = run_population("receivables", RAMP, mus_params())

    assert result.plan is not None
    assert result.plan.n == 3
    assert result.extraction is not None
    assert result.sample_size == 3
    assert list(result.selected_indices) == sorted(set(result.selected_indices))
    assert result.population_size == 500


def test_mus_banner_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="audit_sampling.workflow.runner"):
        run_population("receivables", RAMP, mus_params())

    assert "[MUS] population='receivables' BV=125250.00 TE=100000.00 EE=20000.00" in caplog.text


def test_no_sampling_required_yields_empty_sample() -> None:
    result = run_population("tiny", [10.0, 20.0], mus_params())

    assert result.plan is not None
    assert result.plan.n == 0
    assert result.extraction is None
    assert result.selected_indices == ()
    assert Advisory.SAMPLING_NOT_REQUIRED in result.advisories


def test_empty_population_is_skipped() -> None:
    result = run_population("nothing", [], mus_params())

    assert result.population_size == 0
    assert result.selected_indices == ()
    assert result.advisories == (Advisory.EMPTY_POPULATION,)


def test_threshold_policy_without_high_value_guarantee() -> None:
    amounts = [5_000.0] + [10.0] * 100
    params = mus_params(materiality=500.0, risk_factor=0.0, guarantee_high_values=False)
    result = run_population("dominated", amounts, params)

    assert result.extraction is None
    assert result.plan is not None
    assert 0 < result.sample_size < result.plan.n
    assert Advisory.DUPLICATE_HITS_MERGED in result.advisories


def test_planning_errors_propagate() -> None:
    with pytest.raises(InvalidInputError, match="n_min"):
        run_population("short", [100.0, 200.0], mus_params(materiality=50.0, n_min=2))


def test_random_population_selection() -> None:
    params = SamplingParameters.from_json_obj({"method": "random", "size": 10, "seed": 4})
    values = [float(i) for i in range(100)]

    first = run_population("expenses", values, params)
    second = run_population("expenses", values, params)

    assert first.plan is None
    assert first.sample_size == 10
    assert first.selected_indices == second.selected_indices
    assert list(first.selected_indices) == sorted(set(first.selected_indices))


def test_random_size_above_population_takes_everything() -> None:
    assert random_indices(4, 10, seed=1) == [0, 1, 2, 3]


def test_populations_are_sampled_in_order_and_reported() -> None:
    sink = _CollectingSink()
    results = run_populations(
        {"debit": RAMP, "credit": [], "small": [1.0, 2.0]},
        mus_params(),
        event_bus=EventBus(sinks=[sink]),
    )

    assert [r.population for r in results] == ["debit", "credit", "small"]

    sampled = [e for e in sink.events if isinstance(e, PopulationSampledEvent)]
    assert [(e.population, e.sample_size) for e in sampled] == [
        ("debit", 3),
        ("credit", 0),
        ("small", 0),
    ]


def test_high_value_policy_and_stabilization_reach_extraction() -> None:
    values = [float(i) for i in range(1, 301)] + [40_000.0, 60_000.0]
    params = mus_params(materiality=7_000.0, risk_factor=0.0, seed=5, obey_n_as_min=True)

    result = run_population("with_high_values", values, params)

    assert result.extraction is not None
    assert result.extraction.obey_n_as_min
    assert result.extraction.extensions == 2
    assert [hv.index for hv in result.extraction.high_values] == [300, 301]
    assert result.plan is not None
    assert result.sample_size == result.plan.n
