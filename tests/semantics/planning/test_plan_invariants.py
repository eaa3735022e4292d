"""
Semantic test: MUS plan invariants.

Invariants:
- n == 0 iff tolerable error >= total book value (default floor)
- high_value_threshold == book_value / n for n > 0, +inf for n == 0
- increasing the expected error never decreases n
- n is never below the configured floor
"""

from __future__ import annotations

import math

import pytest

from audit_sampling.core.domain.advisories import Advisory
from audit_sampling.core.numeric.gamma import conservative_sample_size
from audit_sampling.planning.options import PlanningOptions
from audit_sampling.planning.planner import plan_sample

RAMP = [float(i) for i in range(1, 501)]
RAMP_BOOK_VALUE = 125_250.0


def test_ramp_population_plan() -> None:
    plan = plan_sample(
        RAMP,
        PlanningOptions(
            confidence_level=0.90,
            tolerable_error=100_000.0,
            expected_error=20_000.0,
        ),
    )

    # Interpolated between n(0 errors) = 2 and n(1 error) = 4.
    assert plan.n == 3
    assert 0 < plan.n <= len(RAMP)
    assert plan.book_value == RAMP_BOOK_VALUE
    assert math.isfinite(plan.high_value_threshold)
    assert plan.high_value_threshold == RAMP_BOOK_VALUE / 3
    assert plan.tolerable_taintings == pytest.approx(20_000.0 / RAMP_BOOK_VALUE * 3)
    assert plan.values == tuple(RAMP)
    assert plan.advisories == ()


def test_tolerable_error_equal_to_book_value_needs_no_sample() -> None:
    plan = plan_sample(
        RAMP,
        PlanningOptions(tolerable_error=RAMP_BOOK_VALUE, expected_error=0.0),
    )

    assert plan.n == 0
    assert plan.high_value_threshold == math.inf
    assert not plan.sampling_required
    assert Advisory.SAMPLING_NOT_REQUIRED in plan.advisories


def test_tolerable_error_above_book_value_needs_no_sample() -> None:
    plan = plan_sample(
        RAMP,
        PlanningOptions(tolerable_error=2 * RAMP_BOOK_VALUE, expected_error=0.0),
    )
    assert plan.n == 0


def test_tolerable_error_just_below_book_value_needs_a_sample() -> None:
    plan = plan_sample(
        RAMP,
        PlanningOptions(tolerable_error=RAMP_BOOK_VALUE - 1.0, expected_error=0.0),
    )

    assert plan.n > 0
    assert plan.high_value_threshold == RAMP_BOOK_VALUE / plan.n


def test_increasing_expected_error_never_decreases_n() -> None:
    sizes = [
        plan_sample(
            RAMP,
            PlanningOptions(tolerable_error=10_000.0, expected_error=expected),
        ).n
        for expected in (0.0, 500.0, 1_000.0, 2_000.0, 3_000.0)
    ]

    assert sizes == sorted(sizes)
    assert sizes[0] > 0


def test_zero_expected_error_uses_zero_error_solution() -> None:
    values = [100.0] * 200
    plan = plan_sample(values, PlanningOptions(tolerable_error=2_000.0, expected_error=0.0))

    # (1 - 0.1)^k <= 0.1 without replacement
    assert plan.n == 22
    assert plan.tolerable_taintings == 0.0


def test_minimum_floor_raises_n() -> None:
    values = [100.0] * 200
    plan = plan_sample(
        values,
        PlanningOptions(tolerable_error=2_000.0, expected_error=0.0, n_min=50),
    )

    assert plan.n == 50
    assert plan.high_value_threshold == 20_000.0 / 50


def test_errors_as_fractions_of_book_value() -> None:
    values = [100.0] * 10
    plan = plan_sample(
        values,
        PlanningOptions(tolerable_error=0.5, expected_error=0.1, errors_as_pct=True),
    )

    assert plan.tolerable_error == pytest.approx(500.0)
    assert plan.expected_error == pytest.approx(100.0)


def test_conservative_mode_never_lowers_n() -> None:
    options = PlanningOptions(tolerable_error=100_000.0, expected_error=20_000.0)
    optimal = plan_sample(RAMP, options)
    conservative = plan_sample(RAMP, options.model_copy(update={"conservative": True}))

    expected = max(
        optimal.n,
        conservative_sample_size(0.90, 100_000.0, 20_000.0, RAMP_BOOK_VALUE),
    )
    assert conservative.n == expected
    assert conservative.n >= optimal.n


def test_conservative_mode_keeps_zero_when_sampling_not_required() -> None:
    plan = plan_sample(
        RAMP,
        PlanningOptions(
            tolerable_error=RAMP_BOOK_VALUE,
            expected_error=0.0,
            conservative=True,
        ),
    )
    assert plan.n == 0


def test_combined_flag_is_carried() -> None:
    plan = plan_sample(
        RAMP,
        PlanningOptions(tolerable_error=100_000.0, expected_error=0.0, combined=True),
    )
    assert plan.combined
