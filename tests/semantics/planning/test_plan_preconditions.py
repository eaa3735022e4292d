"""
Semantic test: planning preconditions.

Invariant:
Each violated precondition is a distinct InvalidInputError naming the
offending parameter.
"""

from __future__ import annotations

import math

import pytest

from audit_sampling.core.domain.errors import InvalidInputError
from audit_sampling.planning.options import PlanningOptions
from audit_sampling.planning.planner import plan_sample

VALUES = [100.0] * 10


def test_empty_population_is_rejected() -> None:
    with pytest.raises(InvalidInputError, match="at least one item"):
        plan_sample([], PlanningOptions(tolerable_error=10.0, expected_error=0.0))


@pytest.mark.parametrize("confidence", [0.0, 1.0, 1.5, -0.2, math.nan])
def test_confidence_outside_unit_interval_is_rejected(confidence: float) -> None:
    options = PlanningOptions(
        confidence_level=confidence,
        tolerable_error=10.0,
        expected_error=0.0,
    )
    with pytest.raises(InvalidInputError, match="confidence_level"):
        plan_sample(VALUES, options)


@pytest.mark.parametrize("tolerable", [math.nan, 0.0, -10.0, math.inf])
def test_tolerable_error_must_be_positive_and_finite(tolerable: float) -> None:
    options = PlanningOptions(tolerable_error=tolerable, expected_error=0.0)
    with pytest.raises(InvalidInputError, match="tolerable_error"):
        plan_sample(VALUES, options)


def test_tolerable_error_defaults_to_unresolved() -> None:
    with pytest.raises(InvalidInputError, match="tolerable_error"):
        plan_sample(VALUES, PlanningOptions(expected_error=0.0))


@pytest.mark.parametrize("expected", [math.nan, -1.0])
def test_expected_error_must_be_non_negative(expected: float) -> None:
    options = PlanningOptions(tolerable_error=100.0, expected_error=expected)
    with pytest.raises(InvalidInputError, match="expected_error"):
        plan_sample(VALUES, options)


def test_floor_must_be_below_population_size() -> None:
    options = PlanningOptions(tolerable_error=100.0, expected_error=0.0, n_min=10)
    with pytest.raises(InvalidInputError, match="n_min"):
        plan_sample(VALUES, options)


def test_options_forbid_unknown_keys() -> None:
    with pytest.raises(ValueError):
        PlanningOptions.from_json_obj({"tolerable_error": 1.0, "bogus": True})
