"""
Semantic test: conservative confidence factor.

Invariants:
- with no expected error the factor is the Gamma(1) quantile, which rounds
  up to the familiar reliability factors 2.31 / 3.00 / 4.61
- with an expected error the factor is a fixed point of
  f = GammaQuantile(confidence, shape = 1 + ratio * f)
- the iteration is capped and fails loudly instead of looping
"""

from __future__ import annotations

import math

import pytest
from scipy.stats import gamma

from audit_sampling.core.domain.errors import CalculationError, InvalidInputError
from audit_sampling.core.numeric import gamma as gamma_module
from audit_sampling.core.numeric.gamma import confidence_factor, conservative_sample_size


@pytest.mark.parametrize(
    ("confidence", "reliability_factor"),
    [(0.90, 2.31), (0.95, 3.00), (0.99, 4.61)],
)
def test_zero_expected_error_matches_reliability_factors(
    confidence: float, reliability_factor: float
) -> None:
    factor = confidence_factor(confidence, 0.0)

    assert factor == pytest.approx(-math.log(1.0 - confidence), abs=1e-9)
    assert math.ceil(factor * 100.0) / 100.0 == pytest.approx(reliability_factor)


def test_factor_is_a_fixed_point() -> None:
    ratio = 0.25
    factor = confidence_factor(0.95, ratio)

    assert factor > confidence_factor(0.95, 0.0)
    assert factor == pytest.approx(gamma.ppf(0.95, 1.0 + ratio * factor), abs=1e-5)


@pytest.mark.parametrize("ratio", [1.0, 1.5, -0.1])
def test_ratio_outside_range_is_rejected(ratio: float) -> None:
    with pytest.raises(InvalidInputError):
        confidence_factor(0.90, ratio)


def test_confidence_outside_range_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        confidence_factor(1.0, 0.0)


def test_non_convergence_is_a_calculation_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(gamma_module, "MAX_ITERATIONS", 1)

    with pytest.raises(CalculationError):
        confidence_factor(0.90, 0.5)


def test_conservative_sample_size_uses_rounded_factor() -> None:
    # 3.00 / 10_000 * 1_000_000
    assert conservative_sample_size(0.95, 10_000.0, 0.0, 1_000_000.0) == 300
