"""
Conservative MUS confidence factor.

The factor is the Gamma quantile at the confidence level whose shape depends
on the factor itself (shape = 1 + ratio * factor, ratio = expected/tolerable
error). It is solved by fixed-point iteration starting from shape 1.
"""
from __future__ import annotations

import math

from scipy.stats import gamma

from audit_sampling.core.domain.errors import CalculationError, InvalidInputError
from audit_sampling.core.numeric.rounding import ceil_non_negative

CONVERGENCE_TOLERANCE = 1e-6
MAX_ITERATIONS = 1000


def _quantile(confidence_level: float, shape: float) -> float:
    value = float(gamma.ppf(confidence_level, shape))
    if not math.isfinite(value):
        raise CalculationError(f"gamma quantile undefined for shape={shape}")
    return value


def confidence_factor(confidence_level: float, error_ratio: float) -> float:
    """Return the converged Gamma quantile for the given expected/tolerable ratio."""
    if not 0.0 < confidence_level < 1.0:
        raise InvalidInputError("confidence_level must be in (0, 1)")

    if not 0.0 <= error_ratio < 1.0:
        raise InvalidInputError(
            "expected_error / tolerable_error must be in [0, 1) for conservative sizing"
        )

    factor = _quantile(confidence_level, 1.0)
    if error_ratio == 0.0:
        return factor

    for _ in range(MAX_ITERATIONS):
        previous = factor
        factor = _quantile(confidence_level, 1.0 + error_ratio * previous)
        if abs(factor - previous) <= CONVERGENCE_TOLERANCE:
            return factor

    raise CalculationError(
        f"confidence factor did not converge within {MAX_ITERATIONS} iterations"
    )


def conservative_sample_size(
    confidence_level: float,
    tolerable_error: float,
    expected_error: float,
    book_value: float,
) -> int:
    """Sample size from the factor rounded up to two decimals."""
    factor = confidence_factor(confidence_level, expected_error / tolerable_error)
    factor_cents = math.ceil(factor * 100.0)

    # ceil(ceil(100 f) / 100 / TE * BV)
    return ceil_non_negative(factor_cents * book_value / (100.0 * tolerable_error))
