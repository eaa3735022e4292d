"""
Hypergeometric sample-size search.

The population is expressed in monetary units: ``error_units`` units are
allowed to be misstated (tolerable error) and ``clean_units`` are correct.
For an assumed number of errors ``q`` the required sample is the smallest
number of draws ``k`` with ``P[X <= q] <= alpha``. The CDF is non-increasing
in ``k``, so a binary search is sufficient.
"""
from __future__ import annotations

import math

from scipy.stats import hypergeom

from audit_sampling.core.domain.errors import CalculationError, InvalidInputError
from audit_sampling.core.numeric.rounding import round_units

# Enough for any population addressable with 64-bit unit counts.
MAX_SEARCH_STEPS = 128


def min_draws_for_error_count(
    errors: int,
    alpha: float,
    error_units: int,
    clean_units: int,
    max_draws: int,
) -> int:
    """
    Return the smallest k in [0, min(max_draws, N)] with P[X <= errors] <= alpha.

    X ~ Hypergeometric(N = error_units + clean_units, error_units, k).
    Falls back to the upper bound when no k satisfies the condition.
    """
    total_units = error_units + clean_units
    if total_units <= 0:
        raise CalculationError("population size in monetary units is zero")

    lo = 0
    hi = min(max_draws, total_units)
    upper = hi
    answer: int | None = None

    steps = 0
    while lo <= hi:
        steps += 1
        if steps > MAX_SEARCH_STEPS:
            raise CalculationError(
                f"hypergeometric search exceeded {MAX_SEARCH_STEPS} steps"
            )

        mid = (lo + hi) // 2
        cdf = float(hypergeom.cdf(errors, total_units, error_units, mid))
        if math.isnan(cdf):
            raise CalculationError(
                f"hypergeometric CDF undefined (N={total_units}, m={error_units}, k={mid})"
            )

        if cdf <= alpha:
            answer = mid
            hi = mid - 1
        else:
            lo = mid + 1

    return answer if answer is not None else upper


def units_needed(
    errors: int,
    alpha: float,
    tolerable_error: float,
    book_value: float,
) -> int:
    """Sample size needed to tolerate ``errors`` misstatements at risk ``alpha``."""
    if not (math.isfinite(alpha) and 0.0 < alpha < 1.0):
        raise InvalidInputError("alpha must be in (0, 1)")

    if not (
        math.isfinite(tolerable_error)
        and math.isfinite(book_value)
        and book_value > 0.0
    ):
        raise InvalidInputError(
            "tolerable_error and book_value must be finite and book_value > 0"
        )

    max_error_rate = tolerable_error / book_value
    error_units = round_units(max_error_rate * book_value)
    clean_units = round_units((1.0 - max_error_rate) * book_value)
    max_draws = min(clean_units + errors, round_units(book_value))

    return min_draws_for_error_count(
        errors=errors,
        alpha=alpha,
        error_units=error_units,
        clean_units=clean_units,
        max_draws=max_draws,
    )
