"""Monetary Unit Sampling planner."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Callable, Sequence

from audit_sampling.core.domain.advisories import Advisory
from audit_sampling.core.domain.errors import CalculationError, InvalidInputError
from audit_sampling.core.domain.types import Plan
from audit_sampling.core.events.events import PlanComputedEvent
from audit_sampling.core.events.reporting import report_advisory
from audit_sampling.core.numeric.gamma import conservative_sample_size
from audit_sampling.core.numeric.hypergeometric import units_needed
from audit_sampling.core.numeric.rounding import eligible_value

if TYPE_CHECKING:
    from audit_sampling.core.events.event_bus import EventBus
    from audit_sampling.planning.options import PlanningOptions

LOGGER = logging.getLogger(__name__)

# Below this score the parameter combination implies an impractically large sample.
IMPRACTICAL_SAMPLE_SCORE = 0.07


def plan_sample(
    values: Sequence[float],
    options: PlanningOptions,
    *,
    event_bus: EventBus | None = None,
) -> Plan:
    """
    Compute the MUS sample size for a population of book values.

    This function performs *planning only*: it does not select any items.

    Steps:
    - validate preconditions (each failure is a distinct InvalidInputError)
    - resolve percentage errors against the total book value
    - search the hypergeometric sample size, interpolating between the
      bracketing error counts when an expected error is given
    - optionally raise the size to the conservative Gamma-based size
    - apply the minimum sample floor

    Parameters
    ----------
    values:
        Book values of the population. Non-finite, zero and negative values
        are accepted but contribute nothing to the total (advisory).

    options:
        Risk parameters.

    event_bus:
        Optional bus receiving advisories and the computed plan.

    Returns
    -------
    Plan
        Immutable plan carrying the resolved parameters and ``n``.
    """

    book_values = tuple(float(v) for v in values)

    if not book_values:
        raise InvalidInputError("values must contain at least one item")

    confidence = options.confidence_level
    if not (math.isfinite(confidence) and 0.0 < confidence < 1.0):
        raise InvalidInputError("confidence_level must be in (0, 1)")

    advisories: list[Advisory] = []

    def advise(advisory: Advisory, message: str) -> None:
        advisories.append(
            report_advisory(advisory, message, logger=LOGGER, event_bus=event_bus)
        )

    # ------------------------------------------------------------------
    # 1. Inspect book values
    # ------------------------------------------------------------------

    if any(not math.isfinite(v) for v in book_values):
        advise(
            Advisory.NON_FINITE_VALUES,
            "missing or infinite book values have no chance for selection",
        )
    if any(v == 0.0 for v in book_values):
        advise(Advisory.ZERO_VALUES, "zero book values have no chance for selection")
    if any(v < 0.0 for v in book_values):
        advise(
            Advisory.NEGATIVE_VALUES,
            "negative book values are ignored (treated as zero)",
        )

    book_value = sum(eligible_value(v) for v in book_values)
    num_items = len(book_values)

    # ------------------------------------------------------------------
    # 2. Resolve error amounts
    # ------------------------------------------------------------------

    tolerable_error = options.tolerable_error
    expected_error = options.expected_error

    if (
        options.errors_as_pct
        and math.isfinite(tolerable_error)
        and math.isfinite(expected_error)
    ):
        tolerable_error *= book_value
        expected_error *= book_value

    if not (math.isfinite(tolerable_error) and tolerable_error > 0.0):
        raise InvalidInputError("tolerable_error must be finite and > 0")

    if not (math.isfinite(expected_error) and expected_error >= 0.0):
        raise InvalidInputError("expected_error must be finite and >= 0")

    if options.n_min >= num_items:
        raise InvalidInputError(
            f"n_min must be < number of items ({options.n_min} >= {num_items})"
        )

    # ------------------------------------------------------------------
    # 3. Sample size
    # ------------------------------------------------------------------

    sampling_required = tolerable_error < book_value

    if sampling_required and tolerable_error > expected_error:
        score = (
            (tolerable_error / book_value)
            * (1.0 - confidence)
            * math.sqrt(tolerable_error - expected_error)
        )
        if score < IMPRACTICAL_SAMPLE_SCORE:
            advise(
                Advisory.IMPRACTICAL_SAMPLE_SIZE,
                "combination of parameters leads to an impractically large sample",
            )

    if not sampling_required:
        advise(
            Advisory.SAMPLING_NOT_REQUIRED,
            f"tolerable_error ({tolerable_error:.2f}) >= book value "
            f"({book_value:.2f}); no sampling necessary, n=0",
        )
        n_optimal = 0
    else:
        n_optimal = _optimal_sample_size(
            alpha=1.0 - confidence,
            tolerable_error=tolerable_error,
            expected_error=expected_error,
            book_value=book_value,
            num_items=num_items,
            advise=advise,
        )

    n_final = max(n_optimal, options.n_min)

    if options.conservative and sampling_required:
        n_conservative = conservative_sample_size(
            confidence_level=confidence,
            tolerable_error=tolerable_error,
            expected_error=expected_error,
            book_value=book_value,
        )
        LOGGER.debug(
            "Conservative sample size %d (optimal %d)", n_conservative, n_optimal
        )
        n_final = max(n_final, n_conservative)

    # ------------------------------------------------------------------
    # 4. Threshold and tainting
    # ------------------------------------------------------------------

    high_value_threshold = book_value / n_final if n_final > 0 else math.inf
    tolerable_taintings = (
        expected_error / book_value * n_final if book_value != 0.0 else 0.0
    )

    plan = Plan(
        values=book_values,
        confidence_level=confidence,
        tolerable_error=tolerable_error,
        expected_error=expected_error,
        book_value=book_value,
        n=n_final,
        high_value_threshold=high_value_threshold,
        tolerable_taintings=tolerable_taintings,
        combined=options.combined,
        advisories=tuple(advisories),
    )

    if event_bus is not None:
        event_bus.emit(
            PlanComputedEvent(
                n=plan.n,
                book_value=plan.book_value,
                tolerable_error=plan.tolerable_error,
                expected_error=plan.expected_error,
                confidence_level=plan.confidence_level,
                high_value_threshold=plan.high_value_threshold,
                tolerable_taintings=plan.tolerable_taintings,
            )
        )

    return plan


def _optimal_sample_size(
    *,
    alpha: float,
    tolerable_error: float,
    expected_error: float,
    book_value: float,
    num_items: int,
    advise: Callable[[Advisory, str], None],
) -> int:
    """Hypergeometric sample size, interpolated for the expected error."""

    solved: dict[int, int] = {}

    def n_for(errors: int) -> int:
        if errors not in solved:
            solved[errors] = units_needed(errors, alpha, tolerable_error, book_value)
        return solved[errors]

    n_zero_errors = n_for(0)
    if n_zero_errors < 1:
        raise CalculationError(
            "undefined sample size: with 0 errors the sample size must be positive"
        )

    expected_rate = expected_error / book_value

    if n_for(num_items) * expected_rate - num_items > 0:
        advise(
            Advisory.AUDIT_ENTIRE_POPULATION,
            "sample size must exceed the number of items; auditing everything",
        )
        return num_items

    if expected_error == 0.0:
        return n_zero_errors

    # Find the first error count q whose sample no longer implies more than q errors.
    # Terminates by q = num_items because of the check above.
    for errors in range(num_items + 1):
        n_errors = n_for(errors)
        if n_errors * expected_rate <= errors:
            break
    else:
        raise CalculationError(
            f"no bracketing error count found within {num_items} errors"
        )

    if errors == 0:
        return n_zero_errors

    lower = n_for(errors - 1)
    upper = n_errors
    spread = upper - lower

    if spread <= 0:
        raise CalculationError(
            f"degenerate interpolation bracket: n({errors - 1})={lower}, n({errors})={upper}"
        )

    denominator = 1.0 / spread - expected_rate
    if denominator <= 0.0:
        raise CalculationError("denominator non-positive in interpolation")

    n_optimal = math.ceil((lower / spread - (errors - 1)) / denominator)

    return bound_interpolated_size(
        max(n_optimal, 0),
        lower=lower,
        upper=upper,
        num_items=num_items,
        advise=advise,
    )


def bound_interpolated_size(
    n_interpolated: int,
    *,
    lower: int,
    upper: int,
    num_items: int,
    advise: Callable[[Advisory, str], None],
) -> int:
    """
    Apply the edge policies to an interpolated sample size.

    - above the population size: audit everything (advisory)
    - exactly one past the bracket: collapse onto ``upper``
    - otherwise outside ``[lower, upper]``: CalculationError
    """
    if n_interpolated > num_items:
        advise(
            Advisory.AUDIT_ENTIRE_POPULATION,
            f"optimal sample size {n_interpolated} exceeds population size; "
            "auditing everything",
        )
        return num_items

    # Ceiling of an intersection at ``upper`` can overshoot by one unit.
    if n_interpolated == upper + 1:
        return upper

    if n_interpolated < lower or n_interpolated > upper:
        raise CalculationError(
            f"optimal sample size not plausible: n={n_interpolated}, "
            f"bracket=[{lower}, {upper}]"
        )

    return n_interpolated
