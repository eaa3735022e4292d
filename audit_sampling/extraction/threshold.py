"""
Interval-threshold PPS selection.

A single sweep over the amounts assigns each selection threshold
``offset + i * total / n`` to the item whose cumulative span contains it.
No item is guaranteed inclusion: an item spanning several thresholds is
selected once (first occurrence kept), so fewer than ``n`` unique items may
result.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Sequence

from audit_sampling.core.domain.advisories import Advisory
from audit_sampling.core.domain.errors import InvalidInputError
from audit_sampling.core.domain.types import PpsSelection
from audit_sampling.core.events.events import SelectionDeduplicatedEvent
from audit_sampling.core.events.reporting import report_advisory
from audit_sampling.core.numeric.draws import draw_uniform, resolve_seed
from audit_sampling.core.numeric.rounding import eligible_value
from audit_sampling.extraction.selector import SystematicSelector

if TYPE_CHECKING:
    from audit_sampling.core.events.event_bus import EventBus

LOGGER = logging.getLogger(__name__)


def _threshold_hits(amounts: Sequence[float], thresholds: list[float]) -> list[int]:
    hits: list[int] = []
    cumulative = 0.0
    t_idx = 0

    for index, amount in enumerate(amounts):
        previous = cumulative
        cumulative += eligible_value(amount)

        while t_idx < len(thresholds) and thresholds[t_idx] <= cumulative:
            if thresholds[t_idx] > previous:
                hits.append(index)
            t_idx += 1

        if t_idx >= len(thresholds):
            break

    return hits


class ThresholdSelector(SystematicSelector):
    """Systematic PPS selection without high value partitioning."""

    guarantees_high_values = False

    def __init__(self, *, event_bus: EventBus | None = None) -> None:
        self._event_bus = event_bus

    def select(
        self,
        amounts: Sequence[float],
        n: int,
        *,
        seed: int | None = None,
        offset: float | None = None,
    ) -> PpsSelection:
        """
        Select up to ``n`` items.

        ``offset`` fixes the first threshold in [0, interval); otherwise it is
        drawn from a generator seeded by ``seed``.
        """
        values = [float(a) for a in amounts]
        if n <= 0 or not values:
            return PpsSelection(indices=(), requested=n, hits=0)

        total = sum(eligible_value(v) for v in values)
        if total <= 0.0:
            return PpsSelection(indices=(), requested=n, hits=0)

        interval = total / n

        if offset is None:
            offset = draw_uniform(resolve_seed(seed), interval)
        elif not (math.isfinite(offset) and 0.0 <= offset < interval):
            raise InvalidInputError(
                f"offset must be in [0, {interval}) (got {offset})"
            )

        thresholds = sorted(offset + i * interval for i in range(n))
        hits = _threshold_hits(values, thresholds)

        # Keep the first occurrence of items hit by several thresholds.
        unique = tuple(dict.fromkeys(hits))
        selection = PpsSelection(indices=unique, requested=n, hits=len(hits))

        if len(unique) < len(hits):
            report_advisory(
                Advisory.DUPLICATE_HITS_MERGED,
                f"planned n={n}, {len(unique)} unique items "
                f"({len(hits) - len(unique)} repeated hits on large items merged)",
                logger=LOGGER,
                event_bus=self._event_bus,
            )
            if self._event_bus is not None:
                self._event_bus.emit(
                    SelectionDeduplicatedEvent(
                        requested=n,
                        hits=len(hits),
                        unique=len(unique),
                    )
                )

        return selection


def select_pps(
    amounts: Sequence[float],
    n: int,
    *,
    seed: int | None = None,
    event_bus: EventBus | None = None,
) -> list[int]:
    """Indices chosen by interval-threshold PPS selection, ascending."""
    selection = ThresholdSelector(event_bus=event_bus).select(amounts, n, seed=seed)
    return list(selection.indices)
