"""Strategy selection for systematic PPS sampling."""

from __future__ import annotations

from typing import TYPE_CHECKING

from audit_sampling.extraction.monetary_unit import MonetaryUnitSelector
from audit_sampling.extraction.threshold import ThresholdSelector

if TYPE_CHECKING:
    from audit_sampling.core.events.event_bus import EventBus
    from audit_sampling.extraction.selector import SystematicSelector


def make_selector(
    *,
    guarantee_high_values: bool,
    obey_n_as_min: bool = False,
    event_bus: EventBus | None = None,
) -> SystematicSelector:
    """Return the strategy for the requested high value policy.

    ``obey_n_as_min`` only applies when high values are guaranteed: it is
    the interval stabilization of the monetary unit strategy, and
    ``MonetaryUnitSelector.extract`` rejects options that disagree with it.
    """
    if guarantee_high_values:
        return MonetaryUnitSelector(obey_n_as_min=obey_n_as_min, event_bus=event_bus)
    return ThresholdSelector(event_bus=event_bus)
