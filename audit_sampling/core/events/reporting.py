"""Helpers to surface advisory conditions without aborting a computation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from audit_sampling.core.events.events import AdvisoryEvent

if TYPE_CHECKING:
    from audit_sampling.core.domain.advisories import Advisory
    from audit_sampling.core.events.event_bus import EventBus


def report_advisory(
    advisory: Advisory,
    message: str,
    *,
    logger: logging.Logger,
    event_bus: EventBus | None = None,
) -> Advisory:
    """Log the advisory, emit it as an event and return it for collection."""
    logger.warning("%s: %s", advisory.value, message)
    if event_bus is not None:
        event_bus.emit(AdvisoryEvent(advisory=advisory.value, message=message))
    return advisory
