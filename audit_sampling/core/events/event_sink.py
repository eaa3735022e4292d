"""
Event sink interface.

Sinks consume the sampling events of ``core.events.events``
(``AdvisoryEvent``, ``PlanComputedEvent``, ``ExtractionCompletedEvent``,
``SelectionDeduplicatedEvent``, ``PopulationSampledEvent``).
"""
from __future__ import annotations

from typing import Any, Protocol


class EventSink(Protocol):
    def on_event(self, event: Any) -> None:
        """Consume a domain event."""
