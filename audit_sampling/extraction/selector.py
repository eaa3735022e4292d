"""Systematic PPS selector interface.

Two selection strategies share the same statistical intent: every item is
selected with a probability proportional to its size. They differ in
whether items at or above the sampling interval are guaranteed inclusion.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from audit_sampling.core.domain.types import PpsSelection


class SystematicSelector(ABC):
    """Selection strategy over a sequence of amounts."""

    guarantees_high_values: bool = False

    @abstractmethod
    def select(
        self,
        amounts: Sequence[float],
        n: int,
        *,
        seed: int | None = None,
    ) -> PpsSelection:
        """Select up to ``n`` items, returning unique ascending positions."""
