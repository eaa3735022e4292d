"""Extraction options model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ExtractionOptions(BaseModel):
    """Options for systematic MUS extraction.

    - start_point: explicit offset into the first sampling interval; must lie
      in [0, interval] once the interval is known
    - seed: seed for the start point draw; a time-derived seed is used and
      reported back when omitted
    - obey_n_as_min: re-derive the interval from the remaining slots so that
      high value items do not reduce the number of sampled items
    """

    start_point: float | None = None
    seed: int | None = Field(default=None, ge=0)
    obey_n_as_min: bool = False
    combined: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)
