"""Planning options model."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field


class PlanningOptions(BaseModel):
    """Risk parameters for MUS planning.

    Only types are validated here. Preconditions that depend on the
    population (confidence range, resolved error amounts, floor vs.
    population size) are checked by the planner and raised as
    InvalidInputError.

    Tolerable and expected error are absolute amounts unless
    ``errors_as_pct`` is set, in which case they are fractions of the
    total book value. Both stay NaN until the caller sets them.
    """

    confidence_level: float = 0.90
    tolerable_error: float = math.nan
    expected_error: float = math.nan
    n_min: int = Field(default=0, ge=0)

    errors_as_pct: bool = False
    conservative: bool = False
    combined: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_json_obj(cls, obj: dict) -> PlanningOptions:
        """Create PlanningOptions from a JSON-compatible object."""
        return cls.model_validate(obj)
