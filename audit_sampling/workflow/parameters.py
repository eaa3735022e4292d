"""Sampling run parameters.

This module defines the SamplingParameters schema used to parse and
normalize run configuration from JSON into planning and extraction options.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from audit_sampling.extraction.options import ExtractionOptions
from audit_sampling.planning.options import PlanningOptions

SamplingMethod = Literal["mus", "random"]


class SamplingParameters(BaseModel):
    """Run-level sampling parameters.

    JSON example:
        {
          "method": "mus",
          "materiality": 50000.0,
          "risk_factor": 0.25,
          "confidence": 0.95,
          "seed": 12345
        }

    Result:
        tolerable error = 50000.0, expected error = 12500.0
    """

    method: SamplingMethod

    # MUS parameters
    materiality: float | None = Field(default=None, gt=0)
    tolerable_misstatement: float | None = Field(default=None, gt=0)
    risk_factor: float = Field(default=0.0, ge=0)
    confidence: float = Field(default=0.90, gt=0, lt=1)
    n_min: int = Field(default=0, ge=0)
    conservative: bool = False
    guarantee_high_values: bool = True
    obey_n_as_min: bool = False

    # Random sampling parameters
    size: int | None = Field(default=None, ge=1)

    seed: int | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_json_obj(cls, obj: dict[str, Any]) -> SamplingParameters:
        """Create SamplingParameters from a JSON-compatible object."""
        return cls.model_validate(obj)

    @model_validator(mode="after")
    def validate_method_requirements(self) -> SamplingParameters:
        """Each method needs its own sizing input."""
        if self.method == "mus":
            if self.tolerable_misstatement is None and self.materiality is None:
                raise ValueError(
                    "mus sampling requires tolerable_misstatement or materiality"
                )
        elif self.size is None:
            raise ValueError("random sampling requires size")
        return self

    @property
    def tolerable_error(self) -> float | None:
        """Tolerable misstatement, falling back to materiality."""
        if self.tolerable_misstatement is not None:
            return self.tolerable_misstatement
        return self.materiality

    @property
    def expected_error(self) -> float | None:
        tolerable = self.tolerable_error
        if tolerable is None:
            return None
        return tolerable * self.risk_factor

    def to_planning_options(self) -> PlanningOptions:
        """Convert into planner options (MUS only)."""
        if self.method != "mus":
            raise ValueError("planning options only exist for mus sampling")
        return PlanningOptions(
            confidence_level=self.confidence,
            tolerable_error=self.tolerable_error,
            expected_error=self.expected_error,
            n_min=self.n_min,
            conservative=self.conservative,
        )

    def to_extraction_options(self) -> ExtractionOptions:
        return ExtractionOptions(seed=self.seed, obey_n_as_min=self.obey_n_as_min)

    def describe(self) -> str:
        """Short parameter note for summaries."""
        if self.method == "mus":
            return (
                f"TE={self.tolerable_error:.2f}, risk={self.risk_factor:.2f}, "
                f"conf={self.confidence:.2f}"
            )
        return f"size={self.size}"
