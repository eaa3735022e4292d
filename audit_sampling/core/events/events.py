"""
Domain event models.

These events represent immutable facts observed while sampling a
population. They are consumed by loggers and recorders.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class AdvisoryEvent:
    advisory: str
    message: str


@dataclass(slots=True)
class PlanComputedEvent:
    n: int
    book_value: float
    tolerable_error: float
    expected_error: float
    confidence_level: float

    high_value_threshold: float
    tolerable_taintings: float


@dataclass(slots=True)
class ExtractionCompletedEvent:
    start_point: float
    seed: int | None

    high_values: int
    sample_size: int

    sampling_interval: float
    extensions: int


@dataclass(slots=True)
class SelectionDeduplicatedEvent:
    requested: int
    hits: int
    unique: int


@dataclass(slots=True)
class PopulationSampledEvent:
    population: str
    method: str

    population_size: int
    sample_size: int
