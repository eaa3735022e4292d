"""
Error taxonomy for planning and extraction.

InvalidInputError is always caller-correctable: the message names the
violated precondition. CalculationError signals a numeric failure
(solver exhaustion, inconsistent bounds, degenerate population) and must be
surfaced as a hard failure for the affected population.
"""
from __future__ import annotations


class SamplingError(Exception):
    """Base class for all sampling failures."""


class InvalidInputError(SamplingError, ValueError):
    """Caller-supplied parameters violate a precondition."""


class CalculationError(SamplingError, RuntimeError):
    """Internal numeric failure while planning or extracting."""
