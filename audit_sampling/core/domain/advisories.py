"""Advisory (non-fatal) conditions raised while sampling."""

from __future__ import annotations

from enum import Enum


class Advisory(str, Enum):
    """Warning conditions that never abort a computation.

    Values are stable strings: they appear in event logs and JSON output.
    """

    NON_FINITE_VALUES = "non_finite_values"
    ZERO_VALUES = "zero_values"
    NEGATIVE_VALUES = "negative_values"
    IMPRACTICAL_SAMPLE_SIZE = "impractical_sample_size"
    SAMPLING_NOT_REQUIRED = "sampling_not_required"
    AUDIT_ENTIRE_POPULATION = "audit_entire_population"
    DUPLICATE_HITS_MERGED = "duplicate_hits_merged"
    EMPTY_POPULATION = "empty_population"
