"""Public API for the audit_sampling package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Domain Types
# ----------------------------------------------------------------------
from audit_sampling.core.domain.advisories import Advisory
from audit_sampling.core.domain.errors import (
    CalculationError,
    InvalidInputError,
    SamplingError,
)
from audit_sampling.core.domain.types import (
    ExtractedItem,
    Extraction,
    HighValueItem,
    Plan,
    PpsSelection,
    SamplingUnit,
)

# ----------------------------------------------------------------------
# Events
# ----------------------------------------------------------------------
from audit_sampling.core.events.event_bus import EventBus

# ----------------------------------------------------------------------
# Extraction API
# ----------------------------------------------------------------------
from audit_sampling.extraction.factory import make_selector
from audit_sampling.extraction.monetary_unit import MonetaryUnitSelector, extract_sample
from audit_sampling.extraction.options import ExtractionOptions
from audit_sampling.extraction.selector import SystematicSelector
from audit_sampling.extraction.threshold import ThresholdSelector, select_pps

# ----------------------------------------------------------------------
# Planning API
# ----------------------------------------------------------------------
from audit_sampling.planning.options import PlanningOptions
from audit_sampling.planning.planner import plan_sample

# ----------------------------------------------------------------------
# Workflow API
# ----------------------------------------------------------------------
from audit_sampling.workflow.parameters import SamplingParameters
from audit_sampling.workflow.runner import PopulationResult, run_population, run_populations

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Planning
    "PlanningOptions",
    "Plan",
    "plan_sample",

    # Extraction
    "ExtractionOptions",
    "Extraction",
    "ExtractedItem",
    "HighValueItem",
    "SamplingUnit",
    "extract_sample",

    # Selection strategies
    "SystematicSelector",
    "MonetaryUnitSelector",
    "ThresholdSelector",
    "PpsSelection",
    "make_selector",
    "select_pps",

    # Workflow
    "SamplingParameters",
    "PopulationResult",
    "run_population",
    "run_populations",

    # Errors and advisories
    "SamplingError",
    "InvalidInputError",
    "CalculationError",
    "Advisory",

    # Events
    "EventBus",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("audit-sampling")
except PackageNotFoundError:
    __version__ = "0.0.0"
