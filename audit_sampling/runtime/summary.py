from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from audit_sampling.workflow.parameters import SamplingParameters
    from audit_sampling.workflow.runner import PopulationResult


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PopulationSummary:
    population: str
    population_size: int
    sample_size: int
    method: str
    parameters: str
    coverage: float  # sample_size / population_size, 0.0 - 1.0


@dataclass(frozen=True, slots=True)
class RunSummary:
    method: str
    population_count: int
    total_items: int
    total_sampled: int
    populations: List[PopulationSummary]
    warnings: List[str]


# ---------------------------------------------------------------------------
# Summary builder
# ---------------------------------------------------------------------------

def summarize_run(
    *,
    results: list[PopulationResult],
    params: SamplingParameters,
) -> RunSummary:
    warnings: list[str] = []
    populations: list[PopulationSummary] = []

    if not results:
        warnings.append("Run contains no populations")

    for result in results:
        coverage = (
            result.sample_size / result.population_size
            if result.population_size > 0
            else 0.0
        )

        if result.population_size == 0:
            warnings.append(f"{result.population} is empty; skipped")
        elif result.sample_size == 0:
            warnings.append(f"{result.population} produced no sample")
        elif coverage >= 1.0:
            warnings.append(f"{result.population} is audited in full")

        for advisory in result.advisories:
            warnings.append(f"{result.population}: {advisory.value}")

        populations.append(
            PopulationSummary(
                population=result.population,
                population_size=result.population_size,
                sample_size=result.sample_size,
                method=result.method,
                parameters=params.describe(),
                coverage=coverage,
            )
        )

    return RunSummary(
        method=params.method,
        population_count=len(results),
        total_items=sum(r.population_size for r in results),
        total_sampled=sum(r.sample_size for r in results),
        populations=populations,
        warnings=warnings,
    )


# ---------------------------------------------------------------------------
# Pretty printer
# ---------------------------------------------------------------------------

def print_run_summary(summary: RunSummary) -> None:
    print(f"Method: {summary.method}")
    print(f"Populations: {summary.population_count}")
    print(f"Items: {summary.total_items}")
    print(f"Sampled: {summary.total_sampled}")
    print()

    if summary.warnings:
        print("Warnings:")
        for w in summary.warnings:
            print(f"  - {w}")
        print()

    print("Populations:")
    for p in summary.populations:
        print(
            f"  - {p.population}: "
            f"{p.sample_size} / {p.population_size} items | "
            f"{p.coverage:.0%} coverage | "
            f"{p.parameters}"
        )
