from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from audit_sampling.core.domain.errors import SamplingError
from audit_sampling.core.events.event_bus import EventBus
from audit_sampling.core.events.sinks.file_recorder import FileRecorderSink
from audit_sampling.core.events.sinks.sink_logging import LoggingEventSink
from audit_sampling.runtime.summary import print_run_summary, summarize_run
from audit_sampling.workflow.parameters import SamplingParameters
from audit_sampling.workflow.runner import PopulationResult, run_population

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(path)
    return json.loads(path.read_text(encoding="utf-8"))


def _load_populations(path: Path) -> dict[str, list[float]]:
    """
    Populations file: JSON object mapping a population name to its
    book values, e.g. {"receivables_debit": [120.5, 99.0, ...]}.
    """
    raw = _load_json(path)
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a JSON object of populations")

    populations: dict[str, list[float]] = {}
    for name, values in raw.items():
        if not isinstance(values, list):
            raise ValueError(f"{path}: population '{name}' must be a list of numbers")
        populations[str(name)] = [
            math.nan if v is None else float(v) for v in values
        ]
    return populations


def _finite_or_none(value: float) -> float | None:
    return value if math.isfinite(value) else None


def _result_to_json(result: PopulationResult) -> dict[str, Any]:
    out: dict[str, Any] = {
        "population": result.population,
        "method": result.method,
        "population_size": result.population_size,
        "sample_size": result.sample_size,
        "selected_indices": list(result.selected_indices),
        "advisories": [a.value for a in result.advisories],
    }

    if result.plan is not None:
        plan = result.plan
        out["plan"] = {
            "n": plan.n,
            "book_value": plan.book_value,
            "confidence_level": plan.confidence_level,
            "tolerable_error": plan.tolerable_error,
            "expected_error": plan.expected_error,
            "high_value_threshold": _finite_or_none(plan.high_value_threshold),
            "tolerable_taintings": plan.tolerable_taintings,
        }

    if result.extraction is not None:
        extraction = result.extraction
        out["extraction"] = {
            "start_point": extraction.start_point,
            "seed": extraction.seed,
            "sampling_interval": _finite_or_none(extraction.sampling_interval),
            "extensions": extraction.extensions,
            "high_values": [
                {"index": hv.index, "book_value": hv.book_value}
                for hv in extraction.high_values
            ],
            "sample": [
                {
                    "index": item.index,
                    "book_value": item.book_value,
                    "mus_hit": item.mus_hit,
                    "cum_before": item.cum_before,
                    "cum_after": item.cum_after,
                }
                for item in extraction.sample
            ],
        }

    return out


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Audit sampling entrypoint (MUS or random selection per population)"
    )

    parser.add_argument(
        "--populations",
        type=Path,
        required=True,
        help="Path to JSON object mapping population names to book values.",
    )

    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to sampling parameters JSON.",
    )

    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional path for the JSON selection results.",
    )

    parser.add_argument(
        "--events",
        type=Path,
        default=None,
        help="Optional JSON-lines file receiving domain events.",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log planning details and domain events.",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # ------------------------------------------------------------------
    # Load inputs
    # ------------------------------------------------------------------

    try:
        params = SamplingParameters.from_json_obj(_load_json(args.config))
    except ValidationError as exc:
        print(f"Error: invalid sampling parameters:\n{exc}", file=sys.stderr)
        return 2

    populations = _load_populations(args.populations)

    event_bus = EventBus()
    if args.verbose:
        event_bus.register(LoggingEventSink(logging.getLogger("audit_sampling.events")))
    if args.events is not None:
        event_bus.register(FileRecorderSink(args.events))

    # ------------------------------------------------------------------
    # Sample populations, one at a time
    # ------------------------------------------------------------------

    results: list[PopulationResult] = []
    failed: list[str] = []

    try:
        for name, values in populations.items():
            try:
                results.append(
                    run_population(name, values, params, event_bus=event_bus)
                )
            except SamplingError as exc:
                LOGGER.error("Sampling failed for population '%s': %s", name, exc)
                failed.append(name)
    finally:
        event_bus.close()

    summary = summarize_run(results=results, params=params)
    print_run_summary(summary)

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(
            json.dumps(
                {
                    "parameters": params.model_dump(mode="json"),
                    "populations": [_result_to_json(r) for r in results],
                    "failed": failed,
                },
                indent=2,
            ),
            encoding="utf-8",
        )
        print(f"Wrote selection results to: {args.output}")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
