"""
Append-only file recorder sink.
"""
from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any


class FileRecorderSink:
    """Writes each event as a JSON line to a file, tagged with its type."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self._path.open("a", encoding="utf-8")
        self._closed = False

    @staticmethod
    def _to_record(event: Any) -> dict[str, Any]:
        # Slotted dataclasses carry no __dict__.
        if is_dataclass(event) and not isinstance(event, type):
            payload = asdict(event)
        elif hasattr(event, "__dict__"):
            payload = dict(event.__dict__)
        else:
            payload = {"event": str(event)}
        return {"type": type(event).__name__, **payload}

    def on_event(self, event: Any) -> None:
        record = self._to_record(event)
        # Infinite thresholds/intervals are legitimate values; json writes them as Infinity.
        self._fh.write(json.dumps(record, default=str) + "\n")
        self._fh.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._fh.flush()
        self._fh.close()
        self._closed = True
