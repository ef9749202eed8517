"""Structured JSONL scan event log."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path


@dataclass(slots=True, frozen=True)
class ScanEvent:
    """Outcome of one negotiation or scan phase for a classpath root."""

    timestamp: str
    root_url: str
    phase: str
    ok: bool
    skipped: bool
    error_code: str | None
    metadata: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def describe_observers(observers: Iterable[object]) -> list[str]:
    """Describe observers by type name only, never by their state."""
    return sorted(type(observer).__name__ for observer in observers)


class JsonlScanLogger:
    """Appends scan events to a JSONL file, one object per line."""

    def __init__(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        self._path = path

    def append(self, event: ScanEvent) -> None:
        record = json.dumps(asdict(event), sort_keys=True)
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(f"{record}\n")
