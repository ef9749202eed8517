from __future__ import annotations

import json
from pathlib import Path

from classpath_scan.logging import JsonlScanLogger, ScanEvent, describe_observers, utc_timestamp


def _event(timestamp: str, phase: str = "scan") -> ScanEvent:
    return ScanEvent(
        timestamp=timestamp,
        root_url="file:/classes",
        phase=phase,
        ok=True,
        skipped=False,
        error_code=None,
        metadata={"deliveries": 1},
    )


def test_scan_log_writes_one_json_object_per_line(tmp_path: Path) -> None:
    log_path = tmp_path / "nested" / "scan.jsonl"
    logger = JsonlScanLogger(log_path)
    logger.append(_event("2026-01-01T00:00:00.000Z", "negotiate"))
    logger.append(_event("2026-01-01T00:00:01.000Z"))

    lines = log_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert set(json.loads(lines[0]).keys()) == {
        "error_code",
        "metadata",
        "ok",
        "phase",
        "root_url",
        "skipped",
        "timestamp",
    }


def test_scan_log_appends_to_existing_file(tmp_path: Path) -> None:
    log_path = tmp_path / "scan.jsonl"
    JsonlScanLogger(log_path).append(_event("2026-01-01T00:00:00.000Z"))
    JsonlScanLogger(log_path).append(_event("2026-01-01T00:00:01.000Z", "negotiate"))

    records = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert [record["phase"] for record in records] == ["scan", "negotiate"]
    assert records[0]["metadata"] == {"deliveries": 1}


def test_describe_observers_uses_type_names_only() -> None:
    class Secretive:
        token = "do-not-log"

    assert describe_observers([Secretive(), Secretive()]) == ["Secretive", "Secretive"]


def test_utc_timestamp_format() -> None:
    stamp = utc_timestamp()
    assert stamp.endswith("Z")
    assert "T" in stamp
