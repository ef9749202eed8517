"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from classpath_scan.scan import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_HIDDEN_PREFIX,
    DEFAULT_TEST_CLASSPATH_SUFFIXES,
)

CONFIG_FILE_NAME = "classpath_scan.toml"
MAX_BATCH_SIZE_CAP = 100_000


@dataclass(slots=True, frozen=True)
class ScanConfig:
    """Fully merged scan configuration."""

    batch_size: int = DEFAULT_BATCH_SIZE
    hidden_prefix: str = DEFAULT_HIDDEN_PREFIX
    test_classpath_suffixes: tuple[str, ...] = DEFAULT_TEST_CLASSPATH_SUFFIXES
    log_path: Path | None = None

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "scan": {
                "batch_size": self.batch_size,
                "hidden_prefix": self.hidden_prefix,
            },
            "classpath": {
                "test_suffixes": list(self.test_classpath_suffixes),
            },
            "logging": {
                "path": str(self.log_path) if self.log_path is not None else None,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    batch_size: int | None = None
    log_path: Path | None = None


def load_config_file(config_dir: Path) -> dict[str, object]:
    """Load optional classpath_scan.toml from a directory."""
    config_path = config_dir / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def merge_config(
    base: ScanConfig,
    payload: dict[str, object],
    overrides: CliOverrides,
    config_dir: Path,
) -> ScanConfig:
    """Merge defaults, config file, then CLI overrides."""
    scan_payload = _get_table(payload, "scan")
    classpath_payload = _get_table(payload, "classpath")
    logging_payload = _get_table(payload, "logging")

    batch_size = _optional_positive_int_with_cap(
        scan_payload.get("batch_size"),
        "scan.batch_size",
        base.batch_size,
        MAX_BATCH_SIZE_CAP,
    )

    hidden_prefix = base.hidden_prefix
    if "hidden_prefix" in scan_payload:
        raw_prefix = scan_payload["hidden_prefix"]
        if not isinstance(raw_prefix, str) or not raw_prefix:
            raise ValueError("Config field 'scan.hidden_prefix' must be a non-empty string.")
        hidden_prefix = raw_prefix

    test_suffixes = base.test_classpath_suffixes
    if "test_suffixes" in classpath_payload:
        test_suffixes = _tuple_of_strings(
            classpath_payload["test_suffixes"], "classpath", "test_suffixes"
        )

    log_path = base.log_path
    if "path" in logging_payload:
        raw_path = logging_payload["path"]
        if not isinstance(raw_path, str) or not raw_path:
            raise ValueError("Config field 'logging.path' must be a non-empty string.")
        log_path = (config_dir / raw_path).resolve()

    merged = ScanConfig(
        batch_size=batch_size,
        hidden_prefix=hidden_prefix,
        test_classpath_suffixes=test_suffixes,
        log_path=log_path,
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: ScanConfig, overrides: CliOverrides) -> ScanConfig:
    """Apply startup overrides at highest precedence."""
    batch_size = _optional_positive_int_with_cap(
        overrides.batch_size,
        "overrides.batch_size",
        config.batch_size,
        MAX_BATCH_SIZE_CAP,
    )
    log_path = overrides.log_path.resolve() if overrides.log_path is not None else config.log_path
    return ScanConfig(
        batch_size=batch_size,
        hidden_prefix=config.hidden_prefix,
        test_classpath_suffixes=config.test_classpath_suffixes,
        log_path=log_path,
    )


def load_effective_config(
    config_dir: Path | None = None, overrides: CliOverrides | None = None
) -> ScanConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    resolved_dir = (config_dir or Path(".")).resolve()
    payload = load_config_file(resolved_dir)
    return merge_config(ScanConfig(), payload, overrides or CliOverrides(), resolved_dir)


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value
