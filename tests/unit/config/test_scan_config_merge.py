from __future__ import annotations

from pathlib import Path

from classpath_scan.config import CliOverrides, ScanConfig, load_effective_config


def test_defaults_without_config_file(tmp_path: Path) -> None:
    config = load_effective_config(tmp_path)

    assert config == ScanConfig()
    assert config.batch_size == 3000
    assert config.hidden_prefix == "."
    assert config.test_classpath_suffixes == ("target/test-classes",)
    assert config.log_path is None


def test_merge_order_defaults_then_file_then_cli(tmp_path: Path) -> None:
    (tmp_path / "classpath_scan.toml").write_text(
        "\n".join(
            [
                "[scan]",
                "batch_size = 250",
                'hidden_prefix = "_"',
                "",
                "[classpath]",
                'test_suffixes = ["build/test", "target/test-classes"]',
                "",
                "[logging]",
                'path = "logs/scan.jsonl"',
            ]
        ),
        encoding="utf-8",
    )

    from_file = load_effective_config(tmp_path)
    overridden = load_effective_config(tmp_path, CliOverrides(batch_size=10))

    assert from_file.batch_size == 250
    assert from_file.hidden_prefix == "_"
    assert from_file.test_classpath_suffixes == ("build/test", "target/test-classes")
    assert from_file.log_path == (tmp_path / "logs" / "scan.jsonl").resolve()
    assert overridden.batch_size == 10
    assert overridden.hidden_prefix == "_"


def test_log_path_override_has_highest_precedence(tmp_path: Path) -> None:
    (tmp_path / "classpath_scan.toml").write_text(
        '[logging]\npath = "from-file.jsonl"\n', encoding="utf-8"
    )
    custom = tmp_path / "custom" / "events.jsonl"

    config = load_effective_config(tmp_path, CliOverrides(log_path=custom))

    assert config.log_path == custom.resolve()


def test_public_snapshot_is_serializable(tmp_path: Path) -> None:
    snapshot = load_effective_config(tmp_path).to_public_dict()

    assert snapshot == {
        "scan": {"batch_size": 3000, "hidden_prefix": "."},
        "classpath": {"test_suffixes": ["target/test-classes"]},
        "logging": {"path": None},
    }
