from __future__ import annotations

from pathlib import Path


def test_required_package_paths_exist() -> None:
    root = Path(__file__).resolve().parents[1]
    required = [
        "src/classpath_scan/scanner.py",
        "src/classpath_scan/cli.py",
        "src/classpath_scan/config.py",
        "src/classpath_scan/errors.py",
        "src/classpath_scan/observers.py",
        "src/classpath_scan/offsets/__init__.py",
        "src/classpath_scan/scan/__init__.py",
        "src/classpath_scan/logging/__init__.py",
    ]
    for rel in required:
        assert (root / rel).exists(), rel
