from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from classpath_scan.offsets import OffsetRegistry, negotiate_interest
from classpath_scan.scan import (
    DEFAULT_BATCH_SIZE,
    BatchDispatcher,
    FileResourceOpener,
    ZipArchiveReader,
    walk_archive,
    walk_directory,
)


class _BatchCounter:
    def __init__(self) -> None:
        self.batch_sizes: list[int] = []
        self.seen: list[str] = []

    def tests_interest(self, url: str) -> bool:
        return True

    def select(self, batch):
        self.batch_sizes.append(len(batch))
        return list(batch)

    def deliver(self, entry, stream) -> None:
        self.seen.append(entry.resource_name)


def _expected_batches(count: int) -> list[int]:
    full, remainder = divmod(count, DEFAULT_BATCH_SIZE)
    return [DEFAULT_BATCH_SIZE] * full + ([remainder] if remainder else [])


@pytest.mark.parametrize("count", [3000, 3001, 5999])
def test_archive_default_offset_cap_boundaries(tmp_path: Path, count: int) -> None:
    path = tmp_path / "many.jar"
    names = [f"res/{index:05d}.txt" for index in range(count)]
    with zipfile.ZipFile(path, "w") as archive:
        for name in names:
            archive.writestr(name, b"x")
    observer = _BatchCounter()
    registry = OffsetRegistry()
    negotiate_interest(registry, "file:/many.jar", [observer])

    dispatcher = walk_archive("file:/many.jar", path, registry.plan(), ZipArchiveReader())

    assert observer.batch_sizes == _expected_batches(count)
    assert observer.seen == names
    assert dispatcher.flush_count == len(_expected_batches(count))


@pytest.mark.parametrize("count", [3000, 3001, 5999])
def test_archive_multiple_offsets_cap_boundaries(tmp_path: Path, count: int) -> None:
    path = tmp_path / "bundle.jar"
    names = [f"lib1/{index:05d}.txt" for index in range(count)]
    with zipfile.ZipFile(path, "w") as archive:
        for name in names:
            archive.writestr(name, b"x")
        archive.writestr("lib2/tail.txt", b"y")
    observer = _BatchCounter()
    registry = OffsetRegistry()
    registry.register("lib1/", "jar:A")
    registry.register("lib2/", "jar:B")
    negotiate_interest(registry, "file:/bundle.jar", [observer])

    walk_archive("file:/bundle.jar", path, registry.plan(), ZipArchiveReader())

    assert observer.batch_sizes == _expected_batches(count) + [1]
    assert observer.seen == [name[len("lib1/"):] for name in names] + ["tail.txt"]


@pytest.mark.parametrize("count", [3000, 3001])
def test_directory_cap_boundaries(tmp_path: Path, count: int) -> None:
    for index in range(count):
        (tmp_path / f"{index:05d}.txt").write_bytes(b"x")
    observer = _BatchCounter()
    registry = OffsetRegistry()
    negotiate_interest(registry, "file:/classes", [observer])
    binding = registry.bindings()[0]
    dispatcher = BatchDispatcher("file:/classes", FileResourceOpener())

    walk_directory("file:/classes", tmp_path, binding, dispatcher)

    assert observer.batch_sizes == _expected_batches(count)
    assert sorted(observer.seen) == sorted(f"{index:05d}.txt" for index in range(count))
    assert len(set(observer.seen)) == count
