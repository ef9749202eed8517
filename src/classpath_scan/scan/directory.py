"""Recursive traversal of expanded directory roots."""

from __future__ import annotations

import os
from pathlib import Path

from classpath_scan.errors import DirectoryReadError
from classpath_scan.offsets.models import OffsetBinding
from classpath_scan.scan.dispatch import BatchDispatcher
from classpath_scan.scan.models import ScanEntry

DEFAULT_HIDDEN_PREFIX = "."


def walk_directory(
    root_url: str,
    directory: Path,
    binding: OffsetBinding,
    dispatcher: BatchDispatcher,
    hidden_prefix: str = DEFAULT_HIDDEN_PREFIX,
) -> None:
    """Push every file and non-hidden directory under ``directory``.

    Directories are entries in their own right and are pushed before their
    contents. Hidden directories are neither pushed nor traversed. Symbolic
    links are followed; a linked directory that is already on the current
    path is pushed but not traversed again. The remainder of the batch is
    flushed once the tree is exhausted.
    """
    try:
        ancestors = {_directory_key(directory.stat())}
        _walk(root_url, directory, "", binding, dispatcher, hidden_prefix, ancestors)
    except OSError as exc:
        raise DirectoryReadError(
            f"Failed to list directory {root_url}: {exc}", url=root_url
        ) from exc
    dispatcher.flush(binding)


def _walk(
    root_url: str,
    directory: Path,
    package_name: str,
    binding: OffsetBinding,
    dispatcher: BatchDispatcher,
    hidden_prefix: str,
    ancestors: set[tuple[int, int]],
) -> None:
    with os.scandir(directory) as entries:
        ordered_entries = sorted(entries, key=lambda item: item.name)
    for entry in ordered_entries:
        resource_name = f"{package_name}/{entry.name}" if package_name else entry.name
        full_path = Path(entry.path)
        if entry.is_dir():
            if entry.name.startswith(hidden_prefix):
                continue
            dispatcher.push(_entry(root_url, resource_name, full_path, True), binding)
            key = _directory_key(entry.stat())
            if key in ancestors:
                continue
            ancestors.add(key)
            _walk(
                root_url, full_path, resource_name, binding, dispatcher, hidden_prefix, ancestors
            )
            ancestors.discard(key)
            continue
        # broken links and special files
        if not entry.is_file():
            continue
        dispatcher.push(_entry(root_url, resource_name, full_path, False), binding)


def _directory_key(stat: os.stat_result) -> tuple[int, int]:
    return (stat.st_dev, stat.st_ino)


def _entry(root_url: str, resource_name: str, path: Path, is_directory: bool) -> ScanEntry:
    return ScanEntry(
        url=root_url,
        resource_name=resource_name,
        handle=path,
        is_directory=is_directory,
    )
