"""Sequential traversal of packed archive roots with offset switching."""

from __future__ import annotations

import zipfile
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import BinaryIO, Protocol

from classpath_scan.errors import ArchiveReadError
from classpath_scan.offsets.models import (
    MultipleOffsets,
    OffsetBinding,
    OffsetPlan,
    SingleDefault,
    resolve_binding,
)
from classpath_scan.scan.dispatch import (
    DEFAULT_BATCH_SIZE,
    ArchiveResourceOpener,
    BatchDispatcher,
)
from classpath_scan.scan.models import ScanEntry


@dataclass(slots=True, frozen=True)
class ArchiveMember:
    """Name and kind of one archive member.

    ``handle`` is the reader-specific member object used to open its bytes;
    member names are not unique within an archive.
    """

    name: str
    is_directory: bool
    handle: object


class ArchiveHandle(Protocol):
    """An opened archive; entries are enumerated once, in archive order."""

    def entries(self) -> Iterator[ArchiveMember]: ...

    def open_stream(self, member_handle: object) -> BinaryIO: ...

    def close(self) -> None: ...

    def __enter__(self) -> ArchiveHandle: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None: ...


class ArchiveReader(Protocol):
    """Opens physical archive files."""

    def open(self, path: Path) -> ArchiveHandle: ...


class ZipArchiveHandle:
    """Archive handle over a zip, jar or war file."""

    def __init__(self, path: Path) -> None:
        self._zip = zipfile.ZipFile(path)

    def entries(self) -> Iterator[ArchiveMember]:
        for info in self._zip.infolist():
            yield ArchiveMember(name=info.filename, is_directory=info.is_dir(), handle=info)

    def open_stream(self, member_handle: object) -> BinaryIO:
        if not isinstance(member_handle, zipfile.ZipInfo):
            raise TypeError(f"Not a member of this archive: {member_handle!r}")
        return self._zip.open(member_handle)

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> ZipArchiveHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()


class ZipArchiveReader:
    """Default archive reader backed by the standard zipfile module."""

    def open(self, path: Path) -> ZipArchiveHandle:
        return ZipArchiveHandle(path)


def walk_archive(
    root_url: str,
    path: Path,
    plan: OffsetPlan,
    reader: ArchiveReader,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> BatchDispatcher:
    """Push archive members to the observers of the offsets they belong to.

    Returns the dispatcher so callers can report its counters. Failures to
    open or read the archive are raised as ArchiveReadError; observer
    failures propagate unchanged.
    """
    try:
        handle = reader.open(path)
    except (OSError, zipfile.BadZipFile) as exc:
        raise ArchiveReadError(f"Failed to open archive {root_url}: {exc}", url=root_url) from exc
    with handle:
        dispatcher = BatchDispatcher(root_url, ArchiveResourceOpener(handle), batch_size)
        try:
            if isinstance(plan, SingleDefault):
                _walk_single_default(root_url, handle, plan.binding, dispatcher)
            else:
                _walk_multiple_offsets(root_url, handle, plan, dispatcher)
        except (OSError, zipfile.BadZipFile) as exc:
            raise ArchiveReadError(
                f"Failed to process archive {root_url}: {exc}", url=root_url
            ) from exc
    return dispatcher


def _walk_single_default(
    root_url: str,
    handle: ArchiveHandle,
    binding: OffsetBinding,
    dispatcher: BatchDispatcher,
) -> None:
    if not binding.has_subscribers():
        return
    for member in handle.entries():
        dispatcher.push(_entry(root_url, member, member.name, binding), binding)
    dispatcher.flush(binding)


def _walk_multiple_offsets(
    root_url: str,
    handle: ArchiveHandle,
    plan: MultipleOffsets,
    dispatcher: BatchDispatcher,
) -> None:
    active: OffsetBinding | None = None
    last_prefix = ""
    offset_strip = 0
    for member in handle.entries():
        if not last_prefix or not member.name.startswith(last_prefix):
            resolved = resolve_binding(plan.bindings, member.name)
            if resolved is not active:
                dispatcher.flush(active)
                active = resolved
                last_prefix = active.offset if active is not None else ""
                offset_strip = len(last_prefix)

        if active is None or not active.has_subscribers():
            continue
        name = member.name[offset_strip:] if offset_strip > 0 else member.name
        dispatcher.push(_entry(root_url, member, name, active), active)
    dispatcher.flush(active)


def _entry(
    root_url: str, member: ArchiveMember, name: str, binding: OffsetBinding
) -> ScanEntry:
    return ScanEntry(
        url=root_url,
        resource_name=name,
        handle=member.handle,
        is_directory=member.is_directory,
        offset_url=binding.url,
    )
