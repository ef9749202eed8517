"""Bounded batching and delivery of scan entries to bound observers."""

from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Protocol

from classpath_scan.errors import DeliveryError, observer_name
from classpath_scan.observers import Observer
from classpath_scan.offsets.models import OffsetBinding
from classpath_scan.scan.models import ScanEntry

if TYPE_CHECKING:
    from classpath_scan.scan.archive import ArchiveHandle

DEFAULT_BATCH_SIZE = 3000


class ResourceOpener(Protocol):
    """Opens the bytes behind a file-backed scan entry."""

    def open_stream(self, entry: ScanEntry) -> BinaryIO:
        """Return a fresh readable stream for ``entry``."""


class FileResourceOpener:
    """Opens entries discovered in an expanded directory tree."""

    def open_stream(self, entry: ScanEntry) -> BinaryIO:
        return Path(str(entry.handle)).open("rb")


class ArchiveResourceOpener:
    """Opens entries discovered inside an open archive."""

    def __init__(self, handle: ArchiveHandle) -> None:
        self._handle = handle

    def open_stream(self, entry: ScanEntry) -> BinaryIO:
        return self._handle.open_stream(entry.handle)


class BatchDispatcher:
    """Accumulates entries and flushes them to the active binding's observers.

    A flush offers the whole batch to each subscriber, opens a stream for
    every entry it selects, delivers it and closes the stream before the next
    one is opened. Any observer failure aborts the flush and leaves the batch
    uncleared.
    """

    def __init__(
        self,
        root_url: str,
        opener: ResourceOpener,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be a positive integer.")
        self._root_url = root_url
        self._opener = opener
        self._batch_size = batch_size
        self._batch: list[ScanEntry] = []
        self.pushed_count = 0
        self.flush_count = 0
        self.delivery_count = 0

    @property
    def pending(self) -> int:
        """Return the number of entries waiting for the next flush."""
        return len(self._batch)

    def push(self, entry: ScanEntry, binding: OffsetBinding | None) -> None:
        """Queue an entry, flushing against ``binding`` once the cap is reached."""
        self._batch.append(entry)
        self.pushed_count += 1
        if len(self._batch) >= self._batch_size:
            self.flush(binding)

    def flush(self, binding: OffsetBinding | None) -> None:
        """Offer the pending batch to every subscriber of ``binding``."""
        if not self._batch:
            return
        if binding is not None:
            batch = tuple(self._batch)
            for observer in binding.subscribers:
                try:
                    self._offer(observer, batch)
                except Exception as exc:
                    raise DeliveryError(
                        f"Unable to deliver resources of {self._root_url} to observer "
                        f"{observer_name(observer)}: {exc}",
                        url=self._root_url,
                        observer=observer,
                    ) from exc
            self.flush_count += 1
        self._batch.clear()

    def _offer(self, observer: Observer, batch: tuple[ScanEntry, ...]) -> None:
        desired = observer.select(batch)
        if not desired:
            return
        for entry in desired:
            with self._open(entry) as stream:
                observer.deliver(entry, stream)
            self.delivery_count += 1

    def _open(self, entry: ScanEntry) -> BinaryIO:
        if entry.is_directory:
            return io.BytesIO(b"")
        return self._opener.open_stream(entry)
