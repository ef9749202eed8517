"""Observer capability contract and a glob-matching observer."""

from __future__ import annotations

import fnmatch
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, BinaryIO, Protocol

if TYPE_CHECKING:
    from classpath_scan.scan.models import ScanEntry

_READ_CHUNK_BYTES = 1024 * 128


class Observer(Protocol):
    """External listener interested in resources of classpath roots."""

    def tests_interest(self, url: str) -> bool:
        """Return True when entries under ``url`` should be offered."""

    def select(self, batch: Sequence[ScanEntry]) -> Sequence[ScanEntry] | None:
        """Return the subset of the batch whose bytes should be delivered."""

    def deliver(self, entry: ScanEntry, stream: BinaryIO) -> None:
        """Consume one selected entry; the stream is closed after the call."""


@dataclass(slots=True, frozen=True)
class Delivery:
    """One entry received by a GlobObserver."""

    url: str
    resource_name: str
    is_directory: bool
    size: int


@dataclass(slots=True, eq=False)
class GlobObserver:
    """Selects entries whose resource name matches any configured glob.

    Deliveries go to ``on_delivery`` when it is set and are collected in
    ``deliveries`` otherwise.
    """

    patterns: tuple[str, ...] = ("*",)
    url_prefixes: tuple[str, ...] = ()
    include_directories: bool = False
    deliveries: list[Delivery] = field(default_factory=list)
    on_delivery: Callable[[Delivery], None] | None = None

    def tests_interest(self, url: str) -> bool:
        if not self.url_prefixes:
            return True
        return any(url.startswith(prefix) for prefix in self.url_prefixes)

    def select(self, batch: Sequence[ScanEntry]) -> list[ScanEntry]:
        return [
            entry
            for entry in batch
            if (self.include_directories or not entry.is_directory)
            and any(fnmatch.fnmatchcase(entry.resource_name, pattern) for pattern in self.patterns)
        ]

    def deliver(self, entry: ScanEntry, stream: BinaryIO) -> None:
        size = 0
        while True:
            chunk = stream.read(_READ_CHUNK_BYTES)
            if not chunk:
                break
            size += len(chunk)
        delivery = Delivery(
            url=entry.effective_url,
            resource_name=entry.resource_name,
            is_directory=entry.is_directory,
            size=size,
        )
        if self.on_delivery is not None:
            self.on_delivery(delivery)
        else:
            self.deliveries.append(delivery)
