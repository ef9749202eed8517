"""Root registration, negotiation and scan orchestration for one pass."""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from classpath_scan.config import ScanConfig
from classpath_scan.errors import ClasspathScanError
from classpath_scan.logging import JsonlScanLogger, ScanEvent, describe_observers, utc_timestamp
from classpath_scan.observers import Observer
from classpath_scan.offsets import OffsetBinding, OffsetRegistry, negotiate_interest
from classpath_scan.scan import (
    ArchiveReader,
    BatchDispatcher,
    ClasspathRoot,
    FileResourceOpener,
    ZipArchiveReader,
    walk_archive,
    walk_directory,
)


@dataclass(slots=True, frozen=True)
class ScanReport:
    """Counters for one completed root scan."""

    url: str
    kind: str
    skipped: bool
    entries_batched: int
    batches_flushed: int
    deliveries: int
    duration_ms: int


@dataclass(slots=True)
class _RootSession:
    root: ClasspathRoot
    registry: OffsetRegistry


class ClasspathScanner:
    """Owns the roots of one scan pass and their offset registries.

    Roots are independent: each has its own registry and batch buffer. A
    failure aborts only the root being negotiated or scanned and is raised to
    the caller, which decides whether to continue with the remaining roots.
    Subscriber sets are frozen while a root is being scanned.
    """

    def __init__(
        self,
        config: ScanConfig | None = None,
        archive_reader: ArchiveReader | None = None,
        scan_logger: JsonlScanLogger | None = None,
    ) -> None:
        self._config = config or ScanConfig()
        self._archive_reader: ArchiveReader = archive_reader or ZipArchiveReader()
        if scan_logger is None and self._config.log_path is not None:
            scan_logger = JsonlScanLogger(self._config.log_path)
        self._scan_logger = scan_logger
        self._sessions: dict[str, _RootSession] = {}

    @property
    def config(self) -> ScanConfig:
        return self._config

    def register_root(self, url: str, source: str | Path) -> str:
        """Register a classpath root and return its id."""
        if url in self._sessions:
            raise ValueError(f"Classpath root already registered: {url}")
        self._sessions[url] = _RootSession(
            root=ClasspathRoot.create(url, source),
            registry=OffsetRegistry(),
        )
        return url

    def register_offset(self, root_id: str, offset: str, url: str) -> OffsetBinding:
        """Register a logical mount offset inside a root."""
        return self._session(root_id).registry.register(offset, url)

    def roots(self) -> tuple[ClasspathRoot, ...]:
        """Return registered roots in registration order."""
        return tuple(session.root for session in self._sessions.values())

    def root(self, root_id: str) -> ClasspathRoot:
        return self._session(root_id).root

    def bindings(self, root_id: str) -> tuple[OffsetBinding, ...]:
        """Return a root's bindings in resolution order."""
        return self._session(root_id).registry.bindings()

    def unsubscribe(self, root_id: str, observer: Observer) -> None:
        """Remove an observer from every offset of a root."""
        self._session(root_id).registry.unsubscribe(observer)

    def run_negotiation(self, root_id: str, observers: Sequence[Observer]) -> int:
        """Ask every observer whether it is interested in the root's offsets."""
        session = self._session(root_id)
        try:
            subscriptions = negotiate_interest(session.registry, session.root.url, observers)
        except ClasspathScanError as exc:
            self._log(session.root.url, "negotiate", ok=False, error_code=exc.code)
            raise
        self._log(
            session.root.url,
            "negotiate",
            ok=True,
            metadata={
                "observers": describe_observers(observers),
                "offsets": [binding.offset for binding in session.registry.bindings()],
                "subscriptions": subscriptions,
            },
        )
        return subscriptions

    def run_scan(self, root_id: str) -> ScanReport:
        """Traverse one root and deliver its entries to bound observers."""
        session = self._session(root_id)
        root = session.root
        started = time.perf_counter()
        if not session.registry.has_subscribers():
            report = ScanReport(
                url=root.url,
                kind=root.kind,
                skipped=True,
                entries_batched=0,
                batches_flushed=0,
                deliveries=0,
                duration_ms=0,
            )
            self._log(root.url, "scan", ok=True, skipped=True, metadata={"kind": root.kind})
            return report
        try:
            dispatcher = self._traverse(session)
        except ClasspathScanError as exc:
            self._log(root.url, "scan", ok=False, error_code=exc.code, metadata={"kind": root.kind})
            raise
        report = ScanReport(
            url=root.url,
            kind=root.kind,
            skipped=False,
            entries_batched=dispatcher.pushed_count,
            batches_flushed=dispatcher.flush_count,
            deliveries=dispatcher.delivery_count,
            duration_ms=int((time.perf_counter() - started) * 1000),
        )
        self._log(
            root.url,
            "scan",
            ok=True,
            metadata={
                "kind": report.kind,
                "entries_batched": report.entries_batched,
                "batches_flushed": report.batches_flushed,
                "deliveries": report.deliveries,
            },
        )
        return report

    def scan_all(
        self, observers: Sequence[Observer], include_tests: bool = True
    ) -> list[ScanReport]:
        """Negotiate and scan every root in registration order."""
        reports: list[ScanReport] = []
        for root_id in self._root_ids(include_tests):
            self.run_negotiation(root_id, observers)
            reports.append(self.run_scan(root_id))
        return reports

    def _root_ids(self, include_tests: bool) -> Iterable[str]:
        for root_id, session in self._sessions.items():
            if not include_tests and session.root.is_test_classpath(
                self._config.test_classpath_suffixes
            ):
                continue
            yield root_id

    def _traverse(self, session: _RootSession) -> BatchDispatcher:
        root = session.root
        if root.is_directory:
            binding = session.registry.bindings()[0]
            dispatcher = BatchDispatcher(root.url, FileResourceOpener(), self._config.batch_size)
            if binding.has_subscribers():
                walk_directory(
                    root.url,
                    root.source,
                    binding,
                    dispatcher,
                    hidden_prefix=self._config.hidden_prefix,
                )
            return dispatcher
        return walk_archive(
            root.url,
            root.source,
            session.registry.plan(),
            self._archive_reader,
            batch_size=self._config.batch_size,
        )

    def _session(self, root_id: str) -> _RootSession:
        session = self._sessions.get(root_id)
        if session is None:
            raise KeyError(f"Unknown classpath root: {root_id}")
        return session

    def _log(
        self,
        root_url: str,
        phase: str,
        ok: bool,
        skipped: bool = False,
        error_code: str | None = None,
        metadata: dict[str, object] | None = None,
    ) -> None:
        if self._scan_logger is None:
            return
        self._scan_logger.append(
            ScanEvent(
                timestamp=utc_timestamp(),
                root_url=root_url,
                phase=phase,
                ok=ok,
                skipped=skipped,
                error_code=error_code,
                metadata=metadata or {},
            )
        )
