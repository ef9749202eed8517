"""Typed models for classpath roots and discovered entries."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_TEST_CLASSPATH_SUFFIXES = ("target/test-classes",)


@dataclass(slots=True, frozen=True)
class ClasspathRoot:
    """One physical directory or archive to be scanned."""

    url: str
    source: Path

    @classmethod
    def create(cls, url: str, source: str | Path) -> ClasspathRoot:
        """Build a root with its physical source resolved once."""
        return cls(url=url, source=Path(source).resolve())

    @property
    def is_directory(self) -> bool:
        return self.source.is_dir()

    @property
    def kind(self) -> str:
        return "directory" if self.is_directory else "archive"

    def is_test_classpath(
        self, suffixes: tuple[str, ...] = DEFAULT_TEST_CLASSPATH_SUFFIXES
    ) -> bool:
        """Return True for build-tool test output directories."""
        if not self.is_directory:
            return False
        posix = self.source.as_posix()
        return any(posix.endswith(suffix.rstrip("/")) for suffix in suffixes)


@dataclass(slots=True, frozen=True)
class ScanEntry:
    """One discovered resource, valid for a single batch cycle.

    ``handle`` is the file path for directory roots and the reader's member
    object (a ``zipfile.ZipInfo`` for zip archives) for archive roots.
    ``resource_name`` is relative to the matched offset.
    """

    url: str
    resource_name: str
    handle: object
    is_directory: bool = False
    offset_url: str | None = None

    @property
    def effective_url(self) -> str:
        """Return the url observers should attribute this entry to."""
        return self.offset_url if self.offset_url is not None else self.url
