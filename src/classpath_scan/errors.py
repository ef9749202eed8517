"""Failures that abort the scan pass of one classpath root."""

from __future__ import annotations


class ClasspathScanError(Exception):
    """Base class for fatal per-root scan failures."""

    code = "SCAN_FAILED"

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.message = message
        self.url = url


class InterestNegotiationError(ClasspathScanError):
    """Raised when an observer fails while testing interest in a root."""

    code = "NEGOTIATION_FAILED"

    def __init__(self, message: str, url: str, observer: object) -> None:
        super().__init__(message, url)
        self.observer = observer


class DeliveryError(ClasspathScanError):
    """Raised when an observer fails while selecting or receiving entries."""

    code = "DELIVERY_FAILED"

    def __init__(self, message: str, url: str, observer: object) -> None:
        super().__init__(message, url)
        self.observer = observer


class ArchiveReadError(ClasspathScanError):
    """Raised when an archive root cannot be opened or read."""

    code = "ARCHIVE_READ_FAILED"


class DirectoryReadError(ClasspathScanError):
    """Raised when a directory root cannot be listed."""

    code = "DIRECTORY_READ_FAILED"


def observer_name(observer: object) -> str:
    """Return a stable, human-readable name for an observer."""
    cls = type(observer)
    return f"{cls.__module__}.{cls.__qualname__}"
