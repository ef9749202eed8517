"""Structured logging utilities."""

from .events import JsonlScanLogger, ScanEvent, describe_observers, utc_timestamp

__all__ = ["JsonlScanLogger", "ScanEvent", "describe_observers", "utc_timestamp"]
