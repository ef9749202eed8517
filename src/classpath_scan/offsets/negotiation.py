"""Pre-traversal interest negotiation between observers and offsets."""

from __future__ import annotations

from collections.abc import Iterable

from classpath_scan.errors import InterestNegotiationError, observer_name
from classpath_scan.observers import Observer
from classpath_scan.offsets.registry import OffsetRegistry


def negotiate_interest(
    registry: OffsetRegistry,
    root_url: str,
    observers: Iterable[Observer],
) -> int:
    """Bind every interested observer to the offsets it wants.

    Returns the number of (observer, binding) subscriptions made. The first
    failing interest test aborts the whole negotiation.
    """
    registry.ensure_default(root_url)
    subscriptions = 0
    bindings = registry.bindings()
    for observer in observers:
        try:
            for binding in bindings:
                if observer.tests_interest(binding.url):
                    binding.subscribe(observer)
                    subscriptions += 1
        except Exception as exc:
            raise InterestNegotiationError(
                f"Failed to ask observer {observer_name(observer)} for interest in "
                f"{root_url}: {exc}",
                url=root_url,
                observer=observer,
            ) from exc
    return subscriptions
