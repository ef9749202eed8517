"""Offset bindings and resolution plans for one classpath root."""

from __future__ import annotations

from dataclasses import dataclass, field

from classpath_scan.observers import Observer


def normalize_offset(offset: str) -> str:
    """Strip one leading separator so offsets compare against entry names."""
    if offset.startswith("/"):
        return offset[1:]
    return offset


@dataclass(slots=True, eq=False)
class OffsetBinding:
    """Logical sub-root inside a classpath root and the observers bound to it."""

    offset: str
    url: str
    _subscribers: dict[int, Observer] = field(default_factory=dict, repr=False)

    @property
    def subscribers(self) -> tuple[Observer, ...]:
        """Return bound observers."""
        return tuple(self._subscribers.values())

    def has_subscribers(self) -> bool:
        return bool(self._subscribers)

    def subscribe(self, observer: Observer) -> None:
        self._subscribers[id(observer)] = observer

    def unsubscribe(self, observer: Observer) -> None:
        self._subscribers.pop(id(observer), None)


def binding_sort_key(binding: OffsetBinding) -> str:
    return binding.offset


@dataclass(slots=True, frozen=True)
class SingleDefault:
    """Only the implicit whole-root binding exists; no per-entry resolution."""

    binding: OffsetBinding


@dataclass(slots=True, frozen=True)
class MultipleOffsets:
    """Explicit offsets registered; entries resolve against ordered bindings."""

    bindings: tuple[OffsetBinding, ...]


OffsetPlan = SingleDefault | MultipleOffsets


def resolve_binding(
    bindings: tuple[OffsetBinding, ...], entry_name: str
) -> OffsetBinding | None:
    """Return the first non-empty offset prefixing ``entry_name``, else the empty one.

    ``bindings`` must be in descending offset order.
    """
    fallback: OffsetBinding | None = None
    for binding in bindings:
        if not binding.offset:
            fallback = binding
            continue
        if entry_name.startswith(binding.offset):
            return binding
    return fallback
