"""Offset registration, entry-name resolution and subscriber membership."""

from __future__ import annotations

from classpath_scan.observers import Observer
from classpath_scan.offsets.models import (
    MultipleOffsets,
    OffsetBinding,
    OffsetPlan,
    SingleDefault,
    binding_sort_key,
    normalize_offset,
    resolve_binding,
)


class OffsetRegistry:
    """Owns the offset bindings of exactly one classpath root for one pass.

    Bindings are kept in descending lexicographic order of their offset. This
    is the resolution order: the first non-empty offset that prefixes an entry
    name wins, and the empty offset, which always sorts last, is the fallback.
    With overlapping offsets such as ``a`` and ``ab`` the match is therefore
    not necessarily the most specific one.
    """

    def __init__(self) -> None:
        self._bindings: dict[str, OffsetBinding] = {}
        self._ordered: tuple[OffsetBinding, ...] = ()
        self._implicit_default = False

    def register(self, offset: str, url: str) -> OffsetBinding:
        """Register a mount offset, returning the existing binding on duplicates."""
        normalized = normalize_offset(offset)
        existing = self._bindings.get(normalized)
        if existing is not None:
            return existing
        binding = OffsetBinding(offset=normalized, url=url)
        self._bindings[normalized] = binding
        self._ordered = tuple(sorted(self._bindings.values(), key=binding_sort_key, reverse=True))
        self._implicit_default = False
        return binding

    def ensure_default(self, url: str) -> bool:
        """Create the whole-root binding when nothing is registered yet."""
        if self._bindings:
            return False
        self.register("", url)
        self._implicit_default = True
        return True

    def bindings(self) -> tuple[OffsetBinding, ...]:
        """Return bindings in resolution order."""
        return self._ordered

    def is_empty(self) -> bool:
        return not self._bindings

    def has_subscribers(self) -> bool:
        """Return True when at least one binding has an observer."""
        return any(binding.has_subscribers() for binding in self._ordered)

    def plan(self) -> OffsetPlan:
        """Return the traversal plan for the current bindings."""
        if self._implicit_default:
            return SingleDefault(binding=self._ordered[0])
        return MultipleOffsets(bindings=self._ordered)

    def resolve(self, entry_name: str) -> OffsetBinding | None:
        """Return the binding an entry name belongs to, or None."""
        return resolve_binding(self._ordered, entry_name)

    def unsubscribe(self, observer: Observer) -> None:
        """Remove an observer from every binding."""
        for binding in self._ordered:
            binding.unsubscribe(observer)
