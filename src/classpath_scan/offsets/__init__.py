"""Offset bindings, resolution and interest negotiation."""

from .models import MultipleOffsets, OffsetBinding, OffsetPlan, SingleDefault, normalize_offset
from .negotiation import negotiate_interest
from .registry import OffsetRegistry

__all__ = [
    "MultipleOffsets",
    "OffsetBinding",
    "OffsetPlan",
    "OffsetRegistry",
    "SingleDefault",
    "negotiate_interest",
    "normalize_offset",
]
