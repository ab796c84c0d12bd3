"""Structured warning classes for the :mod:`cloudzone` package."""
from __future__ import annotations


class CloudZoneWarning(UserWarning):
    """Base warning class for cloudzone."""


class LineDataWarning(CloudZoneWarning):
    """Molecular data used outside their tabulated range or inconsistent."""


__all__ = [
    "CloudZoneWarning",
    "LineDataWarning",
]
