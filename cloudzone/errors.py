"""Custom exceptions for the :mod:`cloudzone` package."""
from __future__ import annotations

from typing import Optional, Sequence


class CloudZoneError(Exception):
    """Base exception for cloud descriptor and state errors."""


class ConfigurationError(CloudZoneError, ValueError):
    """Invalid ingestion options or option files."""


class DescriptorError(CloudZoneError, ValueError):
    """A descriptor could not be parsed.

    ``line`` holds the offending raw line (without its terminator) and
    ``source`` the descriptor it came from, when known.
    """

    def __init__(self, message: str, *, line: Optional[str] = None, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.line = line
        self.source = source


class MalformedLine(DescriptorError):
    """A directive line lacks ``=`` or carries no usable value."""


class UnrecognizedKeyword(DescriptorError):
    """The key in front of ``=`` is not a known directive."""

    def __init__(self, keyword: str, *, line: Optional[str] = None, source: Optional[str] = None) -> None:
        super().__init__(f"unrecognized token {keyword} in file {source}", line=line, source=source)
        self.keyword = keyword


class MalformedEmitterDirective(DescriptorError):
    """An ``EMITTER`` value has the wrong number of tokens or a bad abundance."""


class UnrecognizedEmitterOption(DescriptorError):
    """An optional ``EMITTER`` token matches none of the known options."""

    def __init__(self, token: str, *, line: Optional[str] = None, source: Optional[str] = None) -> None:
        super().__init__(f'unrecognized token "{token}" in line: {line}', line=line, source=source)
        self.token = token


class SourceUnavailable(CloudZoneError, FileNotFoundError):
    """A descriptor or data file could not be found in any search location."""

    def __init__(self, path: str, tried: Sequence[str] = ()) -> None:
        message = f"cannot open file {path}"
        if tried:
            message += " (tried: " + ", ".join(tried) + ")"
        super().__init__(message)
        self.path = path
        self.tried = tuple(tried)


class InvariantViolation(CloudZoneError, ValueError):
    """Post-parse hydrogen bookkeeping does not add up to one."""

    def __init__(self, total: float, tolerance: float = 0.0) -> None:
        message = f"total hydrogen abundance xHI + xH+ + 2 xH2 != 1 (got {total!r}"
        if tolerance > 0.0:
            message += f", tolerance {tolerance!r}"
        super().__init__(message + ")")
        self.total = total
        self.tolerance = tolerance


class DerivedQuantityUnavailable(CloudZoneError, AttributeError):
    """A derived composition quantity was read before it was computed."""


class LineDataError(CloudZoneError, ValueError):
    """Molecular line data are malformed or cannot serve a request."""


__all__ = [
    "CloudZoneError",
    "ConfigurationError",
    "DescriptorError",
    "MalformedLine",
    "UnrecognizedKeyword",
    "MalformedEmitterDirective",
    "UnrecognizedEmitterOption",
    "SourceUnavailable",
    "InvariantViolation",
    "DerivedQuantityUnavailable",
    "LineDataError",
]
