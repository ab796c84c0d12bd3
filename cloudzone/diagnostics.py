"""Diagnostic sinks receiving verbose progress messages during ingestion.

Parsing and validation never print.  Progress lines ("Setting nH = 100.0")
and advisories ("H2 OPR unspecified, assuming 0.25") are handed to a sink,
which decides where they go.  Sinks are purely observational: they must not
raise into, or otherwise steer, the ingestion.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Tuple, runtime_checkable

logger = logging.getLogger("cloudzone.ingest")


@runtime_checkable
class DiagnosticSink(Protocol):
    """Callable receiving progress messages, with a separate advisory channel."""

    def __call__(self, message: str) -> None:
        ...

    def advise(self, message: str) -> None:
        ...


class NullSink:
    """Discard every message; used when verbose output is off."""

    def __call__(self, message: str) -> None:
        return None

    def advise(self, message: str) -> None:
        return None


class LoggingSink:
    """Forward progress messages to :mod:`logging`.

    Progress goes out at ``level`` (INFO by default), advisories at WARNING.
    """

    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.INFO) -> None:
        self.log = log if log is not None else logger
        self.level = level

    def __call__(self, message: str) -> None:
        self.log.log(self.level, message)

    def advise(self, message: str) -> None:
        self.log.warning(message)


class CollectingSink:
    """Keep messages in memory, in emission order."""

    def __init__(self) -> None:
        self.records: List[Tuple[str, str]] = []

    def __call__(self, message: str) -> None:
        self.records.append(("info", message))

    def advise(self, message: str) -> None:
        self.records.append(("advisory", message))

    @property
    def messages(self) -> List[str]:
        return [msg for _, msg in self.records]

    @property
    def advisories(self) -> List[str]:
        return [msg for kind, msg in self.records if kind == "advisory"]


def resolve_sink(verbose: bool, sink: Optional[DiagnosticSink] = None) -> DiagnosticSink:
    """Pick the sink for one ingestion call.

    An explicit ``sink`` only receives messages when ``verbose`` is set;
    verbose without a sink logs through :class:`LoggingSink`.
    """

    if not verbose:
        return NullSink()
    if sink is not None:
        return sink
    return LoggingSink()


__all__ = [
    "DiagnosticSink",
    "NullSink",
    "LoggingSink",
    "CollectingSink",
    "resolve_sink",
]
