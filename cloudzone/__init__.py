"""One-zone interstellar cloud descriptors: ingestion, validation and state."""
from __future__ import annotations

from .chemistry import ChemicalNetwork
from .cloud import Cloud
from .composition import Composition
from .diagnostics import CollectingSink, DiagnosticSink, LoggingSink, NullSink
from .dust import DustProperties
from .emitter import EmitterConfig
from .errors import (
    CloudZoneError,
    ConfigurationError,
    DerivedQuantityUnavailable,
    DescriptorError,
    InvariantViolation,
    LineDataError,
    MalformedEmitterDirective,
    MalformedLine,
    SourceUnavailable,
    UnrecognizedEmitterOption,
    UnrecognizedKeyword,
)
from .lamda import LamdaData, read_lamda
from .radiation import RadiationField
from .schema import IngestOptions, load_options

__version__ = "0.1.0"

__all__ = [
    "Cloud",
    "Composition",
    "DustProperties",
    "RadiationField",
    "EmitterConfig",
    "ChemicalNetwork",
    "IngestOptions",
    "load_options",
    "LamdaData",
    "read_lamda",
    "DiagnosticSink",
    "NullSink",
    "LoggingSink",
    "CollectingSink",
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
    "__version__",
]
