"""Ingestion options for cloud descriptors.

Options are validated with Pydantic when they are built, either directly
from keyword arguments or from a YAML file (see :func:`load_options`).
"""
from __future__ import annotations

import math
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigurationError


class IngestOptions(BaseModel):
    """Settings of one descriptor ingestion."""

    model_config = ConfigDict(extra="forbid")

    verbose: bool = Field(False, description="Emit progress messages through the diagnostic sink")
    suppress_convergence_warnings: bool = Field(
        False,
        description="Stored on the cloud as noWarn; read by downstream convergence solvers",
    )
    hydrogen_tolerance: float = Field(
        0.0,
        description="Allowed |xHI + xH+ + 2 xH2 - 1|; 0 keeps the exact-equality check",
    )
    max_lines: Optional[int] = Field(None, description="Upper bound on descriptor length in lines")
    search_dirs: List[Path] = Field(default_factory=list, description="Extra directories searched for descriptors")

    @field_validator("hydrogen_tolerance")
    @classmethod
    def _check_tolerance(cls, value: float) -> float:
        if not math.isfinite(value) or value < 0.0:
            raise ConfigurationError(f"hydrogen_tolerance must be finite and non-negative, got {value}")
        return value

    @field_validator("max_lines")
    @classmethod
    def _check_max_lines(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ConfigurationError(f"max_lines must be positive, got {value}")
        return value


def load_options(path: str | Path, **overrides: Any) -> IngestOptions:
    """Read :class:`IngestOptions` from a YAML mapping, applying ``overrides``."""

    from ruamel.yaml import YAML

    yaml = YAML(typ="safe")
    source_path = Path(path)
    try:
        with source_path.open("r", encoding="utf-8") as fh:
            data = yaml.load(fh)
    except OSError as exc:
        raise ConfigurationError(f"cannot read options file {source_path}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"options file {source_path} must contain a mapping")
    data.update({key: value for key, value in overrides.items() if value is not None})
    return IngestOptions(**data)


__all__ = ["IngestOptions", "load_options"]
