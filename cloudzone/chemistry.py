"""Interface expected from time-dependent chemical networks.

Networks are built and driven by external integrators; a
:class:`~cloudzone.cloud.Cloud` only stores a reference to one.
"""
from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

import numpy as np


@runtime_checkable
class ChemicalNetwork(Protocol):
    """Minimal surface of a chemical network attachable to a cloud."""

    name: str
    specList: Sequence[str]

    def dxdt(self, xin: np.ndarray, time: float) -> np.ndarray:
        """Return the time derivative of the abundances ``xin``."""
        ...

    def applyAbundances(self, addEmitters: bool = False) -> None:
        """Push the network abundances back onto the owning cloud."""
        ...
