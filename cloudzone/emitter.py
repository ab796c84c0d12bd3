"""Emitting species attached to a cloud.

An :class:`EmitterConfig` records what a descriptor says about one species:
its abundance and how its molecular data should be loaded later.  Loading the
data is deferred; line radiative transfer is done by external solvers.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .errors import SourceUnavailable
from .lamda import LamdaData, read_lamda
from .paths import find_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmitterConfig:
    """Declaration of an emitting species.

    Parameters
    ----------
    name:
        Species name, the registry key on the owning cloud.
    abundance:
        Abundance per H nucleus.
    energySkip:
        Exclude this species from heating/cooling bookkeeping of downstream
        solvers; also skips the level-energy consistency check on load.
    extrap:
        Allow collision rates to be extrapolated outside their tabulated
        temperature range.
    emitterFile:
        Explicit name of the LAMDA data file.
    emitterURL:
        URL from which the data file may be fetched by external tools.
    """

    name: str
    abundance: float
    energySkip: bool = False
    extrap: bool = True
    emitterFile: Optional[str] = None
    emitterURL: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("emitter name must not be empty")
        if not math.isfinite(self.abundance):
            raise ValueError(f"abundance of emitter {self.name} must be finite")

    @property
    def skipEnergyLevels(self) -> bool:
        return self.energySkip

    @property
    def allowExtrapolation(self) -> bool:
        return self.extrap

    @property
    def dataFile(self) -> Optional[str]:
        return self.emitterFile

    @property
    def dataURL(self) -> Optional[str]:
        return self.emitterURL

    def describe(self, abundance_text: Optional[str] = None) -> str:
        """Return the progress message printed when the emitter is added."""

        if abundance_text is None:
            abundance_text = str(self.abundance)
        msg = f"Adding emitter {self.name} with abundance {abundance_text}"
        if self.energySkip:
            msg += "; setting energySkip"
        if not self.extrap:
            msg += "; disallowing extrapolation"
        if self.emitterFile is not None:
            msg += "; using file name " + self.emitterFile
        if self.emitterURL is not None:
            msg += "; using URL " + self.emitterURL
        return msg

    def resolve_data_path(self, search_dirs: Sequence[str | Path] = ()) -> Path:
        """Locate the LAMDA file for this species."""

        if self.emitterFile is not None:
            names = [self.emitterFile]
        else:
            names = [f"{self.name}.dat"]
            if self.name.lower() != self.name:
                names.append(f"{self.name.lower()}.dat")
        tried = []
        for name in names:
            try:
                return find_file(name, search_dirs)
            except SourceUnavailable as exc:
                tried.extend(exc.tried)
        if self.emitterURL is not None:
            tried.append(self.emitterURL)
        raise SourceUnavailable(names[0], tried)

    def load_data(self, search_dirs: Sequence[str | Path] = ()) -> LamdaData:
        """Read the molecular data of this species."""

        path = self.resolve_data_path(search_dirs)
        data = read_lamda(path)
        data.allow_extrapolation = self.extrap
        if not self.energySkip:
            data.check_level_energies()
        return data


__all__ = ["EmitterConfig"]
