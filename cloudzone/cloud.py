"""One-zone physical state of an interstellar cloud.

A :class:`Cloud` is either built empty or ingested from a descriptor file::

    cloud = Cloud.from_descriptor("cloudfiles/MilkyWayGMC.desc", verbose=True)

Ingestion parses every directive, checks the hydrogen bookkeeping and
computes the derived composition quantities.  Any error aborts it and no
cloud is returned; :meth:`Cloud.read` on an existing instance stages the
changes on a copy and only commits them once everything succeeded.
"""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .chemistry import ChemicalNetwork
from .composition import Composition
from .descriptor import ingest_lines, open_descriptor
from .diagnostics import DiagnosticSink, resolve_sink
from .dust import DustProperties
from .emitter import EmitterConfig
from .errors import DescriptorError
from .radiation import RadiationField
from .schema import IngestOptions
from .validation import finalize

logger = logging.getLogger(__name__)


@dataclass
class Cloud:
    """Physical, chemical and radiative state of one cloud.

    Parameters
    ----------
    nH:
        Number density of H nuclei (cm^-3).
    colDen:
        Centre-to-edge column density of H nuclei (cm^-2).
    sigmaNT:
        Non-thermal velocity dispersion (cm s^-1).
    dVdr:
        Radial velocity gradient (s^-1).
    Tg, Td:
        Gas kinetic and dust temperatures (K).
    comp, dust, rad:
        Composition, dust properties and radiation field owned by the cloud.
    emitters:
        Emitting species keyed by name.
    chemnetwork:
        Optional time-dependent chemical network.
    noWarn:
        Suppress convergence warnings of emitter solvers run on this cloud.

    Scalars left at 0 are unset.
    """

    nH: float = 0.0
    colDen: float = 0.0
    sigmaNT: float = 0.0
    dVdr: float = 0.0
    Tg: float = 0.0
    Td: float = 0.0
    comp: Composition = field(default_factory=Composition)
    dust: DustProperties = field(default_factory=DustProperties)
    rad: RadiationField = field(default_factory=RadiationField)
    emitters: Dict[str, EmitterConfig] = field(default_factory=dict)
    chemnetwork: Optional[ChemicalNetwork] = None
    noWarn: bool = False

    @classmethod
    def empty(cls, noWarn: bool = False) -> "Cloud":
        return cls(noWarn=noWarn)

    @classmethod
    def from_descriptor(
        cls,
        fileName: str | Path,
        noWarn: bool = False,
        verbose: bool = False,
        *,
        options: Optional[IngestOptions] = None,
        sink: Optional[DiagnosticSink] = None,
    ) -> "Cloud":
        """Build a cloud from the descriptor ``fileName``.

        ``noWarn`` and ``verbose`` override the corresponding fields of
        ``options`` when set.
        """

        options = _merge_options(options, noWarn=noWarn, verbose=verbose)
        cloud = cls(noWarn=options.suppress_convergence_warnings)
        cloud._ingest(fileName, options, sink)
        return cloud

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------
    def read(
        self,
        fileName: str | Path,
        verbose: bool = False,
        *,
        options: Optional[IngestOptions] = None,
        sink: Optional[DiagnosticSink] = None,
    ) -> None:
        """Apply the descriptor ``fileName`` on top of the current state.

        The current state is left untouched if the descriptor fails to parse
        or validate.
        """

        options = _merge_options(options, noWarn=self.noWarn, verbose=verbose)
        memo: Dict[int, Any] = {}
        if self.chemnetwork is not None:
            memo[id(self.chemnetwork)] = self.chemnetwork
        staged = copy.deepcopy(self, memo)
        staged.noWarn = options.suppress_convergence_warnings
        staged._ingest(fileName, options, sink)
        for f in fields(self):
            setattr(self, f.name, getattr(staged, f.name))

    def _ingest(self, fileName: str | Path, options: IngestOptions, sink: Optional[DiagnosticSink]) -> None:
        out = resolve_sink(options.verbose, sink)
        path = open_descriptor(fileName, options.search_dirs)
        out("Reading from file " + str(fileName) + "...")
        try:
            with path.open("r", encoding="utf-8") as fp:
                ingest_lines(self, fp, source=str(fileName), sink=out, max_lines=options.max_lines)
        except UnicodeDecodeError as exc:
            raise DescriptorError(
                f"descriptor {fileName} is not valid UTF-8 text: {exc.reason} at byte {exc.start}",
                source=str(fileName),
            ) from exc
        finalize(self, tolerance=options.hydrogen_tolerance, sink=out)
        logger.info("Ingested cloud descriptor %s (%d emitters)", path, len(self.emitters))

    # ------------------------------------------------------------------
    # Emitters and chemistry
    # ------------------------------------------------------------------
    def add_emitter(
        self,
        name: str,
        abundance: float,
        *,
        energySkip: bool = False,
        extrap: bool = True,
        emitterFile: Optional[str] = None,
        emitterURL: Optional[str] = None,
    ) -> EmitterConfig:
        """Register an emitting species, replacing any previous one of that name."""

        config = EmitterConfig(
            name,
            float(abundance),
            energySkip=energySkip,
            extrap=extrap,
            emitterFile=emitterFile,
            emitterURL=emitterURL,
        )
        self.emitters[name] = config
        return config

    def attach_network(self, network: ChemicalNetwork) -> None:
        self.chemnetwork = network

    def detach_network(self) -> Optional[ChemicalNetwork]:
        network, self.chemnetwork = self.chemnetwork, None
        return network

    # ------------------------------------------------------------------
    # Descriptive aliases
    # ------------------------------------------------------------------
    @property
    def number_density_H(self) -> float:
        return self.nH

    @property
    def column_density_H(self) -> float:
        return self.colDen

    @property
    def nonthermal_velocity_dispersion(self) -> float:
        return self.sigmaNT

    @property
    def velocity_gradient(self) -> float:
        return self.dVdr

    @property
    def gas_temperature(self) -> float:
        return self.Tg

    @property
    def dust_temperature(self) -> float:
        return self.Td

    @property
    def suppress_convergence_warnings(self) -> bool:
        return self.noWarn

    def summary(self) -> Dict[str, Any]:
        """Return a JSON-serialisable snapshot of the cloud."""

        comp = self.comp
        composition: Dict[str, Any] = {
            "xHI": comp.xHI,
            "xHplus": comp.xHplus,
            "xpH2": comp.xpH2,
            "xoH2": comp.xoH2,
            "xHe": comp.xHe,
            "xe": comp.xe,
            "H2OPR": comp.H2OPR,
        }
        if comp.has_derived:
            composition.update(mu=comp.mu, muH=comp.muH, qIon=comp.qIon)
        if comp.has_cv:
            composition["cv"] = comp.cv
        return {
            "nH": self.nH,
            "colDen": self.colDen,
            "sigmaNT": self.sigmaNT,
            "dVdr": self.dVdr,
            "Tg": self.Tg,
            "Td": self.Td,
            "comp": composition,
            "dust": {f.name: getattr(self.dust, f.name) for f in fields(self.dust)},
            "rad": {f.name: getattr(self.rad, f.name) for f in fields(self.rad)},
            "emitters": {
                name: {
                    "abundance": em.abundance,
                    "energySkip": em.energySkip,
                    "extrap": em.extrap,
                    "emitterFile": em.emitterFile,
                    "emitterURL": em.emitterURL,
                }
                for name, em in self.emitters.items()
            },
            "chemnetwork": getattr(self.chemnetwork, "name", None) if self.chemnetwork is not None else None,
            "noWarn": self.noWarn,
        }


def _merge_options(options: Optional[IngestOptions], *, noWarn: bool, verbose: bool) -> IngestOptions:
    if options is None:
        return IngestOptions(verbose=verbose, suppress_convergence_warnings=noWarn)
    updates: Dict[str, Any] = {}
    if verbose:
        updates["verbose"] = True
    if noWarn:
        updates["suppress_convergence_warnings"] = True
    return options.model_copy(update=updates) if updates else options


__all__ = ["Cloud"]
