r"""Reader for LAMDA-format molecular data files.

The Leiden Atomic and Molecular Database distributes, per species, a text
file with energy levels, radiative transitions and collisional rate
coefficients tabulated against temperature.  Lines starting with ``!`` are
section headers; everything else is data in a fixed order.  Emitters attached
to a cloud point at such files through ``FILE:`` options or their species
name.

Collision rate coefficients are interpolated linearly in :math:`\log T`
inside the tabulated grid and extrapolated as a power law outside it.
Extrapolation can be forbidden per emitter (``NOEXTRAP``).
"""
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import numpy as np
import pandas as pd

from . import constants
from .errors import LineDataError
from .warnings import LineDataWarning

logger = logging.getLogger(__name__)

# LAMDA collision partner codes
PARTNER_NAMES: Dict[int, str] = {
    1: "H2",
    2: "pH2",
    3: "oH2",
    4: "e",
    5: "H",
    6: "He",
    7: "H+",
}


@dataclass
class CollisionTable:
    """Downward collision rate coefficients for one partner (cm^3 s^-1)."""

    partner: str
    upper: np.ndarray
    lower: np.ndarray
    temperatures: np.ndarray
    rates: np.ndarray
    description: str = ""

    def __post_init__(self) -> None:
        if self.temperatures.ndim != 1 or self.temperatures.size < 1:
            raise LineDataError(f"collision table for {self.partner} needs at least one temperature")
        if np.any(np.diff(self.temperatures) <= 0.0) or np.any(self.temperatures <= 0.0):
            raise LineDataError(f"collision temperatures for {self.partner} must be positive and increasing")
        if self.rates.shape != (self.upper.size, self.temperatures.size):
            raise LineDataError(
                f"collision rates for {self.partner} have shape {self.rates.shape}, "
                f"expected {(self.upper.size, self.temperatures.size)}"
            )

    @property
    def T_range(self) -> tuple[float, float]:
        return float(self.temperatures[0]), float(self.temperatures[-1])

    def rate(self, T: float, *, extrapolate: bool = True) -> np.ndarray:
        """Return the rate coefficient of every collisional transition at ``T``."""

        if not np.isfinite(T) or T <= 0.0:
            raise LineDataError("collision temperature must be finite and positive")
        t_arr = self.temperatures
        k = self.rates
        if t_arr.size == 1:
            return k[:, 0].copy()
        Tmin, Tmax = self.T_range
        if Tmin <= T <= Tmax:
            i = int(np.clip(np.searchsorted(t_arr, T) - 1, 0, t_arr.size - 2))
            logT1, logT2 = np.log(t_arr[i]), np.log(t_arr[i + 1])
            w = (np.log(T) - logT1) / (logT2 - logT1)
            return k[:, i] * (1.0 - w) + k[:, i + 1] * w
        if not extrapolate:
            raise LineDataError(
                f"temperature {T} K outside collision table range [{Tmin}, {Tmax}] K "
                f"for partner {self.partner}"
            )
        warnings.warn(
            f"extrapolating {self.partner} collision rates to T={T} K beyond [{Tmin}, {Tmax}] K",
            LineDataWarning,
        )
        if T < Tmin:
            i0, i1 = 0, 1
        else:
            i0, i1 = t_arr.size - 2, t_arr.size - 1
        k0, k1 = k[:, i0], k[:, i1]
        with np.errstate(divide="ignore", invalid="ignore"):
            slope = np.log(k1 / k0) / np.log(t_arr[i1] / t_arr[i0])
        slope = np.where(np.isfinite(slope), slope, 0.0)
        anchor = k0 if T < Tmin else k1
        T_anchor = t_arr[i0] if T < Tmin else t_arr[i1]
        return anchor * (T / T_anchor) ** slope


@dataclass
class LamdaData:
    """Levels, radiative transitions and collision tables of one species."""

    name: str
    molWgt: float
    levels: pd.DataFrame
    transitions: pd.DataFrame
    partners: Dict[str, CollisionTable] = field(default_factory=dict)
    source: Optional[Path] = None
    allow_extrapolation: bool = True

    @property
    def nlev(self) -> int:
        return int(len(self.levels))

    @property
    def nrad(self) -> int:
        return int(len(self.transitions))

    def collision_rates(self, partner: str, T: float, *, extrapolate: Optional[bool] = None) -> np.ndarray:
        if extrapolate is None:
            extrapolate = self.allow_extrapolation
        try:
            table = self.partners[partner]
        except KeyError:
            known = ", ".join(sorted(self.partners)) or "none"
            raise LineDataError(f"{self.name} has no collision data for partner {partner} (known: {known})") from None
        return table.rate(T, extrapolate=extrapolate)

    def check_level_energies(self, rtol: float = 1.0e-3) -> List[int]:
        """Compare transition frequencies with level energy differences.

        Returns the 1-based indices of inconsistent transitions and issues a
        :class:`~cloudzone.warnings.LineDataWarning` if there are any.
        """

        energy = self.levels.set_index("level")["energy"]
        dE = energy.loc[self.transitions["upper"]].to_numpy() - energy.loc[self.transitions["lower"]].to_numpy()
        nu_levels = dE * constants.C / 1.0e9
        nu_listed = self.transitions["freq"].to_numpy()
        bad_mask = ~np.isclose(nu_levels, nu_listed, rtol=rtol, atol=0.0)
        bad = [int(t) for t in self.transitions["trans"].to_numpy()[bad_mask]]
        if bad:
            warnings.warn(
                f"{self.name}: transition frequencies disagree with level energies for transitions {bad}",
                LineDataWarning,
            )
        return bad


def _data_lines(text: str) -> Iterator[str]:
    for raw in text.splitlines():
        stripped = raw.strip()
        if not stripped or stripped.startswith("!"):
            continue
        yield stripped


class _Cursor:
    def __init__(self, path: Path, lines: List[str]) -> None:
        self.path = path
        self.lines = lines
        self.pos = 0

    def next(self, section: str) -> str:
        if self.pos >= len(self.lines):
            raise LineDataError(f"{self.path}: unexpected end of file while reading {section}")
        line = self.lines[self.pos]
        self.pos += 1
        return line

    def integer(self, section: str) -> int:
        line = self.next(section)
        try:
            return int(line.split()[0])
        except ValueError as exc:
            raise LineDataError(f"{self.path}: expected an integer for {section}, got {line!r}") from exc

    def rows(self, count: int, section: str, min_cols: int) -> List[List[str]]:
        rows = []
        for _ in range(count):
            tokens = self.next(section).split()
            if len(tokens) < min_cols:
                raise LineDataError(f"{self.path}: {section} row {tokens!r} has fewer than {min_cols} columns")
            rows.append(tokens)
        return rows


def _floats(rows: List[List[str]], cols: slice, path: Path, section: str) -> np.ndarray:
    try:
        return np.array([[float(v) for v in row[cols]] for row in rows], dtype=float)
    except ValueError as exc:
        raise LineDataError(f"{path}: non-numeric value in {section}") from exc


def read_lamda(path: str | Path) -> LamdaData:
    """Parse a LAMDA file into a :class:`LamdaData` instance."""

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise LineDataError(f"cannot read LAMDA file {path}: {exc}") from exc
    cur = _Cursor(path, list(_data_lines(text)))

    name = cur.next("molecule name")
    try:
        molWgt = float(cur.next("molecular weight").split()[0])
    except ValueError as exc:
        raise LineDataError(f"{path}: molecular weight is not a number") from exc

    nlev = cur.integer("number of energy levels")
    level_rows = cur.rows(nlev, "energy levels", 3)
    level_vals = _floats(level_rows, slice(0, 3), path, "energy levels")
    levels = pd.DataFrame(
        {
            "level": level_vals[:, 0].astype(int),
            "energy": level_vals[:, 1],
            "weight": level_vals[:, 2],
            "label": [" ".join(row[3:]) for row in level_rows],
        }
    )
    if levels["level"].tolist() != list(range(1, nlev + 1)):
        raise LineDataError(f"{path}: energy levels must be numbered 1..{nlev}")

    nrad = cur.integer("number of radiative transitions")
    rad_rows = cur.rows(nrad, "radiative transitions", 5)
    rad_vals = _floats(rad_rows, slice(0, 5), path, "radiative transitions")
    transitions = pd.DataFrame(
        {
            "trans": rad_vals[:, 0].astype(int),
            "upper": rad_vals[:, 1].astype(int),
            "lower": rad_vals[:, 2].astype(int),
            "A": rad_vals[:, 3],
            "freq": rad_vals[:, 4],
        }
    )
    if ((transitions[["upper", "lower"]] < 1) | (transitions[["upper", "lower"]] > nlev)).any().any():
        raise LineDataError(f"{path}: radiative transition refers to an unknown level")

    partners: Dict[str, CollisionTable] = {}
    if cur.pos < len(cur.lines):
        npart = cur.integer("number of collision partners")
        for _ in range(npart):
            header = cur.next("collision partner")
            tokens = header.split()
            try:
                code = int(tokens[0])
            except ValueError as exc:
                raise LineDataError(f"{path}: bad collision partner line {header!r}") from exc
            partner = PARTNER_NAMES.get(code, f"partner{code}")
            ncol = cur.integer(f"{partner} collisional transitions")
            ntemp = cur.integer(f"{partner} collision temperatures")
            temp_tokens = cur.next(f"{partner} collision temperatures").split()
            if len(temp_tokens) != ntemp:
                raise LineDataError(f"{path}: expected {ntemp} collision temperatures for {partner}")
            temps = _floats([temp_tokens], slice(0, ntemp), path, f"{partner} collision temperatures")[0]
            coll_rows = cur.rows(ncol, f"{partner} collision rates", 3 + ntemp)
            coll_vals = _floats(coll_rows, slice(0, 3 + ntemp), path, f"{partner} collision rates")
            partners[partner] = CollisionTable(
                partner=partner,
                upper=coll_vals[:, 1].astype(int),
                lower=coll_vals[:, 2].astype(int),
                temperatures=temps,
                rates=coll_vals[:, 3:],
                description=" ".join(tokens[1:]),
            )

    logger.info("Loaded LAMDA data for %s from %s (%d levels, %d lines, %d partners)", name, path, nlev, nrad, len(partners))
    return LamdaData(name=name, molWgt=molWgt, levels=levels, transitions=transitions, partners=partners, source=path)


__all__ = [
    "PARTNER_NAMES",
    "CollisionTable",
    "LamdaData",
    "read_lamda",
]
