"""Parser for line-oriented cloud descriptor files.

A descriptor holds one ``KEY = VALUE`` directive per line.  Blank lines and
lines whose first non-blank character is ``#`` are ignored, and anything
after a ``#`` following the ``=`` is a trailing comment.  Keys are matched
case-insensitively against :data:`DIRECTIVES`::

    # Milky Way GMC
    nH      = 1.0e2          # cm^-3
    colDen  = 4.0e22
    xoH2    = 0.1
    xpH2    = 0.4
    emitter = CO 1.0e-4 noExtrap file:co@xpol.dat

Every directive either assigns one scalar on the cloud or one of its
sub-states, or registers an emitter.  The first bad line aborts the whole
ingestion with a :class:`~cloudzone.errors.DescriptorError`.
"""
from __future__ import annotations

import logging
import math
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Sequence, Tuple

from . import constants
from .diagnostics import DiagnosticSink, NullSink
from .emitter import EmitterConfig
from .errors import (
    DescriptorError,
    MalformedEmitterDirective,
    MalformedLine,
    UnrecognizedEmitterOption,
    UnrecognizedKeyword,
)
from .paths import find_file

if TYPE_CHECKING:
    from .cloud import Cloud

logger = logging.getLogger(__name__)

EMITTER_MIN_TOKENS = 2
EMITTER_MAX_TOKENS = 6


class Directive(Enum):
    """Assignment targets of the descriptor grammar.

    Each member carries ``(keyword, target, attribute, label, unit)``:
    ``target`` names the sub-state (``None`` for the cloud itself) and
    ``label``/``unit`` format the verbose progress message.
    """

    NH = ("NH", None, "nH", "nH", "")
    COLDEN = ("COLDEN", None, "colDen", "column density", "H cm^-2")
    SIGMANT = ("SIGMANT", None, "sigmaNT", "sigmaNT", "cm s^-1")
    DVDR = ("DVDR", None, "dVdr", "dVdr", "cm s^-1 cm^-1")
    TG = ("TG", None, "Tg", "Tg", "K")
    TD = ("TD", None, "Td", "Td", "K")
    ALPHAGD = ("ALPHAGD", "dust", "alphaGD", "alpha_GD", "erg cm^3 K^-3/2")
    SIGMAD10 = ("SIGMAD10", "dust", "sigma10", "sigma_d,10", "cm^2 g^-1")
    SIGMADPE = ("SIGMADPE", "dust", "sigmaPE", "sigma_d,PE", "cm^2 H^-1")
    SIGMADISRF = ("SIGMADISRF", "dust", "sigmaISRF", "sigma_d,ISRF", "cm^2 H^-1")
    ZDUST = ("ZDUST", "dust", "Zd", "Z'_d", "")
    BETADUST = ("BETADUST", "dust", "beta", "beta_dust", "")
    XHI = ("XHI", "comp", "xHI", "xHI", "")
    XPH2 = ("XPH2", "comp", "xpH2", "xpH2", "")
    XOH2 = ("XOH2", "comp", "xoH2", "xoH2", "")
    H2OPR = ("H2OPR", "comp", "H2OPR", "H2 ortho-para ratio", "")
    XH2 = ("XH2", "comp", "xH2", "xH2", "")
    XHE = ("XHE", "comp", "xHe", "xHe", "")
    XE = ("XE", "comp", "xe", "xe", "")
    # Historical alias: XH+ writes the electron fraction, not xHplus.
    XHPLUS = ("XH+", "comp", "xe", "xH+", "")
    TCMB = ("TCMB", "rad", "TCMB", "T_CMB", "K")
    TRADDUST = ("TRADDUST", "rad", "TradDust", "T_radDust", "K")
    RADDUSTDILUTION = ("RADDUTDILUTION", "rad", "fdDilute", "radDust dilution factor", "")
    IONRATE = ("IONRATE", "rad", "ionRate", "primary ionization rate", "s^-1 H^-1")
    CHI = ("CHI", "rad", "chi", "chi", "")
    EMITTER = ("EMITTER", None, None, "emitter", "")

    def __init__(self, keyword: str, target: Optional[str], attribute: Optional[str], label: str, unit: str) -> None:
        self.keyword = keyword
        self.target = target
        self.attribute = attribute
        self.label = label
        self.unit = unit

    def owner(self, cloud: "Cloud") -> object:
        return cloud if self.target is None else getattr(cloud, self.target)

    def message(self, value: float) -> str:
        msg = f"Setting {self.label} = {value}"
        if self.unit:
            msg += f" {self.unit}"
        return msg


DIRECTIVES: Dict[str, Directive] = {d.keyword: d for d in Directive}


def _display(line: str) -> str:
    return line.rstrip("\r\n")


def split_directive(line: str, *, source: Optional[str] = None) -> Optional[Tuple[str, str]]:
    """Classify one raw line.

    Returns ``None`` for blank and comment lines, otherwise the normalised
    (trimmed, upper-cased) key and the value text with any trailing comment
    removed.
    """

    stripped = line.strip()
    # Whitespace-only lines count as blank, not only a bare terminator.
    if not stripped:
        return None
    if stripped[0] == "#":
        return None
    key, sep, rest = line.partition("=")
    if not sep or not rest.strip():
        raise MalformedLine("Error parsing input line: " + _display(line), line=_display(line), source=source)
    value = rest.split("#", 1)[0]
    return key.strip().upper(), value


def parse_float(text: str, line: str, *, source: Optional[str] = None) -> float:
    try:
        number = float(text)
    except ValueError:
        raise MalformedLine("Error parsing input line: " + _display(line), line=_display(line), source=source) from None
    if not math.isfinite(number):
        raise MalformedLine("Non-finite value in input line: " + _display(line), line=_display(line), source=source)
    return number


def parse_emitter_value(value: str, line: str, *, source: Optional[str] = None) -> EmitterConfig:
    """Build an :class:`EmitterConfig` from the value of an ``EMITTER`` line.

    The value is ``<name> <abundance> [OPTION ...]`` with options
    ``ENERGYSKIP``, ``EXTRAPOLATE`` (accepted, no effect), ``NOEXTRAP``,
    ``FILE:<path>`` and ``URL:<url>``; option keywords are case-insensitive,
    their payloads are kept verbatim.
    """

    shown = _display(line)
    tokens = value.split()
    if not EMITTER_MIN_TOKENS <= len(tokens) <= EMITTER_MAX_TOKENS:
        raise MalformedEmitterDirective("Error parsing input line: " + shown, line=shown, source=source)
    name, abundance_text = tokens[0], tokens[1]
    try:
        abundance = float(abundance_text)
    except ValueError:
        raise MalformedEmitterDirective(
            f"bad abundance {abundance_text!r} in line: {shown}", line=shown, source=source
        ) from None

    energySkip = False
    extrap = True
    emitterFile = None
    emitterURL = None
    for token in tokens[2:]:
        option = token.upper().strip()
        if option == "ENERGYSKIP":
            energySkip = True
        elif option == "EXTRAPOLATE":
            pass
        elif option == "NOEXTRAP":
            extrap = False
        elif option[:5] == "FILE:":
            emitterFile = token[5:].strip()
        elif option[:4] == "URL:":
            emitterURL = token[4:].strip()
        else:
            raise UnrecognizedEmitterOption(token.strip(), line=shown, source=source)

    try:
        return EmitterConfig(
            name,
            abundance,
            energySkip=energySkip,
            extrap=extrap,
            emitterFile=emitterFile,
            emitterURL=emitterURL,
        )
    except ValueError as exc:
        raise MalformedEmitterDirective(f"{exc} in line: {shown}", line=shown, source=source) from exc


def apply_directive(
    cloud: "Cloud",
    key: str,
    value: str,
    line: str,
    *,
    source: Optional[str] = None,
    sink: Optional[DiagnosticSink] = None,
) -> Directive:
    """Apply one parsed directive to ``cloud`` and return its kind."""

    sink = sink if sink is not None else NullSink()
    try:
        directive = DIRECTIVES[key]
    except KeyError:
        raw_key = line.partition("=")[0].strip() or key
        raise UnrecognizedKeyword(raw_key, line=_display(line), source=source) from None

    if directive is Directive.EMITTER:
        config = parse_emitter_value(value, line, source=source)
        sink(config.describe(value.split()[1]))
        cloud.emitters[config.name] = config
        return directive

    number = parse_float(value, line, source=source)
    owner = directive.owner(cloud)
    if directive is Directive.XH2:
        comp = cloud.comp
        if comp.H2OPR is None:
            comp.H2OPR = constants.DEFAULT_H2_OPR
            sink.advise(f"Warning: H2 OPR unspecified, assuming {constants.DEFAULT_H2_OPR}")
        comp.xH2 = number
        sink(f"Setting xpH2 = {comp.xpH2}")
        sink(f"Setting xoH2 = {comp.xoH2}")
        return directive

    try:
        setattr(owner, directive.attribute, number)
    except ValueError as exc:
        raise MalformedLine(f"{exc} in line: {_display(line)}", line=_display(line), source=source) from exc
    sink(directive.message(getattr(owner, directive.attribute)))
    return directive


def ingest_lines(
    cloud: "Cloud",
    lines: Iterable[str],
    *,
    source: Optional[str] = None,
    sink: Optional[DiagnosticSink] = None,
    max_lines: Optional[int] = None,
) -> int:
    """Apply every directive in ``lines`` to ``cloud``; return the directive count."""

    applied = 0
    for lineno, line in enumerate(lines, start=1):
        if max_lines is not None and lineno > max_lines:
            raise DescriptorError(f"descriptor {source} exceeds {max_lines} lines", source=source)
        parsed = split_directive(line, source=source)
        if parsed is None:
            continue
        key, value = parsed
        apply_directive(cloud, key, value, line, source=source, sink=sink)
        applied += 1
    logger.debug("Applied %d directives from %s", applied, source)
    return applied


def open_descriptor(fileName: str | Path, search_dirs: Sequence[str | Path] = ()) -> Path:
    """Locate a descriptor, falling back to the installed package data."""

    return find_file(fileName, search_dirs)


__all__ = [
    "Directive",
    "DIRECTIVES",
    "EMITTER_MIN_TOKENS",
    "EMITTER_MAX_TOKENS",
    "split_directive",
    "parse_float",
    "parse_emitter_value",
    "apply_directive",
    "ingest_lines",
    "open_descriptor",
]
