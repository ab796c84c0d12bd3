"""Post-parse validation and derivation for ingested clouds."""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Optional

from . import constants
from .composition import Composition
from .diagnostics import DiagnosticSink, NullSink
from .errors import InvariantViolation

if TYPE_CHECKING:
    from .cloud import Cloud

logger = logging.getLogger(__name__)


def check_hydrogen_balance(comp: Composition, tolerance: float = 0.0) -> float:
    """Require ``xHI + xH+ + 2 (xpH2 + xoH2) == 1`` and return the sum.

    With the default ``tolerance`` of zero the comparison is exact, which is
    what existing descriptors were written against (``0.1``/``0.4`` ortho/para
    pairs add up exactly).  A positive tolerance accepts
    ``|sum - 1| <= tolerance``.
    """

    total = comp.hydrogen_total()
    if tolerance > 0.0:
        ok = math.isfinite(total) and abs(total - 1.0) <= tolerance
    else:
        ok = total == 1
    if not ok:
        raise InvariantViolation(total, tolerance)
    return total


def finalize(cloud: "Cloud", *, tolerance: float = 0.0, sink: Optional[DiagnosticSink] = None) -> None:
    """Validate ``cloud`` and compute its derived composition quantities."""

    sink = sink if sink is not None else NullSink()
    check_hydrogen_balance(cloud.comp, tolerance)

    cloud.comp.computeDerived(cloud.nH)
    if cloud.Tg > 0.0:
        cloud.comp.computeCv(cloud.Tg)

    sink("Derived quantities:")
    sink(f"   ===> mean mass per particle = {cloud.comp.mu} mH")
    sink(f"   ===> mean mass per H = {cloud.comp.muH} mH")
    sink(f"   ===> energy added per ionization = {cloud.comp.qIon / constants.EV} eV")
    if cloud.Tg > 0.0:
        sink(f"   ===> c_v/(k_B n_H mu_H) = {cloud.comp.cv}")
    logger.debug("Validated cloud: hydrogen total=%r, nH=%g, Tg=%g", cloud.comp.hydrogen_total(), cloud.nH, cloud.Tg)


__all__ = ["check_hydrogen_balance", "finalize"]
