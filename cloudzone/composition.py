r"""Chemical composition of a one-zone cloud.

Abundances are number fractions per H nucleus.  Besides storing them, the
:class:`Composition` collaborator evaluates the mass- and energy-weighted
quantities that downstream thermal solvers need:

* ``mu``   – mean mass per free particle in units of :math:`m_{\rm H}`,
* ``muH``  – mean mass per H nucleus in units of :math:`m_{\rm H}`,
* ``qIon`` – heat deposited per primary cosmic-ray ionisation (erg),
* ``cv``   – :math:`c_v / (k_B n_{\rm H} \mu_{\rm H})`, including the
  rotational heat capacity of ortho- and para-H2.

The derived values do not exist until :meth:`Composition.computeDerived`
(and :meth:`Composition.computeCv` for ``cv``) has run; reading them earlier
raises :class:`~cloudzone.errors.DerivedQuantityUnavailable`.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from . import constants
from .errors import DerivedQuantityUnavailable

logger = logging.getLogger(__name__)

__all__ = [
    "Composition",
    "h2_rotational_cv",
    "qion_h2_eV",
]


def _rotational_cv(T: float, J: np.ndarray, g: np.ndarray) -> float:
    """Heat capacity (units of k_B) of a rigid-rotor ladder restricted to ``J``."""

    x = constants.THETA_ROT_H2 * J * (J + 1) / T
    x = x - x[0]
    w = g * np.exp(-x)
    Z = w.sum()
    mean = float((w * x).sum() / Z)
    mean_sq = float((w * x * x).sum() / Z)
    return max(mean_sq - mean * mean, 0.0)


def h2_rotational_cv(T: float) -> tuple[float, float]:
    """Return the rotational heat capacity per molecule of para- and ortho-H2.

    Parameters
    ----------
    T:
        Gas kinetic temperature in K.

    Returns
    -------
    tuple of float
        ``(cv_para, cv_ortho)`` in units of :math:`k_B`.  Para-H2 populates
        even ``J``, ortho-H2 odd ``J``; the nuclear spin degeneracy is a
        common factor within each ladder and drops out.
    """

    if not math.isfinite(T) or T <= 0.0:
        raise ValueError("temperature 'T' must be finite and greater than 0")
    J = np.arange(constants.H2_JMAX + 1, dtype=float)
    g = 2.0 * J + 1.0
    para = J % 2 == 0
    ortho = ~para
    return _rotational_cv(T, J[para], g[para]), _rotational_cv(T, J[ortho], g[ortho])


def qion_h2_eV(nH: float) -> float:
    """Heat per primary ionisation in molecular gas (eV), Glassgold et al. (2012).

    The fit is piecewise linear in ``log10 nH`` and flat outside the
    tabulated densities; unset densities (``nH <= 0``) take the low-density
    value.
    """

    if nH <= 0.0:
        return constants.Q_ION_H2_EV[0]
    return float(np.interp(math.log10(nH), constants.Q_ION_H2_LOGN, constants.Q_ION_H2_EV))


@dataclass
class Composition:
    """Abundances of the main gas constituents, per H nucleus.

    Parameters
    ----------
    xHI, xHplus:
        Atomic and ionised hydrogen fractions.
    xpH2, xoH2:
        Para- and ortho-H2 fractions (molecules per H nucleus).
    xHe, xe:
        Helium and free-electron fractions.
    H2OPR:
        H2 ortho-to-para ratio, ``None`` while unset.
    """

    xHI: float = 0.0
    xHplus: float = 0.0
    xpH2: float = 0.0
    xoH2: float = 0.0
    xHe: float = 0.0
    xe: float = 0.0
    _H2OPR: Optional[float] = field(default=None, init=False, repr=False)
    _mu: Optional[float] = field(default=None, init=False, repr=False)
    _muH: Optional[float] = field(default=None, init=False, repr=False)
    _qIon: Optional[float] = field(default=None, init=False, repr=False)
    _cv: Optional[float] = field(default=None, init=False, repr=False)

    # ------------------------------------------------------------------
    # H2 bookkeeping
    # ------------------------------------------------------------------
    @property
    def H2OPR(self) -> Optional[float]:
        return self._H2OPR

    @H2OPR.setter
    def H2OPR(self, value: Optional[float]) -> None:
        if value is not None and (not math.isfinite(value) or value < 0.0):
            raise ValueError("H2 ortho-para ratio must be finite and non-negative")
        self._H2OPR = value
        total = self.xH2
        if value is not None and total > 0.0:
            self._split_h2(total, value)

    @property
    def xH2(self) -> float:
        """Total H2 fraction, ``xpH2 + xoH2``."""
        return self.xpH2 + self.xoH2

    @xH2.setter
    def xH2(self, value: float) -> None:
        opr = self._H2OPR if self._H2OPR is not None else constants.DEFAULT_H2_OPR
        self._split_h2(value, opr)

    def _split_h2(self, total: float, opr: float) -> None:
        self.xpH2 = total / (1.0 + opr)
        self.xoH2 = total * opr / (1.0 + opr)

    def hydrogen_total(self) -> float:
        """Return ``xHI + xH+ + 2 (xpH2 + xoH2)``, which must equal one."""
        return self.xHI + self.xHplus + 2.0 * (self.xpH2 + self.xoH2)

    # ------------------------------------------------------------------
    # Derived quantities
    # ------------------------------------------------------------------
    def _require(self, value: Optional[float], name: str, producer: str) -> float:
        if value is None:
            raise DerivedQuantityUnavailable(f"composition.{name} is not available until {producer}() has run")
        return value

    @property
    def mu(self) -> float:
        return self._require(self._mu, "mu", "computeDerived")

    @property
    def muH(self) -> float:
        return self._require(self._muH, "muH", "computeDerived")

    @property
    def qIon(self) -> float:
        return self._require(self._qIon, "qIon", "computeDerived")

    @property
    def cv(self) -> float:
        return self._require(self._cv, "cv", "computeCv")

    @property
    def has_derived(self) -> bool:
        return self._mu is not None

    @property
    def has_cv(self) -> bool:
        return self._cv is not None

    def computeDerived(self, nH: float) -> None:
        """Compute ``mu``, ``muH`` and ``qIon`` for number density ``nH``."""

        xH2 = self.xH2
        mass = self.xHI + self.xHplus + 2.0 * xH2 + 4.0 * self.xHe
        particles = self.xHI + self.xHplus + xH2 + self.xHe + self.xe
        if particles <= 0.0:
            raise ValueError("composition has no particles; cannot compute mean mass")
        self._mu = mass / particles
        self._muH = mass

        h_atomic = self.xHI + self.xHplus
        h_molecular = 2.0 * xH2
        h_total = h_atomic + h_molecular
        q_hi = constants.Q_ION_HI_EV
        if h_total > 0.0:
            q_ev = (h_atomic * q_hi + h_molecular * qion_h2_eV(nH)) / h_total
        else:
            q_ev = q_hi
        self._qIon = q_ev * constants.EV
        logger.debug("Derived mu=%.4g muH=%.4g qIon=%.4g eV at nH=%.4g", self._mu, self._muH, q_ev, nH)

    def computeCv(self, Tg: float) -> None:
        """Compute the dimensionless heat capacity ``cv`` at temperature ``Tg``."""

        muH = self.muH
        cv_para, cv_ortho = h2_rotational_cv(Tg)
        particles = self.xHI + self.xHplus + self.xH2 + self.xHe + self.xe
        cv_per_H = 1.5 * particles + self.xpH2 * cv_para + self.xoH2 * cv_ortho
        self._cv = cv_per_H / muH
