"""Dust properties of a one-zone cloud (CGS units)."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class DustProperties:
    """Coefficients governing dust opacity, emission and gas-dust coupling.

    Parameters
    ----------
    alphaGD:
        Gas-dust energy exchange coefficient (erg cm^3 K^-3/2).
    sigma10:
        Dust cross section per H nucleus to 10 K thermal radiation (cm^2 H^-1).
    sigmaPE:
        Cross section to the 8-13.6 eV photons driving photoelectric heating
        (cm^2 H^-1).
    sigmaISRF:
        Cross section to the interstellar radiation field (cm^2 H^-1).
    Zd:
        Dust abundance relative to the Milky Way value.
    beta:
        Spectral index of the dust opacity law.
    """

    alphaGD: float = 3.2e-34
    sigma10: float = 2.0e-25
    sigmaPE: float = 1.0e-21
    sigmaISRF: float = 3.0e-22
    Zd: float = 1.0
    beta: float = 2.0
