"""Ambient radiation field impinging on a one-zone cloud."""
from __future__ import annotations

from dataclasses import dataclass

from . import constants


@dataclass
class RadiationField:
    """Background radiation and ionisation environment.

    Parameters
    ----------
    TCMB:
        Cosmic microwave background temperature (K).
    TradDust:
        Temperature of the external dust-emitted IR field (K).
    fdDilute:
        Dilution factor of the dust IR field.
    ionRate:
        Primary ionisation rate (s^-1 H^-1).
    chi:
        FUV field strength in units of the solar-neighbourhood ISRF.
    """

    TCMB: float = constants.T_CMB
    TradDust: float = 0.0
    fdDilute: float = 1.0
    ionRate: float = 2.0e-17
    chi: float = 1.0
