"""Physical constants and default parameters for one-zone cloud models.

All values are in CGS units, which is the unit system used by descriptor
files.  Numerical values are taken from CODATA 2018 where applicable.
"""
from __future__ import annotations

from typing import Tuple

# Speed of light in vacuum (cm s^-1)
C: float = 2.99792458e10

# One electron volt (erg)
EV: float = 1.602176634e-12

# Present-day CMB temperature (K)
T_CMB: float = 2.73

# Rotational temperature of H2, E(J) = k THETA_ROT_H2 J(J+1) (K)
THETA_ROT_H2: float = 85.3

# Highest rotational level kept in the H2 partition functions
H2_JMAX: int = 30

# Ortho-to-para ratio assumed when only the total H2 fraction is given
DEFAULT_H2_OPR: float = 0.25

# Heat deposited per primary ionisation in atomic gas (eV) [Dalgarno et al. 1999]
Q_ION_HI_EV: float = 6.5

# Heat deposited per primary ionisation in H2 gas (eV) tabulated against
# log10(n_H / cm^-3) [Glassgold et al. 2012]
Q_ION_H2_LOGN: Tuple[float, ...] = (2.0, 4.0, 7.0, 10.0)
Q_ION_H2_EV: Tuple[float, ...] = (10.0, 13.0, 17.0, 18.0)

