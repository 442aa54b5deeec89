# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0

#
"""All necessary constants for the package."""

from typing import Final


F0: Final[float] = 0.238732414638
r"""Angular normalisation :math:`f_0=3/(4\pi)` of the signal density."""
GAMMA_D_OFFSET: Final[float] = 0.65789
r"""Decay width of the :math:`B^0_d` meson in :math:`\text{ps}^{-1}`, added to
:math:`\Delta\Gamma_{sd}` to form :math:`\Gamma_s`."""
NEGATIVE_EFFICIENCY_FLOOR: Final[float] = 1e-3
"""Value returned by the efficiency spline past the zero crossing of its linear
extrapolation."""
SPLINE_SNAP_TOLERANCE: Final[float] = 1e-9
"""Polynomial coefficients of the efficiency spline below this magnitude are set
to zero."""
N_TERMS: Final[int] = 10
"""Number of interference terms of the angular decomposition."""
N_PARAMETERS: Final[int] = 17
"""Number of physics parameters of the signal density."""
