# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0

#
"""
Decay-time efficiency and signal density models of the :math:`\\phi_s` analysis.
"""

from . import efficiency as efficiency, phis as phis
from .efficiency import CubicSpline as CubicSpline
from .phis import (
    ANGULAR_INTEGRALS as ANGULAR_INTEGRALS,
    angular_functions as angular_functions,
    PhisSignal as PhisSignal,
    PhisSignalDiagnostic as PhisSignalDiagnostic,
)
