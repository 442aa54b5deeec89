# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


from ._angular import (
    ANGULAR_INTEGRALS as ANGULAR_INTEGRALS,
    angular_functions as angular_functions,
)
from ._coefficients import (
    angular_time_coefficients as angular_time_coefficients,
    parallel_fraction as parallel_fraction,
    polarisation_factors as polarisation_factors,
)
from ._signal import PhisSignal as PhisSignal, PhisSignalDiagnostic as PhisSignalDiagnostic
