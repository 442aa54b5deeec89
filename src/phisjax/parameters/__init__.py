# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


from ._parameters import (
    A_0_SQUARED as A_0_SQUARED,
    A_PERP_SQUARED as A_PERP_SQUARED,
    A_S_SQUARED as A_S_SQUARED,
    DELTA_GAMMA as DELTA_GAMMA,
    DELTA_GAMMA_SD as DELTA_GAMMA_SD,
    DELTA_M as DELTA_M,
    DELTA_PAR_0 as DELTA_PAR_0,
    DELTA_PERP_0 as DELTA_PERP_0,
    DELTA_S_PERP as DELTA_S_PERP,
    LAMBDA_0 as LAMBDA_0,
    LAMBDA_PAR_0 as LAMBDA_PAR_0,
    LAMBDA_PERP_0 as LAMBDA_PERP_0,
    LAMBDA_S_0 as LAMBDA_S_0,
    NOMINAL_VALUES as NOMINAL_VALUES,
    Parameter as Parameter,
    parameter_vector as parameter_vector,
    PHI_0 as PHI_0,
    PHI_PAR_0 as PHI_PAR_0,
    PHI_PERP_0 as PHI_PERP_0,
    PHI_S_0 as PHI_S_0,
    PHIS_SIGNAL_PARAMETERS as PHIS_SIGNAL_PARAMETERS,
)
