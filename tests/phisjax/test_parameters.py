# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


import numpy as np
import pytest
from jax import numpy as jnp
from numpy.testing import assert_allclose

from phisjax.constants import N_PARAMETERS
from phisjax.parameters import (
    DELTA_M,
    NOMINAL_VALUES,
    Parameter,
    parameter_vector,
    PHIS_SIGNAL_PARAMETERS,
)


EXPECTED_ORDER = [
    "a_0_squared",
    "a_perp_squared",
    "a_s_squared",
    "delta_gamma_sd",
    "delta_gamma",
    "delta_m",
    "phi_0",
    "phi_par_0",
    "phi_perp_0",
    "phi_s_0",
    "lambda_0",
    "lambda_par_0",
    "lambda_perp_0",
    "lambda_s_0",
    "delta_par_0",
    "delta_perp_0",
    "delta_s_perp",
]


def test_canonical_order():
    assert [p.name for p in PHIS_SIGNAL_PARAMETERS] == EXPECTED_ORDER
    assert len(PHIS_SIGNAL_PARAMETERS) == N_PARAMETERS
    assert all(isinstance(p, Parameter) for p in PHIS_SIGNAL_PARAMETERS)
    assert list(NOMINAL_VALUES) == EXPECTED_ORDER


def test_vector_from_mapping_and_sequence():
    from_mapping = parameter_vector(NOMINAL_VALUES)
    shuffled = dict(reversed(list(NOMINAL_VALUES.items())))
    from_sequence = parameter_vector(list(NOMINAL_VALUES.values()))
    from_array = parameter_vector(np.asarray(list(NOMINAL_VALUES.values())))
    assert from_mapping.shape == (N_PARAMETERS,)
    assert from_mapping.dtype == jnp.float64
    assert_allclose(parameter_vector(shuffled), from_mapping)
    assert_allclose(from_sequence, from_mapping)
    assert_allclose(from_array, from_mapping)
    assert from_mapping[5] == NOMINAL_VALUES["delta_m"]


@pytest.mark.parametrize(
    "values",
    [
        {k: v for k, v in NOMINAL_VALUES.items() if k != "phi_0"},
        {**NOMINAL_VALUES, "phi_s": 0.0},
        list(NOMINAL_VALUES.values()) + [0.0],
        np.zeros((N_PARAMETERS, 1)),
        0.5,
    ],
)
def test_malformed_vector(values):
    with pytest.raises(ValueError):
        parameter_vector(values)


def test_parameter_repr():
    assert repr(DELTA_M) == "Parameter(name=delta_m)"
