# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


from collections.abc import Mapping, Sequence
from typing import Union

import equinox as eqx
from jax import numpy as jnp
from jaxtyping import Array, ArrayLike

from ..constants import N_PARAMETERS
from ..utils.tools import error_if


class Parameter(eqx.Module):
    """Dataclass for a parameter.

    .. code::

        >>> from phisjax.parameters import Parameter
        >>> Parameter(name="delta_m").name
        'delta_m'
    """

    name: str = eqx.field(static=True, metadata={"help": "Name of the parameter."})

    def __repr__(self):
        return f"Parameter(name={self.name})"


# Polarisation fractions

A_0_SQUARED = Parameter(name="a_0_squared")
A_PERP_SQUARED = Parameter(name="a_perp_squared")
A_S_SQUARED = Parameter(name="a_s_squared")

# Decay widths and mixing frequency, ps^-1

DELTA_GAMMA_SD = Parameter(name="delta_gamma_sd")
DELTA_GAMMA = Parameter(name="delta_gamma")
DELTA_M = Parameter(name="delta_m")

# Weak phases, the non-zero polarisations are offsets from phi_0

PHI_0 = Parameter(name="phi_0")
PHI_PAR_0 = Parameter(name="phi_par_0")
PHI_PERP_0 = Parameter(name="phi_perp_0")
PHI_S_0 = Parameter(name="phi_s_0")

# |lambda|, the non-zero polarisations are ratios to lambda_0

LAMBDA_0 = Parameter(name="lambda_0")
LAMBDA_PAR_0 = Parameter(name="lambda_par_0")
LAMBDA_PERP_0 = Parameter(name="lambda_perp_0")
LAMBDA_S_0 = Parameter(name="lambda_s_0")

# Strong phases, relative to delta_0 = 0 and, for the S-wave, to delta_perp

DELTA_PAR_0 = Parameter(name="delta_par_0")
DELTA_PERP_0 = Parameter(name="delta_perp_0")
DELTA_S_PERP = Parameter(name="delta_s_perp")


PHIS_SIGNAL_PARAMETERS: tuple[Parameter, ...] = (
    A_0_SQUARED,
    A_PERP_SQUARED,
    A_S_SQUARED,
    DELTA_GAMMA_SD,
    DELTA_GAMMA,
    DELTA_M,
    PHI_0,
    PHI_PAR_0,
    PHI_PERP_0,
    PHI_S_0,
    LAMBDA_0,
    LAMBDA_PAR_0,
    LAMBDA_PERP_0,
    LAMBDA_S_0,
    DELTA_PAR_0,
    DELTA_PERP_0,
    DELTA_S_PERP,
)
"""Parameters of :class:`~phisjax.models.PhisSignal` in their canonical order."""

NOMINAL_VALUES: Mapping[str, float] = {
    A_0_SQUARED.name: 0.5241,
    A_PERP_SQUARED.name: 0.2504,
    A_S_SQUARED.name: 0.0034,
    DELTA_GAMMA_SD.name: -0.0044,
    DELTA_GAMMA.name: 0.0805,
    DELTA_M.name: 17.703,
    PHI_0.name: -0.082,
    PHI_PAR_0.name: -0.002,
    PHI_PERP_0.name: 0.001,
    PHI_S_0.name: 0.022,
    LAMBDA_0.name: 0.955,
    LAMBDA_PAR_0.name: 1.02,
    LAMBDA_PERP_0.name: 1.01,
    LAMBDA_S_0.name: 0.99,
    DELTA_PAR_0.name: 3.166,
    DELTA_PERP_0.name: 2.786,
    DELTA_S_PERP.name: 0.2,
}
"""Indicative parameter values, close to the published LHCb Run 2 results."""


def parameter_vector(
    values: Union[Mapping[str, ArrayLike], Sequence[ArrayLike], ArrayLike],
) -> Array:
    """Convert parameter values to the canonical length-17 vector.

    .. code::

        >>> from phisjax.parameters import NOMINAL_VALUES, parameter_vector
        >>> parameter_vector(NOMINAL_VALUES).shape
        (17,)

    Parameters
    ----------
    values : Union[Mapping[str, ArrayLike], Sequence[ArrayLike], ArrayLike]
        either a mapping from parameter name to value with exactly the 17 names
        of :data:`PHIS_SIGNAL_PARAMETERS`, or 17 values in their order

    Returns
    -------
    Array
        float64 vector of shape :code:`(17,)`

    Raises
    ------
    ValueError
        If names are missing or unknown, or the number of values is not 17.
    """
    if isinstance(values, Mapping):
        names = [p.name for p in PHIS_SIGNAL_PARAMETERS]
        missing = [name for name in names if name not in values]
        unknown = [name for name in values if name not in names]
        error_if(bool(missing), msg=f"missing parameters: {missing}")
        error_if(bool(unknown), msg=f"unknown parameters: {unknown}")
        values = [values[name] for name in names]
    vector = jnp.asarray(values, dtype=jnp.float64)
    error_if(
        vector.shape != (N_PARAMETERS,),
        msg=f"expected {N_PARAMETERS} parameter values, got shape {vector.shape}",
    )
    return vector
