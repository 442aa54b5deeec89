# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


#
r"""Angular-time coefficients and polarisation weights of the signal density.

Each interference term :math:`k` of amplitudes :math:`A_i A_j^*` evolves as

.. math::

    e^{-\Gamma t}\left[a_k\cosh\frac{\Delta\Gamma t}{2}
    + b_k\sinh\frac{\Delta\Gamma t}{2}
    + c_k\cos(\Delta M t) + d_k\sin(\Delta M t)\right].

With the CP eigenvalues :math:`\eta_i` and
:math:`\lambda_i=|\lambda_i|e^{-i\phi_i}`, the mixing gives

.. math::

    X_{\cosh} = 1+\eta_i\eta_j\lambda_i\lambda_j^*,\qquad
    X_{\sinh} = -(\eta_i\lambda_i+\eta_j\lambda_j^*),\qquad
    X_{\cos} = 1-\eta_i\eta_j\lambda_i\lambda_j^*,\qquad
    X_{\sin} = i(\eta_i\lambda_i-\eta_j\lambda_j^*),

and the coefficient is :math:`\frac{1}{2}\operatorname{Re}(e^{i(\delta_i-\delta_j)}X)`
or :math:`\pm\frac{1}{2}\operatorname{Im}(e^{i(\delta_i-\delta_j)}X)`, depending on
which part of :math:`A_iA_j^*` the angular function of the term picks up.
"""

import jax
from jax import numpy as jnp
from jaxtyping import Array, ArrayLike


_ZERO, _PARALLEL, _PERPENDICULAR, _S_WAVE = range(4)

_CP_EIGENVALUES = (1.0, 1.0, -1.0, -1.0)

# (i, j, part of e^{i(delta_i - delta_j)} X, sign) in the order of angular_functions
_TERMS = (
    (_ZERO, _ZERO, "real", 1.0),
    (_PARALLEL, _PARALLEL, "real", 1.0),
    (_PERPENDICULAR, _PERPENDICULAR, "real", 1.0),
    (_PERPENDICULAR, _PARALLEL, "imag", 1.0),
    (_ZERO, _PARALLEL, "real", 1.0),
    (_ZERO, _PERPENDICULAR, "imag", -1.0),
    (_S_WAVE, _S_WAVE, "real", 1.0),
    (_S_WAVE, _PARALLEL, "real", 1.0),
    (_S_WAVE, _PERPENDICULAR, "imag", -1.0),
    (_S_WAVE, _ZERO, "real", 1.0),
)


def _polarisation_physics(parameters: Array) -> tuple[Array, Array, Array]:
    """Magnitudes of lambda, weak phases and strong phases of the 0, parallel,
    perpendicular and S-wave amplitudes."""
    phi_0, phi_par0, phi_perp0, phi_s0 = parameters[6:10]
    lambda_0, lambda_par0, lambda_perp0, lambda_s0 = parameters[10:14]
    delta_par0, delta_perp0, delta_sperp = parameters[14:17]

    phases = jnp.stack([phi_0, phi_par0 + phi_0, phi_perp0 + phi_0, phi_s0 + phi_0])
    magnitudes = jnp.stack(
        [
            lambda_0,
            lambda_par0 * lambda_0,
            lambda_perp0 * lambda_0,
            lambda_s0 * lambda_0,
        ]
    )
    strong = jnp.stack(
        [
            jnp.zeros_like(delta_par0),
            delta_par0,
            delta_perp0,
            delta_sperp + delta_perp0,
        ]
    )
    return magnitudes, phases, strong


@jax.jit
def angular_time_coefficients(
    parameters: ArrayLike,
) -> tuple[Array, Array, Array, Array]:
    """Cosh, sinh, cos and sin weights of the ten interference terms.

    Parameters
    ----------
    parameters : ArrayLike
        the 17 physics parameters in their canonical order

    Returns
    -------
    tuple[Array, Array, Array, Array]
        the tables :math:`a_k`, :math:`b_k`, :math:`c_k`, :math:`d_k`, each of
        length 10
    """
    parameters = jnp.asarray(parameters)
    magnitudes, phases, strong = _polarisation_physics(parameters)
    lambdas = magnitudes * jnp.exp(-1j * phases)

    rows = []
    for i, j, part, sign in _TERMS:
        li = _CP_EIGENVALUES[i] * lambdas[i]
        lj = _CP_EIGENVALUES[j] * jnp.conj(lambdas[j])
        mixing = jnp.stack([1.0 + li * lj, -(li + lj), 1.0 - li * lj, 1j * (li - lj)])
        projected = jnp.exp(1j * (strong[i] - strong[j])) * mixing
        value = jnp.real(projected) if part == "real" else jnp.imag(projected)
        rows.append(0.5 * sign * value)
    table = jnp.stack(rows)
    return table[:, 0], table[:, 1], table[:, 2], table[:, 3]


@jax.jit
def polarisation_factors(parameters: ArrayLike) -> Array:
    r"""Polarisation weights :math:`N_k` of the ten interference terms.

    .. math::

        N = \left(A_0^2, A_\parallel^2, A_\perp^2, A_\perp A_\parallel,
        A_0A_\parallel, A_0A_\perp, A_S^2, A_SA_\parallel, A_SA_\perp, A_SA_0\right)

    with :math:`A_\parallel^2=1-A_0^2-A_\perp^2`. The result is only meaningful if
    :math:`A_\parallel^2\geq 0`.
    """
    parameters = jnp.asarray(parameters)
    a_0, a_perp, a_s = parameters[0], parameters[1], parameters[2]
    a_par = 1.0 - a_0 - a_perp
    return jnp.stack(
        [
            a_0,
            a_par,
            a_perp,
            jnp.sqrt(a_perp * a_par),
            jnp.sqrt(a_0 * a_par),
            jnp.sqrt(a_0 * a_perp),
            a_s,
            jnp.sqrt(a_s * a_par),
            jnp.sqrt(a_s * a_perp),
            jnp.sqrt(a_s * a_0),
        ]
    )


def parallel_fraction(parameters: ArrayLike) -> Array:
    r""":math:`A_\parallel^2 = 1 - A_0^2 - A_\perp^2`."""
    parameters = jnp.asarray(parameters)
    return 1.0 - parameters[0] - parameters[1]
