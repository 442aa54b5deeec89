# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


#
r"""Closed-form convolutions of decaying exponentials with a Gaussian resolution.

A single decaying exponential :math:`\Theta(\tau)e^{-\gamma\tau}` smeared by a
Gaussian of mean :math:`\mu` and width :math:`\sigma` is

.. math::

    \frac{1}{2}e^{z^2-2zx}\operatorname{erfc}(z-x),\qquad
    z=\frac{\gamma\sigma}{\sqrt{2}},\quad x=\frac{t-\mu}{\sigma\sqrt{2}}.

The hyperbolic and trigonometric profiles of the signal density are the symmetric
and antisymmetric combinations of two such exponentials with rates
:math:`a\mp b` (real) or :math:`a\mp ib` (complex conjugate pair).
"""

from functools import partial

import jax
import numpy as np
from jax import numpy as jnp
from jaxtyping import Array, ArrayLike

from .faddeeva import erf, exp_erfc
from .tools import error_if


_SQRT2 = np.sqrt(2.0)
_TWO_OVER_SQRT_PI = 2.0 / np.sqrt(np.pi)
_SMALL_Z = 1e-8


def _check_tag(tag: int) -> None:
    error_if(
        tag == 0,
        msg="tag must be positive (cosh, cos) or negative (sinh, sin), got 0",
    )


@jax.jit
def convolved_exp(
    time: ArrayLike, rate: ArrayLike, mu: ArrayLike, sigma: ArrayLike
) -> Array:
    r"""Gaussian-convolved :math:`\Theta(t-\mu)e^{-\gamma(t-\mu)}`.

    For :math:`\sigma=0` the unsmeared function is returned, with the value
    :math:`1/2` at :math:`t=\mu` which is the limit of the smeared one.

    Parameters
    ----------
    time : ArrayLike
        decay time
    rate : ArrayLike
        decay rate :math:`\gamma`, real or complex
    mu : ArrayLike
        mean of the resolution
    sigma : ArrayLike
        width of the resolution

    Returns
    -------
    Array
        convolved value, complex if :code:`rate` is complex
    """
    smeared = sigma > 0.0
    s = jnp.where(smeared, sigma, 1.0)
    x = (time - mu) / (s * _SQRT2)
    z = rate * s / _SQRT2
    tau = time - mu
    after = tau > 0.0
    sharp = jnp.where(
        after,
        jnp.exp(-rate * jnp.where(after, tau, 0.0)),
        jnp.where(tau == 0.0, 0.5, 0.0),
    )
    return jnp.where(smeared, 0.5 * exp_erfc(z, x), sharp)


def _small_z_limit(x: Array) -> Array:
    return 2.0 * x * (1.0 + erf(x)) + _TWO_OVER_SQRT_PI * jnp.exp(-(x**2))


@jax.jit
def integrated_convolved_exp(
    rate: ArrayLike,
    mu: ArrayLike,
    sigma: ArrayLike,
    lower: ArrayLike,
    upper: ArrayLike,
) -> Array:
    r"""Integral of :func:`convolved_exp` over :math:`[L, U]`.

    .. math::

        \int_L^U \frac{1}{2}f(z,x(t))\,dt
        = \frac{\sigma}{2\sqrt{2}}\frac{1}{z}
        \Big[\operatorname{erf}(x)-f(z,x)\Big]_{x_L}^{x_U}

    The removable singularity at :math:`z=0` is replaced by its limit

    .. math::

        \lim_{z\to 0}\frac{1}{z}\Big[\operatorname{erf}(x)-f(z,x)\Big]
        = \Big[2x(1+\operatorname{erf}(x)) + \frac{2}{\sqrt{\pi}}e^{-x^2}\Big],

    and :math:`\sigma=0` by the integral of the unsmeared exponential. An empty
    range, :math:`L=U`, gives zero even where the boundary terms overflow.

    Parameters
    ----------
    rate : ArrayLike
        decay rate :math:`\gamma`, real or complex
    mu : ArrayLike
        mean of the resolution
    sigma : ArrayLike
        width of the resolution
    lower : ArrayLike
        lower limit, finite
    upper : ArrayLike
        upper limit, finite

    Returns
    -------
    Array
        integral, complex if :code:`rate` is complex
    """
    empty = upper == lower
    lower = jnp.where(empty, mu, lower)
    upper = jnp.where(empty, mu, upper)
    smeared = sigma > 0.0
    s = jnp.where(smeared, sigma, 1.0)
    x1 = (lower - mu) / (s * _SQRT2)
    x2 = (upper - mu) / (s * _SQRT2)
    z = rate * s / _SQRT2

    scale = jnp.maximum(1.0, jnp.maximum(jnp.abs(x1), jnp.abs(x2)))
    small = jnp.abs(z) * scale < _SMALL_Z
    z_safe = jnp.where(small, 1.0, z)
    ratio = (
        erf(x2) - exp_erfc(z_safe, x2) - erf(x1) + exp_erfc(z_safe, x1)
    ) / z_safe
    ratio = jnp.where(small, _small_z_limit(x2) - _small_z_limit(x1), ratio)
    smeared_value = s / (2.0 * _SQRT2) * ratio

    start = jnp.maximum(lower, mu) - mu
    stop = jnp.maximum(upper, mu) - mu
    zero_rate = rate == 0.0
    rate_safe = jnp.where(zero_rate, 1.0, rate)
    sharp_value = jnp.where(
        zero_rate,
        stop - start,
        (jnp.exp(-rate_safe * start) - jnp.exp(-rate_safe * stop)) / rate_safe,
    )
    return jnp.where(empty, 0.0, jnp.where(smeared, smeared_value, sharp_value))


@partial(jax.jit, static_argnames=("tag",))
def convolved_exp_hyperbolic(
    time: ArrayLike,
    a: ArrayLike,
    b: ArrayLike,
    mu: ArrayLike,
    sigma: ArrayLike,
    tag: int,
) -> Array:
    r"""Gaussian-convolved :math:`e^{-at}\cosh(bt)` (:code:`tag > 0`) or
    :math:`e^{-at}\sinh(bt)` (:code:`tag < 0`).

    .. math::

        \frac{1}{4}\Big[f(z_1,x) \pm f(z_2,x)\Big],\qquad
        z_1=\frac{(a-b)\sigma}{\sqrt{2}},\quad z_2=\frac{(a+b)\sigma}{\sqrt{2}}

    Parameters
    ----------
    time : ArrayLike
        decay time
    a : ArrayLike
        decay rate
    b : ArrayLike
        hyperbolic frequency
    mu : ArrayLike
        mean of the resolution
    sigma : ArrayLike
        width of the resolution, zero gives the unsmeared function
    tag : int
        sign selecting cosh or sinh

    Returns
    -------
    Array
        convolved value
    """
    _check_tag(tag)
    first = convolved_exp(time, a - b, mu, sigma)
    second = convolved_exp(time, a + b, mu, sigma)
    if tag > 0:
        return 0.5 * (first + second)
    return 0.5 * (first - second)


@partial(jax.jit, static_argnames=("tag",))
def convolved_exp_trig(
    time: ArrayLike,
    a: ArrayLike,
    b: ArrayLike,
    mu: ArrayLike,
    sigma: ArrayLike,
    tag: int,
) -> Array:
    r"""Gaussian-convolved :math:`e^{-at}\cos(bt)` (:code:`tag > 0`) or
    :math:`e^{-at}\sin(bt)` (:code:`tag < 0`).

    Same construction as :func:`convolved_exp_hyperbolic` with the complex pair
    :math:`z_{1,2}=(a\mp ib)\sigma/\sqrt{2}`; the cosine is
    :math:`\frac{1}{4}\operatorname{Re}(f_1+f_2)` and the sine
    :math:`\frac{1}{4}\operatorname{Re}((f_1-f_2)/i)`.
    """
    _check_tag(tag)
    first = convolved_exp(time, a - 1j * b, mu, sigma)
    second = convolved_exp(time, a + 1j * b, mu, sigma)
    if tag > 0:
        return jnp.real(0.5 * (first + second))
    return jnp.real(0.5 * (first - second) / 1j)


@partial(jax.jit, static_argnames=("tag",))
def integrated_convolved_exp_hyperbolic(
    a: ArrayLike,
    b: ArrayLike,
    mu: ArrayLike,
    sigma: ArrayLike,
    lower: ArrayLike,
    upper: ArrayLike,
    tag: int,
) -> Array:
    r"""Integral of :func:`convolved_exp_hyperbolic` over :math:`[L, U]`.

    Parameters
    ----------
    a : ArrayLike
        decay rate
    b : ArrayLike
        hyperbolic frequency
    mu : ArrayLike
        mean of the resolution
    sigma : ArrayLike
        width of the resolution
    lower : ArrayLike
        lower limit of the decay time window
    upper : ArrayLike
        upper limit of the decay time window
    tag : int
        sign selecting cosh or sinh

    Returns
    -------
    Array
        definite integral
    """
    _check_tag(tag)
    first = integrated_convolved_exp(a - b, mu, sigma, lower, upper)
    second = integrated_convolved_exp(a + b, mu, sigma, lower, upper)
    if tag > 0:
        return 0.5 * (first + second)
    return 0.5 * (first - second)


@partial(jax.jit, static_argnames=("tag",))
def integrated_convolved_exp_trig(
    a: ArrayLike,
    b: ArrayLike,
    mu: ArrayLike,
    sigma: ArrayLike,
    lower: ArrayLike,
    upper: ArrayLike,
    tag: int,
) -> Array:
    r"""Integral of :func:`convolved_exp_trig` over :math:`[L, U]`."""
    _check_tag(tag)
    first = integrated_convolved_exp(a - 1j * b, mu, sigma, lower, upper)
    second = integrated_convolved_exp(a + 1j * b, mu, sigma, lower, upper)
    if tag > 0:
        return jnp.real(0.5 * (first + second))
    return jnp.real(0.5 * (first - second) / 1j)
