# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


#
r"""Complex error function kernel.

All Gaussian-convolved exponentials of the signal density are written in terms of

.. math::

    f(z, x) = e^{z^2 - 2zx}\operatorname{erfc}(z - x),

which overflows and cancels if it is evaluated as written. This module evaluates it
through the Faddeeva function :math:`w(z)=e^{-z^2}\operatorname{erfc}(-iz)`, which is
bounded in the upper half plane.
"""

import jax
import numpy as np
from jax import numpy as jnp
from jax.scipy import special as jsp
from jaxtyping import Array, ArrayLike


def _weideman_coefficients(n_terms: int) -> tuple[float, np.ndarray]:
    r"""Polynomial coefficients of Weideman's rational approximation of :math:`w(z)`.

    J. A. C. Weideman, *Computation of the complex error function*, SIAM J. Numer.
    Anal. 31 (1994) 1497.
    """
    m = 2 * n_terms
    k = np.arange(-m + 1, m)
    scale = np.sqrt(n_terms / np.sqrt(2.0))
    t = scale * np.tan(k * np.pi / (2 * m))
    f = np.concatenate(([0.0], np.exp(-(t**2)) * (scale**2 + t**2)))
    a = np.real(np.fft.fft(np.fft.fftshift(f))) / (2 * m)
    return float(scale), np.flipud(a[1 : n_terms + 1])


_SCALE, _COEFFICIENTS = _weideman_coefficients(40)
_INV_SQRT_PI = 1.0 / np.sqrt(np.pi)
_TWO_OVER_SQRT_PI = 2.0 / np.sqrt(np.pi)
_ERF_SERIES_TERMS = 16
_ERF_SERIES_RADIUS = 0.5


def _faddeeva_upper(z: Array) -> Array:
    """Faddeeva function for :code:`Im(z) >= 0`."""
    denominator = _SCALE - 1j * z
    ratio = (_SCALE + 1j * z) / denominator
    polynomial = jnp.polyval(jnp.asarray(_COEFFICIENTS), ratio)
    return 2.0 * polynomial / denominator**2 + _INV_SQRT_PI / denominator


@jax.jit
def faddeeva(z: ArrayLike) -> Array:
    r"""Faddeeva function

    .. math::

        w(z) = e^{-z^2}\operatorname{erfc}(-iz).

    The lower half plane is reached through :math:`w(z) = 2e^{-z^2} - w(-z)`.

    Parameters
    ----------
    z : ArrayLike
        complex argument

    Returns
    -------
    Array
        complex value of :math:`w(z)`
    """
    z = jnp.asarray(z, dtype=jnp.complex128)
    upper = jnp.imag(z) >= 0.0
    reflected = jnp.where(upper, z, -z)
    w = _faddeeva_upper(reflected)
    # exp(-z^2) overflows deep in the lower half plane, keep it out of the upper branch
    z_low = jnp.where(upper, 0.0, z)
    return jnp.where(upper, w, 2.0 * jnp.exp(-(z_low**2)) - w)


@jax.jit
def erfcx(z: ArrayLike) -> Array:
    r"""Scaled complementary error function :math:`e^{z^2}\operatorname{erfc}(z)`.

    Real input gives real output.
    """
    z = jnp.asarray(z)
    w = faddeeva(1j * z)
    if jnp.iscomplexobj(z):
        return w
    return jnp.real(w)


@jax.jit
def erfc(z: ArrayLike) -> Array:
    r"""Complementary error function with analytic continuation to complex
    arguments."""
    z = jnp.asarray(z)
    if not jnp.iscomplexobj(z):
        return jsp.erfc(z)
    right = jnp.real(z) >= 0.0
    zr = jnp.where(right, z, -z)
    value = jnp.exp(-(zr**2)) * faddeeva(1j * zr)
    return jnp.where(right, value, 2.0 - value)


@jax.jit
def erf(z: ArrayLike) -> Array:
    r"""Error function with analytic continuation to complex arguments.

    Close to the origin :math:`1-\operatorname{erfc}(z)` cancels, so the Maclaurin
    series

    .. math::

        \operatorname{erf}(z) = \frac{2}{\sqrt{\pi}}\sum_{n\geq 0}
        \frac{(-1)^n z^{2n+1}}{n!(2n+1)}

    is used for :math:`|z|<1/2`.
    """
    z = jnp.asarray(z)
    if not jnp.iscomplexobj(z):
        return jsp.erf(z)
    small = jnp.abs(z) < _ERF_SERIES_RADIUS
    zs = jnp.where(small, z, 0.0)
    z2 = zs * zs
    term = zs
    series = jnp.zeros_like(zs)
    for n in range(_ERF_SERIES_TERMS):
        series = series + term / (2 * n + 1)
        term = -term * z2 / (n + 1)
    return jnp.where(small, _TWO_OVER_SQRT_PI * series, 1.0 - erfc(z))


@jax.jit
def exp_erfc(z: ArrayLike, x: ArrayLike) -> Array:
    r"""Stable evaluation of

    .. math::

        f(z, x) = e^{z^2 - 2zx}\operatorname{erfc}(z - x).

    With :math:`u=z-x` and :math:`z^2-2zx=u^2-x^2`,

    .. math::

        f(z, x) = \begin{cases}
            e^{-x^2}\operatorname{erfcx}(u)                 & \operatorname{Re}(u)\geq 0 \\
            2e^{z^2-2zx} - e^{-x^2}\operatorname{erfcx}(-u) & \operatorname{Re}(u)<0
        \end{cases}

    so that only bounded scaled error functions and decaying exponentials appear.

    Parameters
    ----------
    z : ArrayLike
        scaled decay rate, real or complex
    x : ArrayLike
        scaled time :math:`(t-\mu)/(\sigma\sqrt{2})`, real

    Returns
    -------
    Array
        value of :math:`f(z, x)`, complex if :code:`z` is complex
    """
    z = jnp.asarray(z)
    x = jnp.asarray(x)
    u = z - x
    positive = jnp.real(u) >= 0.0
    scaled = jnp.exp(-(x**2)) * erfcx(jnp.where(positive, u, -u))
    exponent = jnp.where(positive, 0.0, z * z - 2.0 * z * x)
    return jnp.where(positive, scaled, 2.0 * jnp.exp(exponent) - scaled)
