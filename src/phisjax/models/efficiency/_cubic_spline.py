# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


from math import comb

import equinox as eqx
import numpy as np
from jax import numpy as jnp
from jaxtyping import Array, ArrayLike

from ...constants import NEGATIVE_EFFICIENCY_FLOOR, SPLINE_SNAP_TOLERANCE
from ...utils.convolution import integrated_convolved_exp
from ...utils.faddeeva import erf, exp_erfc
from ...utils.tools import error_if, warn_if


_FACTORIALS = (1.0, 1.0, 2.0, 6.0, 24.0, 120.0)
_SQRT2 = np.sqrt(2.0)
_INV_SQRT_PI = 1.0 / np.sqrt(np.pi)
# Below these values of |z| max(1, |x|) the sums over K and M cancel
# catastrophically and the expansion around z = 0 is used instead, one per order.
_SMALL_Z = (5e-6, 1e-4, 6e-4, 2e-3)


def _gaussian_moments(x: Array, order: int) -> list[Array]:
    r"""Antiderivatives :math:`P_n(x)=\int x^n\frac{2}{\sqrt{\pi}}e^{-x^2}dx` for
    :math:`n=0,\dots,\text{order}`."""
    g = _INV_SQRT_PI * jnp.exp(-(x**2))
    moments = [erf(x), -g]
    for n in range(2, order + 1):
        moments.append(-(x ** (n - 1)) * g + 0.5 * (n - 1) * moments[n - 2])
    return moments[: order + 1]


def K(z: ArrayLike, n: int) -> Array:
    r"""Integration-by-parts weight

    .. math::

        K(z, n) = \frac{n!}{(2z)^{n+1}}.

    Parameters
    ----------
    z : ArrayLike
        scaled decay rate, real or complex, non-zero
    n : int
        order, :math:`0\leq n\leq 5`

    Returns
    -------
    Array
        value of :math:`K(z, n)`
    """
    return _FACTORIALS[n] / (2.0 * jnp.asarray(z)) ** (n + 1)


def M(x1: ArrayLike, x2: ArrayLike, z: ArrayLike, n: int) -> Array:
    r"""Boundary term

    .. math::

        M(x_1, x_2, z, n) = \Big[P_n(x) - x^n f(z, x)\Big]_{x_1}^{x_2},

    where :math:`P_n` is the antiderivative of :math:`x^n\frac{2}{\sqrt{\pi}}e^{-x^2}`
    and :math:`f(z,x)=e^{z^2-2zx}\operatorname{erfc}(z-x)`.

    Parameters
    ----------
    x1 : ArrayLike
        lower scaled time
    x2 : ArrayLike
        upper scaled time
    z : ArrayLike
        scaled decay rate, real or complex
    n : int
        order

    Returns
    -------
    Array
        value of :math:`M(x_1, x_2, z, n)`
    """
    x1 = jnp.asarray(x1)
    x2 = jnp.asarray(x2)

    def _boundary(x):
        return _gaussian_moments(x, n)[n] - x**n * exp_erfc(z, x)

    return _boundary(x2) - _boundary(x1)


def _moment_near_zero(x1: Array, x2: Array, z: Array, n: int) -> Array:
    r"""First order expansion of :math:`\int_{x_1}^{x_2}x^nf(z,x)dx` around
    :math:`z=0`."""

    def _antiderivative(x):
        p = _gaussian_moments(x, n + 2)
        one_plus_erf = 1.0 + p[0]
        a_n = (x ** (n + 1) * one_plus_erf - p[n + 1]) / (n + 1)
        a_next = (x ** (n + 2) * one_plus_erf - p[n + 2]) / (n + 2)
        return a_n - z * (2.0 * a_next + p[n])

    return _antiderivative(x2) - _antiderivative(x1)


def monomial_moment(x1: ArrayLike, x2: ArrayLike, z: ArrayLike, n: int) -> Array:
    r"""Moment :math:`J_n=\int_{x_1}^{x_2}x^nf(z,x)\,dx`.

    Repeated integration by parts of :math:`f=(E-\partial_xf)/(2z)`, with
    :math:`E=\frac{2}{\sqrt{\pi}}e^{-x^2}`, gives

    .. math::

        J_n = \sum_{j=0}^{n}\binom{n}{j}K(z, n-j)M(x_1, x_2, z, j).

    Parameters
    ----------
    x1 : ArrayLike
        lower scaled time
    x2 : ArrayLike
        upper scaled time
    z : ArrayLike
        scaled decay rate, real or complex
    n : int
        order, :math:`0\leq n\leq 3`

    Returns
    -------
    Array
        value of :math:`J_n`
    """
    x1 = jnp.asarray(x1)
    x2 = jnp.asarray(x2)
    z = jnp.asarray(z)
    scale = jnp.maximum(1.0, jnp.maximum(jnp.abs(x1), jnp.abs(x2)))
    small = jnp.abs(z) * scale < _SMALL_Z[n]
    z_safe = jnp.where(small, 1.0, z)
    exact = sum(
        comb(n, j) * K(z_safe, n - j) * M(x1, x2, z_safe, j) for j in range(n + 1)
    )
    return jnp.where(small, _moment_near_zero(x1, x2, z, n), exact)


def _exp_moment(start: Array, stop: Array, rate: Array, m: int) -> Array:
    r""":math:`\int_{\tau_0}^{\tau_1}\tau^me^{-\gamma\tau}d\tau`."""
    zero_rate = rate == 0.0
    r = jnp.where(zero_rate, 1.0, rate)

    def _antiderivative(tau):
        total = sum(
            _FACTORIALS[m] / _FACTORIALS[m - j] * tau ** (m - j) / r ** (j + 1)
            for j in range(m + 1)
        )
        return -jnp.exp(-r * tau) * total

    exact = _antiderivative(stop) - _antiderivative(start)
    limit = (stop ** (m + 1) - start ** (m + 1)) / (m + 1)
    return jnp.where(zero_rate, limit, exact)


class CubicSpline(eqx.Module):
    r"""Piecewise cubic decay-time efficiency built from a clamped cubic B-spline.

    The knots are padded with three copies of each end knot and the B-spline with
    control values :code:`spline_coefficients` is converted to one cubic polynomial
    per knot interval,

    .. math::

        \epsilon(t) = a_{0,i} + a_{1,i}t + a_{2,i}t^2 + a_{3,i}t^3,
        \qquad t_i\leq t<t_{i+1}.

    The first interval extends to :math:`-\infty`. The last one is replaced by the
    tangent of the previous interval at the last knot and extends to
    :math:`+\infty`. If that tangent falls, it is cut at its zero crossing and the
    efficiency is :data:`~phisjax.constants.NEGATIVE_EFFICIENCY_FLOOR` beyond it.

    .. code::

        >>> from phisjax.models import CubicSpline
        >>> spline = CubicSpline([0.0, 1.0, 2.0], [1.0, 1.0, 1.0, 1.0])
        >>> float(spline(0.5))
        1.0
    """

    knots: Array
    padded_knots: Array
    spline_coefficients: Array
    coefficients: Array
    negative_part: bool = eqx.field(static=True)
    x_negative: float = eqx.field(static=True)

    def __init__(self, knots: ArrayLike, spline_coefficients: ArrayLike) -> None:
        """
        Parameters
        ----------
        knots : ArrayLike
            strictly increasing break points, at least two
        spline_coefficients : ArrayLike
            B-spline control values, one more than the number of knots plus one

        Raises
        ------
        ValueError
            If the knots are not a strictly increasing vector of at least two
            values, or the number of coefficients is not :code:`len(knots) + 2`.
        """
        knots = np.asarray(knots, dtype=np.float64)
        spline_coefficients = np.asarray(spline_coefficients, dtype=np.float64)
        error_if(
            knots.ndim != 1 or knots.size < 2,
            msg=f"knots must be a vector of at least two values, got shape {knots.shape}",
        )
        error_if(
            not np.all(np.isfinite(knots)) or np.any(np.diff(knots) <= 0.0),
            msg="knots must be finite and strictly increasing",
        )
        error_if(
            spline_coefficients.shape != (knots.size + 2,),
            msg=f"expected {knots.size + 2} spline coefficients for {knots.size} "
            f"knots, got shape {spline_coefficients.shape}",
        )

        padded = np.concatenate(
            [np.full(3, knots[0]), knots, np.full(3, knots[-1])]
        )
        table = _polynomial_table(padded, spline_coefficients, knots.size)

        slope = table[1, -1]
        self.negative_part = bool(slope < 0.0)
        self.x_negative = float(-table[0, -1] / slope) if self.negative_part else np.inf
        warn_if(
            self.negative_part,
            msg=f"efficiency extrapolation crosses zero at t={self.x_negative}, "
            f"it is clamped to {NEGATIVE_EFFICIENCY_FLOOR} beyond",
        )

        self.knots = jnp.asarray(knots)
        self.padded_knots = jnp.asarray(padded)
        self.spline_coefficients = jnp.asarray(spline_coefficients)
        self.coefficients = jnp.asarray(table)

    @property
    def n_knots(self) -> int:
        return self.knots.shape[0]

    def evaluate(self, x: ArrayLike) -> Array:
        """Efficiency at decay time :code:`x`.

        At a knot the interval to its right is used.
        """
        x = jnp.asarray(x)
        index = jnp.searchsorted(self.knots, x, side="right") - 1
        index = jnp.clip(index, 0, self.n_knots - 1)
        c0, c1, c2, c3 = self.coefficients[:, index]
        value = c0 + x * (c1 + x * (c2 + x * c3))
        if self.negative_part:
            value = jnp.where(x > self.x_negative, NEGATIVE_EFFICIENCY_FLOOR, value)
        return value

    def __call__(self, x: ArrayLike) -> Array:
        return self.evaluate(x)

    def _integration_ranges(
        self, lower: ArrayLike, upper: ArrayLike
    ) -> tuple[Array, Array]:
        """Overlap of every interval with :math:`[L, U]`, empty ones have zero
        width."""
        inner = self.knots[1:]
        start = jnp.concatenate([jnp.array([-jnp.inf]), inner])
        stop = jnp.concatenate([inner, jnp.array([jnp.inf])])
        if self.negative_part:
            stop = jnp.minimum(stop, self.x_negative)
        lo = jnp.maximum(lower, start)
        hi = jnp.maximum(jnp.minimum(upper, stop), lo)
        return lo, hi

    def _integrate_times_exp(
        self,
        rate: ArrayLike,
        mu: ArrayLike,
        sigma: ArrayLike,
        lower: ArrayLike,
        upper: ArrayLike,
    ) -> Array:
        r""":math:`\int_L^U\epsilon(t)\,(\Theta e^{-\gamma\tau}\otimes G)(t)\,dt`
        for one, possibly complex, rate."""
        lo, hi = self._integration_ranges(lower, upper)
        # empty intervals are moved to mu, the boundary terms of a growing
        # exponential overflow far from it
        empty = hi <= lo
        lo = jnp.where(empty, mu, lo)
        hi = jnp.where(empty, mu, hi)
        smeared = sigma > 0.0
        sig = jnp.where(smeared, sigma, 1.0)
        s = sig * _SQRT2
        x_lo = (lo - mu) / s
        x_hi = (hi - mu) / s
        z = rate * sig / _SQRT2

        moments = [monomial_moment(x_lo, x_hi, z, n) for n in range(4)]
        pow_s = [s**n for n in range(4)]
        pow_m = [mu**n for n in range(4)]

        tau_lo = jnp.maximum(lo, mu) - mu
        tau_hi = jnp.maximum(hi, mu) - mu
        exp_moments = [_exp_moment(tau_lo, tau_hi, rate, m) for m in range(4)]

        total = 0.0
        for k in range(4):
            smeared_k = 0.5 * s * sum(
                comb(k, n) * pow_s[n] * pow_m[k - n] * moments[n]
                for n in range(k + 1)
            )
            sharp_k = sum(
                comb(k, m) * pow_m[k - m] * exp_moments[m] for m in range(k + 1)
            )
            value_k = jnp.where(smeared, smeared_k, sharp_k)
            total = total + jnp.sum(
                self.coefficients[k] * jnp.where(empty, 0.0, value_k)
            )

        if self.negative_part:
            clamped = upper > self.x_negative
            tail = integrated_convolved_exp(
                rate,
                mu,
                sigma,
                jnp.where(clamped, jnp.maximum(lower, self.x_negative), mu),
                jnp.where(clamped, upper, mu),
            )
            total = total + NEGATIVE_EFFICIENCY_FLOOR * jnp.where(clamped, tail, 0.0)
        return total

    def integrate_times_convolved_exp_hyperbolic(
        self,
        a: ArrayLike,
        b: ArrayLike,
        mu: ArrayLike,
        sigma: ArrayLike,
        lower: ArrayLike,
        upper: ArrayLike,
        tag: int,
    ) -> Array:
        r"""Integral over :math:`[L, U]` of the efficiency times the Gaussian-convolved
        :math:`e^{-at}\cosh(bt)` (:code:`tag > 0`) or :math:`e^{-at}\sinh(bt)`
        (:code:`tag < 0`).

        Parameters
        ----------
        a : ArrayLike
            decay rate
        b : ArrayLike
            hyperbolic frequency
        mu : ArrayLike
            mean of the resolution
        sigma : ArrayLike
            width of the resolution, zero gives the unsmeared function
        lower : ArrayLike
            lower limit of the decay time window, finite
        upper : ArrayLike
            upper limit of the decay time window, finite
        tag : int
            sign selecting cosh or sinh

        Returns
        -------
        Array
            definite integral
        """
        error_if(tag == 0, msg="tag must be positive (cosh) or negative (sinh), got 0")
        first = self._integrate_times_exp(a - b, mu, sigma, lower, upper)
        second = self._integrate_times_exp(a + b, mu, sigma, lower, upper)
        if tag > 0:
            return 0.5 * (first + second)
        return 0.5 * (first - second)

    def integrate_times_convolved_exp_trig(
        self,
        a: ArrayLike,
        b: ArrayLike,
        mu: ArrayLike,
        sigma: ArrayLike,
        lower: ArrayLike,
        upper: ArrayLike,
        tag: int,
    ) -> Array:
        r"""Integral over :math:`[L, U]` of the efficiency times the Gaussian-convolved
        :math:`e^{-at}\cos(bt)` (:code:`tag > 0`) or :math:`e^{-at}\sin(bt)`
        (:code:`tag < 0`)."""
        error_if(tag == 0, msg="tag must be positive (cos) or negative (sin), got 0")
        first = self._integrate_times_exp(a - 1j * b, mu, sigma, lower, upper)
        second = self._integrate_times_exp(a + 1j * b, mu, sigma, lower, upper)
        if tag > 0:
            return jnp.real(0.5 * (first + second))
        return jnp.real(0.5 * (first - second) / 1j)


def _polynomial_table(
    padded: np.ndarray, spline_coefficients: np.ndarray, n_knots: int
) -> np.ndarray:
    """Monomial coefficients, shape :code:`(4, n_knots)`, of the clamped cubic
    B-spline."""
    i = np.arange(n_knots - 1)
    u1, u2, u3, u4, u5, u6 = (padded[i + k] for k in range(1, 7))

    p = (u4 - u1) * (u4 - u2) * (u4 - u3)
    q = (u5 - u2) * (u4 - u2) * (u4 - u3)
    r = (u5 - u3) * (u5 - u2) * (u4 - u3)
    s = (u6 - u3) * (u5 - u3) * (u4 - u3)

    # basis[power, m, i]: coefficient of t**power in the m-th B-spline on interval i
    basis = np.array(
        [
            [
                u4**3 / p,
                -u1 * u4**2 / p - u2 * u4 * u5 / q - u3 * u5**2 / r,
                u2**2 * u4 / q + u2 * u3 * u5 / r + u3**2 * u6 / s,
                -(u3**3) / s,
            ],
            [
                -3.0 * u4**2 / p,
                (2.0 * u1 * u4 + u4**2) / p
                + (u2 * u4 + u2 * u5 + u4 * u5) / q
                + (2.0 * u3 * u5 + u5**2) / r,
                -(2.0 * u2 * u4 + u2**2) / q
                - (u2 * u3 + u2 * u5 + u3 * u5) / r
                - (2.0 * u3 * u6 + u3**2) / s,
                3.0 * u3**2 / s,
            ],
            [
                3.0 * u4 / p,
                -(2.0 * u4 + u1) / p - (u2 + u4 + u5) / q - (2.0 * u5 + u3) / r,
                (2.0 * u2 + u4) / q + (u2 + u5 + u3) / r + (2.0 * u3 + u6) / s,
                -3.0 * u3 / s,
            ],
            [
                -1.0 / p,
                1.0 / p + 1.0 / q + 1.0 / r,
                -1.0 / q - 1.0 / r - 1.0 / s,
                1.0 / s,
            ],
        ]
    )
    control = np.stack([spline_coefficients[i + m] for m in range(4)])

    table = np.zeros((4, n_knots))
    table[:, :-1] = np.einsum("pmi,mi->pi", basis, control)
    table[np.abs(table) < SPLINE_SNAP_TOLERANCE] = 0.0

    v = padded[n_knots + 2]
    c0, c1, c2, c3 = table[:, -2]
    slope = c1 + 2.0 * c2 * v + 3.0 * c3 * v**2
    table[0, -1] = c0 + c1 * v + c2 * v**2 + c3 * v**3 - slope * v
    table[1, -1] = slope
    table[2:, -1] = 0.0
    return table
