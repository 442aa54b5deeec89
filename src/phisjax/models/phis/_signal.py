# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


from functools import partial
from typing import Callable, Mapping, NamedTuple, Optional, Sequence, Union

import jax
import numpy as np
from jax import numpy as jnp
from jaxtyping import Array, ArrayLike

from ...constants import F0, GAMMA_D_OFFSET, N_TERMS
from ...logger import logger
from ...parameters import parameter_vector, PHIS_SIGNAL_PARAMETERS
from ...utils.convolution import (
    convolved_exp_hyperbolic,
    convolved_exp_trig,
    integrated_convolved_exp_hyperbolic,
    integrated_convolved_exp_trig,
)
from ...utils.tools import error_if, warn_if
from ..efficiency import CubicSpline
from ._angular import ANGULAR_INTEGRALS, angular_functions as default_angular_functions
from ._coefficients import (
    angular_time_coefficients,
    parallel_fraction,
    polarisation_factors,
)


AngularFunctions = Callable[[ArrayLike, ArrayLike, ArrayLike], Array]

_NAN_MESSAGE = "NaN signal density for " + ", ".join(
    f"{p.name}={{}}" for p in PHIS_SIGNAL_PARAMETERS
)


class PhisSignalDiagnostic(NamedTuple):
    parameters: dict[str, float]
    a: np.ndarray
    b: np.ndarray
    c: np.ndarray
    d: np.ndarray
    n: np.ndarray
    time: np.ndarray
    costheta_h: np.ndarray
    costheta_l: np.ndarray
    phi: np.ndarray
    value: np.ndarray


@partial(jax.jit, static_argnames=("cp",))
def _time_factors(
    parameters: Array, a: Array, b: Array, c: Array, d: Array, time: ArrayLike, cp: int
) -> Array:
    t = jnp.asarray(time)[..., None]
    half_dg_t = 0.5 * parameters[4] * t
    dm_t = parameters[5] * t
    envelope = F0 * jnp.exp(-(parameters[3] + GAMMA_D_OFFSET) * t)
    return envelope * (
        a * jnp.cosh(half_dg_t)
        + b * jnp.sinh(half_dg_t)
        + cp * (c * jnp.cos(dm_t) + d * jnp.sin(dm_t))
    )


@partial(jax.jit, static_argnames=("cp",))
def _convolved_time_factors(
    parameters: Array,
    a: Array,
    b: Array,
    c: Array,
    d: Array,
    time: ArrayLike,
    mu: ArrayLike,
    sigma: ArrayLike,
    cp: int,
) -> Array:
    t = jnp.asarray(time)[..., None]
    gamma = parameters[3] + GAMMA_D_OFFSET
    half_dg = 0.5 * parameters[4]
    dm = parameters[5]
    return F0 * (
        a * convolved_exp_hyperbolic(t, gamma, half_dg, mu, sigma, 1)
        + b * convolved_exp_hyperbolic(t, gamma, half_dg, mu, sigma, -1)
        + cp
        * (
            c * convolved_exp_trig(t, gamma, dm, mu, sigma, 1)
            + d * convolved_exp_trig(t, gamma, dm, mu, sigma, -1)
        )
    )


def _combine(parameters: Array, n: Array, time_factors: Array, angular: Array) -> Array:
    value = jnp.sum(angular * n * time_factors, axis=-1)
    value = jnp.where(parallel_fraction(parameters) < 0.0, 0.0, value)
    logger.log_if(jnp.isnan(value), "WARNING", _NAN_MESSAGE, *parameters)
    # NaN compares false and passes through
    return jnp.where(value < 0.0, 0.0, value)


@partial(jax.jit, static_argnames=("cp", "angular_functions"))
def _evaluate(
    parameters: Array,
    a: Array,
    b: Array,
    c: Array,
    d: Array,
    n: Array,
    time: ArrayLike,
    costheta_h: ArrayLike,
    costheta_l: ArrayLike,
    phi: ArrayLike,
    cp: int,
    angular_functions: AngularFunctions,
) -> Array:
    time_factors = _time_factors(parameters, a, b, c, d, time, cp)
    angular = angular_functions(costheta_h, costheta_l, phi)
    return _combine(parameters, n, time_factors, angular)


@partial(jax.jit, static_argnames=("cp", "angular_functions"))
def _evaluate_convolved(
    parameters: Array,
    a: Array,
    b: Array,
    c: Array,
    d: Array,
    n: Array,
    time: ArrayLike,
    costheta_h: ArrayLike,
    costheta_l: ArrayLike,
    phi: ArrayLike,
    mu: ArrayLike,
    sigma: ArrayLike,
    efficiency: Optional[CubicSpline],
    cp: int,
    angular_functions: AngularFunctions,
) -> Array:
    time_factors = _convolved_time_factors(parameters, a, b, c, d, time, mu, sigma, cp)
    angular = angular_functions(costheta_h, costheta_l, phi)
    value = _combine(parameters, n, time_factors, angular)
    if efficiency is not None:
        value = value * efficiency(time)
    return value


@partial(jax.jit, static_argnames=("cp",))
def _integrate(
    parameters: Array,
    a: Array,
    b: Array,
    c: Array,
    d: Array,
    n: Array,
    angular_integrals: Array,
    lower: ArrayLike,
    upper: ArrayLike,
    mu: ArrayLike,
    sigma: ArrayLike,
    efficiency: Optional[CubicSpline],
    cp: int,
) -> Array:
    gamma = parameters[3] + GAMMA_D_OFFSET
    half_dg = 0.5 * parameters[4]
    dm = parameters[5]
    if efficiency is None:
        hyperbolic = partial(integrated_convolved_exp_hyperbolic, gamma, half_dg)
        trig = partial(integrated_convolved_exp_trig, gamma, dm)
    else:
        hyperbolic = partial(
            efficiency.integrate_times_convolved_exp_hyperbolic, gamma, half_dg
        )
        trig = partial(efficiency.integrate_times_convolved_exp_trig, gamma, dm)
    cosh_integral = hyperbolic(mu, sigma, lower, upper, 1)
    sinh_integral = hyperbolic(mu, sigma, lower, upper, -1)
    cos_integral = trig(mu, sigma, lower, upper, 1)
    sin_integral = trig(mu, sigma, lower, upper, -1)
    per_term = (
        F0
        * n
        * (
            a * cosh_integral
            + b * sinh_integral
            + cp * (c * cos_integral + d * sin_integral)
        )
    )
    total = jnp.sum(angular_integrals * per_term)
    return jnp.where(parallel_fraction(parameters) < 0.0, 0.0, total)


class PhisSignal:
    r"""Signal density of :math:`B^0_s\to J/\psi K^+K^-` in decay time and the three
    helicity angles,

    .. math::

        p(t,\Omega) = \sum_{k=0}^{9} f_k(\Omega)\,N_k\,h_k(t),\qquad
        h_k(t) = f_0e^{-\Gamma_st}\left[a_k\cosh\frac{\Delta\Gamma t}{2}
        + b_k\sinh\frac{\Delta\Gamma t}{2}
        + \mathrm{CP}\,(c_k\cos\Delta Mt + d_k\sin\Delta Mt)\right],

    with :math:`\Gamma_s=\Delta\Gamma_{sd}+\Gamma_d`, :math:`f_0=3/(4\pi)` and
    :math:`\mathrm{CP}=-1` for an initial :math:`\bar{B}^0_s`.

    The coefficient tables are derived from the 17 parameters by :meth:`update`,
    which the constructor calls once. After :meth:`set_parameters` the tables are
    stale until :meth:`update` is called again; staleness is not detected, the
    owner is responsible for the call. Evaluation only reads immutable arrays, so it
    is safe from many threads as long as no :meth:`update` runs at the same time.

    .. code::

        >>> from phisjax.models import PhisSignal
        >>> from phisjax.parameters import NOMINAL_VALUES
        >>> pdf = PhisSignal(NOMINAL_VALUES)
        >>> float(pdf(1.0, 0.2, -0.3, 0.5)) > 0.0
        True
    """

    def __init__(
        self,
        parameters: Union[Mapping[str, ArrayLike], Sequence[ArrayLike], ArrayLike],
        *,
        b0sbar: bool = False,
        efficiency: Optional[CubicSpline] = None,
        resolution_mu: float = 0.0,
        resolution_sigma: float = 0.0,
        angular_functions: AngularFunctions = default_angular_functions,
        angular_integrals: ArrayLike = ANGULAR_INTEGRALS,
    ) -> None:
        """
        Parameters
        ----------
        parameters : Union[Mapping[str, ArrayLike], Sequence[ArrayLike], ArrayLike]
            the 17 physics parameters, by name or in canonical order
        b0sbar : bool, optional
            initial state is a :math:`\\bar{B}^0_s`, by default False
        efficiency : Optional[CubicSpline], optional
            decay-time efficiency, by default None
        resolution_mu : float, optional
            mean of the Gaussian time resolution, by default 0.0
        resolution_sigma : float, optional
            width of the Gaussian time resolution, by default 0.0
        angular_functions : AngularFunctions, optional
            provider of the ten angular functions, by default
            :func:`~phisjax.models.phis.angular_functions`
        angular_integrals : ArrayLike, optional
            integrals of the angular functions over the angular range, by default
            :data:`~phisjax.models.phis.ANGULAR_INTEGRALS`

        Raises
        ------
        ValueError
            If the parameters are malformed or the resolution width is negative.
        """
        warn_if(
            not jax.config.read("jax_enable_x64"),
            msg="jax_enable_x64 is not enabled; the convolution kernels lose precision "
            "in float32.",
        )
        error_if(
            resolution_sigma < 0.0,
            msg=f"resolution width must be non-negative, got {resolution_sigma}",
        )
        self._parameters = parameter_vector(parameters)
        self._b0sbar = bool(b0sbar)
        self._efficiency = efficiency
        self._resolution = (float(resolution_mu), float(resolution_sigma))
        self._angular_functions = angular_functions
        self._angular_integrals = jnp.asarray(angular_integrals, dtype=jnp.float64)

        zeros = jnp.zeros(N_TERMS)
        self._a = self._b = self._c = self._d = self._n = zeros
        self._stale = True
        self.update()

    @property
    def parameters(self) -> Array:
        return self._parameters

    @property
    def stale(self) -> bool:
        """Whether the parameters changed since the last :meth:`update`."""
        return self._stale

    @property
    def b0sbar(self) -> bool:
        return self._b0sbar

    @property
    def cp(self) -> int:
        return -1 if self._b0sbar else 1

    @property
    def efficiency(self) -> Optional[CubicSpline]:
        return self._efficiency

    @property
    def resolution(self) -> tuple[float, float]:
        """Mean and width of the Gaussian time resolution."""
        return self._resolution

    @property
    def A(self) -> Array:
        """Cosh coefficients :math:`a_k`."""
        return self._a

    @property
    def B(self) -> Array:
        """Sinh coefficients :math:`b_k`."""
        return self._b

    @property
    def C(self) -> Array:
        """Cos coefficients :math:`c_k`."""
        return self._c

    @property
    def D(self) -> Array:
        """Sin coefficients :math:`d_k`."""
        return self._d

    @property
    def N(self) -> Array:
        """Polarisation weights :math:`N_k`."""
        return self._n

    def set_parameters(
        self, parameters: Union[Mapping[str, ArrayLike], Sequence[ArrayLike], ArrayLike]
    ) -> None:
        """Replace the parameters. The tables stay as they are until :meth:`update`."""
        self._parameters = parameter_vector(parameters)
        self._stale = True

    def update(self) -> None:
        r"""Recompute the angular-time coefficients and the polarisation weights.

        The weights are only replaced if :math:`A_\parallel^2\geq 0`, otherwise the
        previous ones are kept and :meth:`evaluate` returns zero.
        """
        self._a, self._b, self._c, self._d = angular_time_coefficients(
            self._parameters
        )
        if bool(parallel_fraction(self._parameters) >= 0.0):
            self._n = polarisation_factors(self._parameters)
        else:
            logger.debug(
                "A_par^2 = {} is negative, keeping the previous polarisation weights",
                parallel_fraction(self._parameters),
            )
        self._stale = False

    def time_factors(self, time: ArrayLike) -> Array:
        """The ten time factors :math:`h_k(t)`, shape :code:`(..., 10)`."""
        return _time_factors(
            self._parameters, self._a, self._b, self._c, self._d, time, cp=self.cp
        )

    def evaluate(
        self,
        time: ArrayLike,
        costheta_h: ArrayLike,
        costheta_l: ArrayLike,
        phi: ArrayLike,
    ) -> Array:
        r"""Unnormalised density.

        Zero if :math:`A_\parallel^2<0`. Negative values from roundoff are clamped to
        zero. NaN is returned as is and reported through the logger, see
        :meth:`diagnose`.

        Parameters
        ----------
        time : ArrayLike
            decay time in ps
        costheta_h : ArrayLike
            cosine of the hadron helicity angle
        costheta_l : ArrayLike
            cosine of the lepton helicity angle
        phi : ArrayLike
            angle between the decay planes

        Returns
        -------
        Array
            density, broadcast over the inputs
        """
        return _evaluate(
            self._parameters,
            self._a,
            self._b,
            self._c,
            self._d,
            self._n,
            time,
            costheta_h,
            costheta_l,
            phi,
            cp=self.cp,
            angular_functions=self._angular_functions,
        )

    def __call__(
        self,
        time: ArrayLike,
        costheta_h: ArrayLike,
        costheta_l: ArrayLike,
        phi: ArrayLike,
    ) -> Array:
        return self.evaluate(time, costheta_h, costheta_l, phi)

    def evaluate_convolved(
        self,
        time: ArrayLike,
        costheta_h: ArrayLike,
        costheta_l: ArrayLike,
        phi: ArrayLike,
    ) -> Array:
        """Density with the time factors convolved with the Gaussian resolution and
        multiplied by the efficiency, if any. This is the integrand of
        :meth:`integrate`."""
        mu, sigma = self._resolution
        return _evaluate_convolved(
            self._parameters,
            self._a,
            self._b,
            self._c,
            self._d,
            self._n,
            time,
            costheta_h,
            costheta_l,
            phi,
            mu,
            sigma,
            self._efficiency,
            cp=self.cp,
            angular_functions=self._angular_functions,
        )

    def integrate(self, lower: ArrayLike, upper: ArrayLike) -> Array:
        r"""Analytic integral of :meth:`evaluate_convolved` over the decay-time window
        :math:`[L, U]` and the full angular range.

        .. math::

            \sum_k \Omega_k f_0 N_k\left[a_kH_+ + b_kH_- +
            \mathrm{CP}\,(c_kT_+ + d_kT_-)\right]

        where :math:`H_\pm` and :math:`T_\pm` are the integrated convolved
        hyperbolic and trigonometric profiles, times the efficiency if one is set.

        Parameters
        ----------
        lower : ArrayLike
            lower limit of the decay time window, finite
        upper : ArrayLike
            upper limit of the decay time window, finite

        Returns
        -------
        Array
            the integral, zero if :math:`A_\parallel^2<0`
        """
        mu, sigma = self._resolution
        return _integrate(
            self._parameters,
            self._a,
            self._b,
            self._c,
            self._d,
            self._n,
            self._angular_integrals,
            lower,
            upper,
            mu,
            sigma,
            self._efficiency,
            cp=self.cp,
        )

    def diagnose(
        self,
        time: ArrayLike,
        costheta_h: ArrayLike,
        costheta_l: ArrayLike,
        phi: ArrayLike,
    ) -> Optional[PhisSignalDiagnostic]:
        """Record of the parameters, tables and inputs if :meth:`evaluate` is not
        finite for the inputs, :code:`None` otherwise."""
        value = self.evaluate(time, costheta_h, costheta_l, phi)
        if bool(jnp.all(jnp.isfinite(value))):
            return None
        return PhisSignalDiagnostic(
            parameters={
                p.name: float(v) for p, v in zip(PHIS_SIGNAL_PARAMETERS, self._parameters)
            },
            a=np.asarray(self._a),
            b=np.asarray(self._b),
            c=np.asarray(self._c),
            d=np.asarray(self._d),
            n=np.asarray(self._n),
            time=np.asarray(time),
            costheta_h=np.asarray(costheta_h),
            costheta_l=np.asarray(costheta_l),
            phi=np.asarray(phi),
            value=np.asarray(value),
        )
