# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


from typing import Final

import jax
import numpy as np
from jax import numpy as jnp
from jaxtyping import Array, ArrayLike


_SQRT2 = np.sqrt(2.0)
_SQRT3 = np.sqrt(3.0)
_SQRT6 = np.sqrt(6.0)


@jax.jit
def angular_functions(
    costheta_h: ArrayLike, costheta_l: ArrayLike, phi: ArrayLike
) -> Array:
    r"""Angular functions :math:`f_k(\cos\theta_h,\cos\theta_l,\phi)` of the ten
    interference terms in the helicity basis.

    ====  =================================================================
    k     :math:`f_k`
    ====  =================================================================
    0     :math:`\cos^2\theta_h\sin^2\theta_l`
    1     :math:`\frac{1}{2}\sin^2\theta_h(1-\cos^2\phi\sin^2\theta_l)`
    2     :math:`\frac{1}{2}\sin^2\theta_h(1-\sin^2\phi\sin^2\theta_l)`
    3     :math:`\sin^2\theta_h\sin^2\theta_l\sin\phi\cos\phi`
    4     :math:`\sqrt{2}\sin\theta_h\cos\theta_h\sin\theta_l\cos\theta_l\cos\phi`
    5     :math:`-\sqrt{2}\sin\theta_h\cos\theta_h\sin\theta_l\cos\theta_l\sin\phi`
    6     :math:`\frac{1}{3}\sin^2\theta_l`
    7     :math:`\frac{2}{\sqrt{6}}\sin\theta_h\sin\theta_l\cos\theta_l\cos\phi`
    8     :math:`-\frac{2}{\sqrt{6}}\sin\theta_h\sin\theta_l\cos\theta_l\sin\phi`
    9     :math:`\frac{2}{\sqrt{3}}\cos\theta_h\sin^2\theta_l`
    ====  =================================================================

    Parameters
    ----------
    costheta_h : ArrayLike
        cosine of the helicity angle of the hadron pair
    costheta_l : ArrayLike
        cosine of the helicity angle of the lepton pair
    phi : ArrayLike
        angle between the two decay planes

    Returns
    -------
    Array
        array of shape :code:`(..., 10)`
    """
    ch = jnp.asarray(costheta_h)
    cl = jnp.asarray(costheta_l)
    sh = jnp.sqrt(jnp.clip(1.0 - ch**2, 0.0))
    sl = jnp.sqrt(jnp.clip(1.0 - cl**2, 0.0))
    cphi = jnp.cos(phi)
    sphi = jnp.sin(phi)
    sl2 = sl**2
    return jnp.stack(
        jnp.broadcast_arrays(
            ch**2 * sl2,
            0.5 * sh**2 * (1.0 - cphi**2 * sl2),
            0.5 * sh**2 * (1.0 - sphi**2 * sl2),
            sh**2 * sl2 * sphi * cphi,
            _SQRT2 * sh * ch * sl * cl * cphi,
            -_SQRT2 * sh * ch * sl * cl * sphi,
            sl2 / 3.0,
            2.0 * sh * sl * cl * cphi / _SQRT6,
            -2.0 * sh * sl * cl * sphi / _SQRT6,
            2.0 * ch * sl2 / _SQRT3,
        ),
        axis=-1,
    )


ANGULAR_INTEGRALS: Final[np.ndarray] = (16.0 * np.pi / 9.0) * np.array(
    [1.0, 1.0, 1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0]
)
r"""Integrals of :func:`angular_functions` over
:math:`\cos\theta_h,\cos\theta_l\in[-1,1]` and :math:`\phi\in[-\pi,\pi]`."""
