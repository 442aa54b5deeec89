# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


import chex
import numpy as np
import pytest
from absl.testing import parameterized
from jax import numpy as jnp
from numpy.testing import assert_allclose
from scipy import special

from phisjax.utils import erf, erfc, erfcx, exp_erfc, faddeeva


complex_points = [
    0.0 + 0.0j,
    0.3 + 0.1j,
    -1.2 + 0.7j,
    2.5 - 3.0j,
    -4.0 - 0.5j,
    6.0 + 0.01j,
    0.01 - 5.0j,
    10.0 + 10.0j,
    -0.2 - 0.2j,
    0.001j,
    25.0 + 1.0j,
]


class TestFaddeeva(parameterized.TestCase):
    @chex.variants(  # pyright: ignore
        with_jit=True,
        without_jit=True,
        with_device=True,
        without_device=True,
    )
    @parameterized.named_parameters([(str(i), z) for i, z in enumerate(complex_points)])
    def test_against_wofz(self, z):
        @self.variant  # pyright: ignore
        def faddeeva_fn(z):
            return faddeeva(z)

        assert_allclose(faddeeva_fn(z), special.wofz(z), rtol=1e-9, atol=0.0)

    @chex.variants(  # pyright: ignore
        with_jit=True,
        without_jit=True,
    )
    @parameterized.named_parameters([(str(i), z) for i, z in enumerate(complex_points)])
    def test_complex_erfc(self, z):
        @self.variant  # pyright: ignore
        def erfc_fn(z):
            return erfc(jnp.asarray(z, dtype=jnp.complex128))

        assert_allclose(erfc_fn(z), special.erfc(z), rtol=1e-9, atol=1e-300)

    @chex.variants(  # pyright: ignore
        with_jit=True,
        without_jit=True,
    )
    @parameterized.named_parameters(
        [
            (str(i), z)
            for i, z in enumerate(
                [0.0j, 0.1 + 0.2j, -0.3 - 0.4j, 0.49j, 0.7 + 0.1j, -1.5 + 0.5j, 2.0 - 1.0j]
            )
        ]
    )
    def test_complex_erf(self, z):
        @self.variant  # pyright: ignore
        def erf_fn(z):
            return erf(jnp.asarray(z, dtype=jnp.complex128))

        assert_allclose(erf_fn(z), special.erf(z), rtol=1e-9, atol=1e-15)


@pytest.mark.parametrize("x", [-20.0, -5.0, -0.5, 0.0, 0.5, 3.0, 12.0, 40.0])
def test_real_erfcx(x):
    value = erfcx(x)
    assert not jnp.iscomplexobj(value)
    assert_allclose(value, special.erfcx(x), rtol=1e-9)


@pytest.mark.parametrize("x", [-2.0, -0.3, 0.0, 0.4, 1.5])
def test_real_erf_erfc(x):
    assert_allclose(erf(x), special.erf(x), rtol=1e-12, atol=1e-15)
    assert_allclose(erfc(x), special.erfc(x), rtol=1e-12, atol=1e-15)


@pytest.mark.parametrize(
    "z, x",
    [
        (0.2, 0.5),
        (0.5, -1.0),
        (1.0, 2.0),
        (0.3 - 0.8j, 0.4),
        (0.3 + 0.8j, -0.7),
        (0.05 + 0.5j, 3.0),
    ],
)
def test_exp_erfc_matches_direct_formula(z, x):
    expected = np.exp(z * z - 2.0 * z * x) * special.erfc(z - x)
    assert_allclose(exp_erfc(z, x), expected, rtol=1e-9)


@pytest.mark.parametrize("z", [0.01, 0.5, 0.3 + 12.0j, 0.02 - 0.6j])
@pytest.mark.parametrize("x", [-200.0, -30.0, 30.0, 200.0])
def test_exp_erfc_is_finite_far_from_the_origin(z, x):
    assert jnp.all(jnp.isfinite(exp_erfc(z, x)))
