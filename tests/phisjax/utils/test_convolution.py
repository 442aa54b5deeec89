# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


from itertools import product

import chex
import numpy as np
import pytest
from absl.testing import parameterized
from jax import numpy as jnp
from numpy.testing import assert_allclose

from phisjax.utils import (
    convolved_exp,
    convolved_exp_hyperbolic,
    convolved_exp_trig,
    integrated_convolved_exp,
    integrated_convolved_exp_hyperbolic,
    integrated_convolved_exp_trig,
)


def gauss_legendre(fn, lower, upper, panels=96, order=32):
    """Composite Gauss-Legendre quadrature of a vectorised function."""
    nodes, weights = np.polynomial.legendre.leggauss(order)
    edges = np.linspace(lower, upper, panels + 1)
    half = 0.5 * np.diff(edges)[:, None]
    mid = 0.5 * (edges[1:] + edges[:-1])[:, None]
    t = mid + half * nodes[None, :]
    return float(np.sum(half * weights[None, :] * np.asarray(fn(t))))


# (a, b, mu, sigma) including b = 0, a = 0 and a = b = 0
kernel_parameters = [
    (0.66, 0.04, 0.0, 0.045),
    (0.66, 17.7, 0.0, 0.045),
    (1.0, 0.0, 0.1, 0.3),
    (0.0, 0.5, -0.05, 0.2),
    (0.0, 0.0, 0.0, 0.1),
    (2.0, 1.5, 0.2, 0.05),
]
windows = [(0.3, 15.0), (-1.0, 4.0)]
tags = [1, -1]


class TestIntegratedConvolution(parameterized.TestCase):
    @parameterized.named_parameters(
        [
            (f"{i}_{tag}", *params, *window, tag)
            for i, (params, window, tag) in enumerate(
                product(kernel_parameters, windows, tags)
            )
        ]
    )
    def test_hyperbolic_against_quadrature(self, a, b, mu, sigma, lower, upper, tag):
        expected = gauss_legendre(
            lambda t: convolved_exp_hyperbolic(t, a, b, mu, sigma, tag), lower, upper
        )
        value = integrated_convolved_exp_hyperbolic(a, b, mu, sigma, lower, upper, tag)
        assert jnp.isfinite(value)
        assert_allclose(value, expected, rtol=1e-6, atol=1e-12)

    @parameterized.named_parameters(
        [
            (f"{i}_{tag}", *params, *window, tag)
            for i, (params, window, tag) in enumerate(
                product(kernel_parameters, windows, tags)
            )
        ]
    )
    def test_trig_against_quadrature(self, a, b, mu, sigma, lower, upper, tag):
        expected = gauss_legendre(
            lambda t: convolved_exp_trig(t, a, b, mu, sigma, tag), lower, upper
        )
        value = integrated_convolved_exp_trig(a, b, mu, sigma, lower, upper, tag)
        assert jnp.isfinite(value)
        assert_allclose(value, expected, rtol=1e-6, atol=1e-12)


class TestUnsmearedLimit(parameterized.TestCase):
    @chex.variants(  # pyright: ignore
        with_jit=True,
        without_jit=True,
    )
    @parameterized.named_parameters(
        [
            (str(i), t, a, b)
            for i, (t, a, b) in enumerate(
                product([0.4, 1.3, 6.0], [0.66, 1.2], [0.0, 0.04, 17.7])
            )
        ]
    )
    def test_small_sigma(self, t, a, b):
        @self.variant  # pyright: ignore
        def profiles(t, a, b):
            return jnp.stack(
                [
                    convolved_exp_hyperbolic(t, a, b, 0.0, 1e-5, 1),
                    convolved_exp_hyperbolic(t, a, b, 0.0, 1e-5, -1),
                    convolved_exp_trig(t, a, b, 0.0, 1e-5, 1),
                    convolved_exp_trig(t, a, b, 0.0, 1e-5, -1),
                ]
            )

        expected = np.exp(-a * t) * np.array(
            [np.cosh(b * t), np.sinh(b * t), np.cos(b * t), np.sin(b * t)]
        )
        assert_allclose(profiles(t, a, b), expected, rtol=1e-6, atol=1e-10)


@pytest.mark.parametrize("t", [-0.5, 0.0, 0.7, 2.0])
def test_zero_sigma_is_exact(t):
    a, b, mu = 0.8, 0.3, 0.1
    tau = t - mu
    step = 1.0 if tau > 0 else (0.5 if tau == 0 else 0.0)
    assert_allclose(
        convolved_exp_hyperbolic(t, a, b, mu, 0.0, 1),
        step * np.exp(-a * tau) * np.cosh(b * tau),
        rtol=1e-12,
    )
    assert_allclose(
        convolved_exp_trig(t, a, b, mu, 0.0, -1),
        step * np.exp(-a * tau) * np.sin(b * tau),
        rtol=1e-12,
        atol=1e-300,
    )


def test_zero_sigma_integral():
    a, b, lower, upper = 0.7, 0.2, 0.3, 9.0
    expected = 0.5 * sum(
        (np.exp(-r * lower) - np.exp(-r * upper)) / r for r in (a - b, a + b)
    )
    assert_allclose(
        integrated_convolved_exp_hyperbolic(a, b, 0.0, 0.0, lower, upper, 1),
        expected,
        rtol=1e-12,
    )


def test_zero_sigma_integral_starts_at_mu():
    assert_allclose(integrated_convolved_exp(0.0, 0.5, 0.0, -2.0, 3.0), 2.5)
    assert_allclose(
        integrated_convolved_exp(1.0, 0.5, 0.0, -2.0, 3.0),
        1.0 - np.exp(-2.5),
        rtol=1e-12,
    )


@pytest.mark.parametrize("a", [0.0, 0.66, 3.0])
@pytest.mark.parametrize("sigma", [0.03, 0.3])
def test_real_limit_of_trig(a, sigma):
    lower, upper = -0.2, 8.0
    cos_value = integrated_convolved_exp_trig(a, 0.0, 0.0, sigma, lower, upper, 1)
    sin_value = integrated_convolved_exp_trig(a, 0.0, 0.0, sigma, lower, upper, -1)
    cosh_value = integrated_convolved_exp_hyperbolic(
        a, 0.0, 0.0, sigma, lower, upper, 1
    )
    assert jnp.isfinite(cos_value) and jnp.isfinite(sin_value)
    assert_allclose(cos_value, cosh_value, rtol=1e-9)
    assert_allclose(sin_value, 0.0, atol=1e-15)


@pytest.mark.parametrize("rate", [0.0, 1e-12, 1e-9 + 1e-9j, -1e-10])
def test_removable_singularity(rate):
    lower, upper, mu, sigma = -0.5, 3.0, 0.05, 0.1
    value = integrated_convolved_exp(rate, mu, sigma, lower, upper)
    expected = gauss_legendre(
        lambda t: jnp.real(convolved_exp(t, rate, mu, sigma)), lower, upper
    )
    assert jnp.all(jnp.isfinite(value))
    assert_allclose(jnp.real(value), expected, rtol=1e-7)


@pytest.mark.parametrize("sigma", [0.0, 0.045])
def test_empty_range_with_growing_rate(sigma):
    assert integrated_convolved_exp(0.66 - 17.7, 0.0, sigma, 400.0, 400.0) == 0.0
    assert (
        integrated_convolved_exp_hyperbolic(0.66, 17.7, 0.0, sigma, 400.0, 400.0, 1)
        == 0.0
    )


def test_zero_tag_is_rejected():
    with pytest.raises(ValueError):
        convolved_exp_hyperbolic(1.0, 0.7, 0.1, 0.0, 0.05, 0)
    with pytest.raises(ValueError):
        integrated_convolved_exp_trig(0.7, 17.0, 0.0, 0.05, 0.0, 10.0, 0)
