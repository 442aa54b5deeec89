# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


from ._cubic_spline import (
    CubicSpline as CubicSpline,
    K as K,
    M as M,
    monomial_moment as monomial_moment,
)
