# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


from . import convolution as convolution, faddeeva as faddeeva, tools as tools
from .convolution import (
    convolved_exp as convolved_exp,
    convolved_exp_hyperbolic as convolved_exp_hyperbolic,
    convolved_exp_trig as convolved_exp_trig,
    integrated_convolved_exp as integrated_convolved_exp,
    integrated_convolved_exp_hyperbolic as integrated_convolved_exp_hyperbolic,
    integrated_convolved_exp_trig as integrated_convolved_exp_trig,
)
from .faddeeva import (
    erf as erf,
    erfc as erfc,
    erfcx as erfcx,
    exp_erfc as exp_erfc,
    faddeeva as faddeeva,
)
from .tools import error_if as error_if, warn_if as warn_if
