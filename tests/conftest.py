# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


import jax


# The convolution kernels lose all precision in float32.
jax.config.update("jax_enable_x64", True)
