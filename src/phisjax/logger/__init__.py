# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


#
"""A lightweight logging module built on top of Loguru_. Every call is routed through
:func:`jax.debug.callback`, so the same logger can be used inside jitted density
evaluations to report numerical anomalies.

.. _Loguru: https://github.com/Delgan/loguru
"""

from ._logger import enable_logging as enable_logging, logger as logger
