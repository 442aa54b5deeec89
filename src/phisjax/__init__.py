# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


from . import (
    constants as constants,
    logger as logger,
    models as models,
    parameters as parameters,
    utils as utils,
)
from .version import __version__ as __version__
