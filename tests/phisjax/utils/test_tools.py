# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


import warnings

import pytest

from phisjax.utils import error_if, warn_if


@pytest.mark.parametrize("err", [ValueError, TypeError, RuntimeError])
def test_error_if_raises_requested_type(err):
    with pytest.raises(err, match="bad knots"):
        error_if(True, err, "bad knots")


def test_error_if_default_is_value_error():
    with pytest.raises(ValueError):
        error_if(True)


def test_error_if_passes_silently():
    error_if(False, msg="never raised")


def test_warn_if():
    with pytest.warns(UserWarning, match="clamped"):
        warn_if(True, msg="efficiency clamped")
    with pytest.warns(RuntimeWarning):
        warn_if(True, RuntimeWarning, "message")


def test_warn_if_passes_silently():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        warn_if(False, msg="never warned")
