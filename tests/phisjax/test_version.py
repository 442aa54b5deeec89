# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


from importlib.metadata import version

import phisjax


def test_installed_version_matches_package():
    assert version("phisjax") == phisjax.__version__
