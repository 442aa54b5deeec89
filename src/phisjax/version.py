# Copyright 2023 The PhisJax Authors
# SPDX-License-Identifier: Apache-2.0


__all__ = ["__version__"]


__version__ = "0.1.0"
