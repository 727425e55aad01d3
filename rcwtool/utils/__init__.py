#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2020-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""rcwtool utilities package.

Shared helpers: labeled enumerations, value conversions, timeouts, file lookup
and the bridge device interfaces.
"""

from rcwtool.utils.exceptions import RCWBitfieldNotFound, RCWTimeoutError

__all__ = [
    "RCWBitfieldNotFound",
    "RCWTimeoutError",
]
