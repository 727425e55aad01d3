#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2021-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""rcwtool utilities exception classes."""

from rcwtool.exceptions import RCWError


class RCWBitfieldNotFound(RCWError):
    """The requested bitfield is not defined by the selected RCW view."""


class RCWTimeoutError(RCWError, TimeoutError):
    """Operation did not finish within the time limit."""
