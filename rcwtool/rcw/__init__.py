#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Reset Configuration Word model, EEPROM access and boot policy."""

from rcwtool.rcw.eeprom import DEFAULT_EEPROM_ADDRESS, At24Eeprom
from rcwtool.rcw.enums import BootMedia, BootSource, WaitPeriod, wait_period_to_ms
from rcwtool.rcw.manager import RcwManager, RcwStep, RcwUpdate
from rcwtool.rcw.policy import plan
from rcwtool.rcw.rcw import RcwView, ResetConfigWord, decode, encode
from rcwtool.rcw.report import format_rcw_report

__all__ = [
    "At24Eeprom",
    "BootMedia",
    "BootSource",
    "DEFAULT_EEPROM_ADDRESS",
    "RcwManager",
    "RcwStep",
    "RcwUpdate",
    "RcwView",
    "ResetConfigWord",
    "WaitPeriod",
    "decode",
    "encode",
    "format_rcw_report",
    "plan",
    "wait_period_to_ms",
]
