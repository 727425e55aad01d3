#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Value to label tables of the Reset Configuration Word fields.

The tables are soft enumerations: a reserved code read from the EEPROM never
raises, it is reported as "Unknown (<code>)".
"""

from typing import Optional

from rcwtool.utils.rcw_enum import RcwSoftEnum


class BootMedia(RcwSoftEnum):
    """Boot media selected by the ``boot`` field."""

    QSPI = (0, "qspi", "QSPI")
    SD = (2, "sd", "SD")
    MMC = (3, "mmc", "MMC")


class BootSource(RcwSoftEnum):
    """Source of the boot configuration, ``src`` field."""

    PARALLEL = (0, "parallel")
    I2C = (1, "I2C")


class PhyMode(RcwSoftEnum):
    """Ethernet PHY interface, ``phy`` field."""

    RMII = (0, "RMII")
    SGMII = (1, "SGMII")
    RGMII = (2, "RGMII")
    NO_PHY = (3, "No PHY")


class XoscMode(RcwSoftEnum):
    """Crystal oscillator mode, ``xosc`` field."""

    DIFFERENTIAL = (0, "differential/crystal")
    BYPASS = (1, "bypass")


class PllMode(RcwSoftEnum):
    """Boot clock, ``pll`` field."""

    PLL_AT_IRC = (0, "PLL@IRC")
    IRC_48MHZ = (1, "IRC@48MHz")


class SdSpeed(RcwSoftEnum):
    """SD card bus speed, ``speed`` field of the SD view."""

    DEFAULT = (0, "default")
    HIGH = (1, "high")


class WaitPeriod(RcwSoftEnum):
    """SD/MMC wait period, ``wait`` field; codes 5 and 6 are reserved."""

    WAIT_0MS = (0, "0ms")
    WAIT_5MS = (1, "5ms")
    WAIT_10MS = (2, "10ms")
    WAIT_20MS = (3, "20ms")
    WAIT_35MS = (4, "35ms")
    WAIT_50MS = (7, "50ms")


WAIT_PERIOD_MS = {0: 0, 1: 5, 2: 10, 3: 20, 4: 35, 7: 50}


def wait_period_to_ms(code: int) -> Optional[int]:
    """Convert the wait period code to milliseconds.

    :param code: Raw value of the ``wait`` field.
    :return: Wait period in milliseconds, None for reserved codes.
    """
    return WAIT_PERIOD_MS.get(code)
