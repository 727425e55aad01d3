#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Boot policy applied to the Reset Configuration Word.

The word is always managed with the boot configuration taken from I2C. When
the boot media changes the whole word is reset, so no field of the previous
media layout survives under the new one. SD boot additionally gets the high
speed bus and the 50 ms wait period.
"""

import logging

from rcwtool.rcw.enums import BootMedia, BootSource, SdSpeed, WaitPeriod
from rcwtool.rcw.rcw import RcwView, ResetConfigWord

logger = logging.getLogger(__name__)


def plan(current: ResetConfigWord, target: BootMedia) -> tuple[ResetConfigWord, bool]:
    """Compute the word that boots from the target media.

    :param current: Word read from the EEPROM, left untouched.
    :param target: Requested boot media.
    :return: Tuple of the updated word, under the view of its boot media, and
        a flag telling whether it differs from the current one.
    """
    updated = current.copy().select_view(RcwView.RCON)
    changed = False

    if updated.get_field("src") != BootSource.I2C.tag:
        logger.info("Boot source set to I2C")
        updated.set_field("src", BootSource.I2C.tag)
        changed = True

    if updated.boot != target.tag:
        logger.info(f"Boot media {BootMedia.get_description(updated.boot)} -> {target.description}")
        updated.value = 0
        updated.set_field("boot", target.tag)
        updated.set_field("src", BootSource.I2C.tag)
        changed = True

    if updated.boot == BootMedia.SD.tag:
        updated.select_view(RcwView.SD)
        if updated.get_field("speed") == SdSpeed.DEFAULT.tag:
            updated.set_field("speed", SdSpeed.HIGH.tag)
            changed = True
        if updated.get_field("wait") != WaitPeriod.WAIT_50MS.tag:
            updated.set_field("wait", WaitPeriod.WAIT_50MS.tag)
            changed = True

    updated.select_view(updated.expected_view())
    logger.debug(f"Planned {updated!r}, changed: {changed}")
    return updated, changed
