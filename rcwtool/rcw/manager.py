#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Read-modify-write transaction of the Reset Configuration Word.

The manager owns no resources; the bridge is opened and closed by the caller.
Every step runs inside the stage hook given to the manager, so the caller can
tell which stage failed.
"""

import contextlib
import logging
from dataclasses import dataclass
from typing import Callable, ContextManager, Optional

from rcwtool.exceptions import RCWVerificationError
from rcwtool.rcw.eeprom import DEFAULT_EEPROM_ADDRESS, RCW_OFFSET, At24Eeprom
from rcwtool.rcw.enums import BootMedia
from rcwtool.rcw.policy import plan
from rcwtool.rcw.rcw import RCW_SIZE, RcwView, ResetConfigWord
from rcwtool.utils.interfaces.device.base import I2C_STATE_IDLE, I2CBridgeBase
from rcwtool.utils.rcw_enum import RcwEnum

logger = logging.getLogger(__name__)

# 12 MHz / (27 + 3) = 400 kHz
DEFAULT_I2C_DIVIDER = 27


class RcwStep(RcwEnum):
    """Steps of the RCW transaction."""

    STATE = (0, "state", "Query the I2C engine state")
    DIVIDER = (1, "divider", "Set the I2C clock divider")
    READ = (2, "read", "Read the RCW")
    WRITE = (3, "write", "Write the RCW")
    READ_BACK = (4, "read-back", "Read the written RCW")
    COMPARE = (5, "compare", "Compare the written and read RCW")


StageHook = Callable[[RcwStep], ContextManager[None]]


def _no_stage(_step: RcwStep) -> ContextManager[None]:
    return contextlib.nullcontext()


@dataclass
class RcwUpdate:
    """Outcome of a boot media update."""

    before: ResetConfigWord
    planned: ResetConfigWord
    changed: bool
    after: Optional[ResetConfigWord] = None

    @property
    def written(self) -> bool:
        """The planned word was written and verified."""
        return self.after is not None


class RcwManager:
    """Reads, updates and verifies the RCW of one board."""

    def __init__(
        self,
        bridge: I2CBridgeBase,
        address: int = DEFAULT_EEPROM_ADDRESS,
        divider: int = DEFAULT_I2C_DIVIDER,
        stage: Optional[StageHook] = None,
    ) -> None:
        """Initialize the manager.

        :param bridge: Opened bridge.
        :param address: 7-bit I2C address of the EEPROM.
        :param divider: I2C clock divider configured before the first transfer.
        :param stage: Context manager factory wrapped around every step.
        """
        self.bridge = bridge
        self.divider = divider
        self.eeprom = At24Eeprom(bridge, address)
        self.stage = stage or _no_stage
        self.prepared = False

    def check_bus_state(self) -> int:
        """Query the bridge I2C engine and cancel a pending transfer.

        :return: Engine state found before the cancellation.
        """
        with self.stage(RcwStep.STATE):
            state = self.bridge.get_i2c_state()
            if state != I2C_STATE_IDLE:
                logger.warning(f"I2C engine is not idle (0x{state:02X}), cancelling the transfer")
                self.bridge.cancel_i2c()
        return state

    def configure_speed(self) -> None:
        """Set the I2C clock divider."""
        with self.stage(RcwStep.DIVIDER):
            self.bridge.set_i2c_divider(self.divider)

    def prepare(self) -> None:
        """Bring the bus to a known state, required before the first read."""
        self.check_bus_state()
        self.configure_speed()
        self.prepared = True

    def read_rcw(self) -> ResetConfigWord:
        """Read the word and view it according to its boot media.

        :return: Current word.
        """
        with self.stage(RcwStep.READ):
            rcw = self.eeprom.read_rcw(RcwView.RCON)
        rcw.select_view(rcw.expected_view())
        logger.info(f"Read {rcw}")
        return rcw

    def write_rcw(self, rcw: ResetConfigWord) -> bytes:
        """Write the word.

        :param rcw: Word to write.
        :return: Written bytes.
        """
        logger.info(f"Writing {rcw}")
        with self.stage(RcwStep.WRITE):
            return self.eeprom.write_rcw(rcw)

    def read_back(self) -> bytes:
        """Read the raw RCW bytes for verification."""
        with self.stage(RcwStep.READ_BACK):
            return self.eeprom.read(RCW_OFFSET, RCW_SIZE)

    @staticmethod
    def compare(expected: bytes, actual: bytes) -> None:
        """Compare written and re-read bytes.

        :param expected: Bytes written to the EEPROM.
        :param actual: Bytes read back.
        :raises RCWVerificationError: The bytes differ.
        """
        if expected != actual:
            raise RCWVerificationError(f"written {expected.hex(' ')}, read {actual.hex(' ')}")

    def verify_rcw(self, expected: bytes) -> ResetConfigWord:
        """Re-read the word and compare it to the written bytes.

        :param expected: Bytes written to the EEPROM.
        :return: Re-read word viewed according to its boot media.
        """
        actual = self.read_back()
        with self.stage(RcwStep.COMPARE):
            self.compare(expected, actual)
        rcw = ResetConfigWord.parse(actual)
        return rcw.select_view(rcw.expected_view())

    def update_boot_media(self, target: BootMedia, dry_run: bool = False) -> RcwUpdate:
        """Apply the boot policy, writing and verifying the word when it changes.

        The bus is prepared first unless ``prepare`` was already called.

        :param target: Requested boot media.
        :param dry_run: Compute the change without writing it.
        :return: Update outcome.
        """
        if not self.prepared:
            self.prepare()
        before = self.read_rcw()
        planned, changed = plan(before, target)
        update = RcwUpdate(before=before, planned=planned, changed=changed)
        if not changed:
            logger.info("RCW already matches the requested boot media")
            return update
        if dry_run:
            logger.info("Dry run, RCW not written")
            return update
        written = self.write_rcw(planned)
        update.after = self.verify_rcw(written)
        return update
