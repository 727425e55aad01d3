#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Offset addressed access to the AT24C01 boot EEPROM.

The EEPROM auto increments its address pointer, so a read is one offset byte
written followed by the data read after a repeated START, and a write is the
offset byte followed by the data. Writes never cross a page.
"""

import logging
import time

from rcwtool.exceptions import RCWLengthError, RCWValueError
from rcwtool.rcw.rcw import RCW_SIZE, RcwView, ResetConfigWord
from rcwtool.utils.interfaces.device.base import I2CBridgeBase
from rcwtool.utils.misc import check_range

logger = logging.getLogger(__name__)

DEFAULT_EEPROM_ADDRESS = 0x50
AT24C01_SIZE = 128
AT24C01_PAGE_SIZE = 8
AT24C01_WRITE_CYCLE_MS = 5

RCW_OFFSET = 0


class At24Eeprom:
    """AT24C01 EEPROM behind an I2C bridge."""

    def __init__(
        self,
        bridge: I2CBridgeBase,
        address: int = DEFAULT_EEPROM_ADDRESS,
        size: int = AT24C01_SIZE,
        page_size: int = AT24C01_PAGE_SIZE,
        write_cycle_ms: int = AT24C01_WRITE_CYCLE_MS,
    ) -> None:
        """Initialize the EEPROM object.

        :param bridge: Opened bridge carrying the I2C transactions.
        :param address: 7-bit I2C address of the EEPROM.
        :param size: Size of the EEPROM in bytes.
        :param page_size: Write page size in bytes.
        :param write_cycle_ms: Internal write cycle time after each write.
        :raises RCWValueError: Invalid I2C address.
        """
        if not check_range(address, 0, 0x7F):
            raise RCWValueError(f"Illegal address: 0x{address:02x}")
        self.bridge = bridge
        self.address = address
        self.size = size
        self.page_size = page_size
        self.write_cycle_ms = write_cycle_ms

    def _check_span(self, offset: int, length: int) -> None:
        if not check_range(offset, 0, self.size - 1):
            raise RCWValueError(f"Offset 0x{offset:02X} is out of the EEPROM (size {self.size})")
        if offset + length > self.size:
            raise RCWLengthError(
                f"{length} byte(s) at offset 0x{offset:02X} exceed the EEPROM size {self.size}"
            )

    def read(self, offset: int, length: int) -> bytes:
        """Read data from the EEPROM.

        :param offset: Start offset.
        :param length: Number of bytes to read.
        :return: Read data.
        """
        self._check_span(offset, length)
        data = self.bridge.i2c_write_read(self.address, bytes([offset]), length)
        if len(data) != length:
            raise RCWLengthError(f"Expected {length} byte(s) from the EEPROM, got {len(data)}")
        logger.debug(f"EEPROM 0x{self.address:02X} read @0x{offset:02X}: {data.hex(' ')}")
        return data

    def write(self, offset: int, data: bytes) -> None:
        """Write data to the EEPROM and wait for the write cycle.

        :param offset: Start offset.
        :param data: Data to write, at most one page not crossing the page boundary.
        :raises RCWLengthError: The data do not fit the page.
        """
        self._check_span(offset, len(data))
        page_end = (offset // self.page_size + 1) * self.page_size
        if len(data) > self.page_size or offset + len(data) > page_end:
            raise RCWLengthError(
                f"{len(data)} byte(s) at offset 0x{offset:02X} cross the {self.page_size}-byte page"
            )
        logger.debug(f"EEPROM 0x{self.address:02X} write @0x{offset:02X}: {data.hex(' ')}")
        self.bridge.i2c_write(self.address, bytes([offset]) + data)
        time.sleep(self.write_cycle_ms / 1000)

    def read_rcw(self, view: RcwView = RcwView.RCON) -> ResetConfigWord:
        """Read the Reset Configuration Word.

        :param view: View of the returned word.
        :return: Decoded word.
        """
        return ResetConfigWord.parse(self.read(RCW_OFFSET, RCW_SIZE), view)

    def write_rcw(self, rcw: ResetConfigWord) -> bytes:
        """Write the Reset Configuration Word.

        :param rcw: Word to write.
        :return: Written bytes.
        """
        data = rcw.export()
        self.write(RCW_OFFSET, data)
        return data
