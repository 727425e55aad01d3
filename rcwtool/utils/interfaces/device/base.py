#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2023,2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""USB-to-I2C bridge interface base class.

This module provides the abstract base class for bridge devices that carry I2C
transactions to the RCW EEPROM. The core RCW code only talks to this contract.
"""

import logging
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Optional, Type

from typing_extensions import Self

logger = logging.getLogger(__name__)

I2C_STATE_IDLE = 0x00


class I2CBridgeBase(ABC):
    """Abstract base class for USB-to-I2C bridge devices.

    The bridge is an exclusively owned resource: using it as a context manager
    opens it on entry and releases it on every exit path.
    """

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(
        self,
        exception_type: Optional[Type[Exception]] = None,
        exception_value: Optional[Exception] = None,
        traceback: Optional[TracebackType] = None,
    ) -> None:
        self.close()

    @property
    @abstractmethod
    def is_opened(self) -> bool:
        """Indicates whether the bridge is open.

        :return: True if the bridge is open, False otherwise.
        """

    @abstractmethod
    def open(self) -> None:
        """Open the bridge.

        :raises RCWConnectionError: If the bridge cannot be opened.
        """

    @abstractmethod
    def close(self) -> None:
        """Close the bridge and release the underlying handle."""

    @property
    @abstractmethod
    def timeout(self) -> int:
        """Get the timeout value for bridge communication.

        :return: Timeout value in milliseconds.
        """

    @timeout.setter
    @abstractmethod
    def timeout(self, value: int) -> None:
        """Set timeout value for bridge communication.

        :param value: Timeout value in milliseconds.
        """

    @abstractmethod
    def get_i2c_state(self) -> int:
        """Query the state of the bridge I2C engine.

        :return: Raw engine state, ``I2C_STATE_IDLE`` when no transfer is pending.
        :raises RCWTransportError: The bridge did not answer the query.
        """

    @abstractmethod
    def cancel_i2c(self) -> None:
        """Cancel the pending I2C transfer and release the bus.

        :raises RCWTransportError: The bridge refused the request.
        """

    @abstractmethod
    def set_i2c_divider(self, divider: int) -> None:
        """Configure the I2C clock divider.

        :param divider: Raw divider value, see ``i2c_divider``.
        :raises RCWTransportError: The bridge refused the divider.
        """

    @abstractmethod
    def i2c_write(self, address: int, data: bytes) -> None:
        """Write-only I2C transaction terminated by STOP.

        :param address: 7-bit slave address.
        :param data: Bytes to write.
        :raises RCWTransportError: The transfer failed, status kept in the exception.
        """

    @abstractmethod
    def i2c_write_read(self, address: int, data: bytes, length: int) -> bytes:
        """Write then read with a repeated START in between.

        :param address: 7-bit slave address.
        :param data: Bytes written before the read phase.
        :param length: Number of bytes to read back.
        :return: Bytes read from the slave.
        :raises RCWTransportError: The transfer failed, status kept in the exception.
        """

    @abstractmethod
    def __str__(self) -> str:
        """Return string containing information about the bridge."""
