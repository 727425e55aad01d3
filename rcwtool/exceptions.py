#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2020-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""rcwtool exception classes.

This module defines the exception hierarchy used across the library. Every
error raised on purpose by rcwtool derives from RCWError, so applications can
tell library failures apart from unexpected ones.
"""

from typing import Optional

#######################################################################
# # Reset Configuration Word tool Exceptions
#######################################################################


class RCWError(Exception):
    """rcwtool Base Exception.

    :cvar fmt: Default error message format template.
    """

    fmt = "RCW: {description}"

    def __init__(self, desc: Optional[str] = None) -> None:
        """Initialize the base rcwtool Exception.

        :param desc: Optional description of the exception.
        """
        super().__init__()
        self.description = desc

    def __str__(self) -> str:
        """Return string representation of the exception.

        :return: Formatted exception message as string.
        """
        return self.fmt.format(description=self.description or "Unknown Error")


class RCWKeyError(RCWError, KeyError):
    """rcwtool Key Error exception for missing or invalid keys."""


class RCWValueError(RCWError, ValueError):
    """rcwtool standard value error exception."""


class RCWTypeError(RCWError, TypeError):
    """rcwtool standard type error exception."""


class RCWLengthError(RCWError, ValueError):
    """Data does not have the length required by the operation.

    Raised for RCW payloads that are not exactly 4 bytes long and for EEPROM
    writes that exceed the device page.
    """


class RCWConnectionError(RCWError, ConnectionError):
    """Bridge device cannot be opened, closed or talked to over USB."""


class RCWTransportError(RCWError):
    """The bridge reported a failed I2C operation.

    The status byte returned by the bridge is kept verbatim in ``status``.

    :cvar fmt: Format string template for error message display.
    """

    fmt = "RCW: {description} (status: {status})"

    def __init__(self, desc: Optional[str] = None, status: Optional[int] = None) -> None:
        """Initialize the transport error.

        :param desc: Description of the failed operation.
        :param status: Raw status value reported by the bridge, if any.
        """
        super().__init__(desc)
        self.status = status

    def __str__(self) -> str:
        """Return string representation of the exception.

        :return: Formatted exception message including the bridge status.
        """
        status = "n/a" if self.status is None else f"0x{self.status:02X}"
        return self.fmt.format(description=self.description or "Unknown Error", status=status)


class RCWVerificationError(RCWError):
    """Data read back from the EEPROM differ from the data written.

    This is an integrity problem (wiring or EEPROM write failure), not a
    communication failure.
    """
