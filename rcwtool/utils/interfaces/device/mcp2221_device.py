#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2023-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Microchip MCP2221 USB-to-I2C bridge implementation.

The MCP2221 is a USB HID device. Every command is a single 64-byte output
report answered by a single 64-byte input report whose first byte echoes the
command code. The HID layer is provided by the libusbsio library.
"""

import logging
import time
from typing import Optional

import libusbsio
from typing_extensions import Self

from rcwtool.exceptions import (
    RCWConnectionError,
    RCWError,
    RCWLengthError,
    RCWTransportError,
    RCWValueError,
)
from rcwtool.utils.exceptions import RCWTimeoutError
from rcwtool.utils.interfaces.device.base import I2C_STATE_IDLE, I2CBridgeBase
from rcwtool.utils.misc import Timeout, check_range, split_data
from rcwtool.utils.rcw_enum import RcwEnum, RcwSoftEnum

logger = logging.getLogger(__name__)

MCP2221_DEFAULT_VID = 0x04D8
MCP2221_DEFAULT_PID = 0x00DD

MCP2221_REPORT_ID = 0x00
MCP2221_REPORT_SIZE = 64
MCP2221_MAX_TRANSFER = 60
MCP2221_MAX_LENGTH = 0xFFFF
MCP2221_CLOCK_HZ = 12_000_000

# Status/Set Parameters request and response fields
STATUS_CANCEL_REQUEST = 0x10
STATUS_SET_SPEED_REQUEST = 0x20
STATUS_ADDRESS_NACK_MASK = 0x40
RESPONSE_CANCEL_IDX = 2
RESPONSE_SPEED_IDX = 3
RESPONSE_STATE_IDX = 8
RESPONSE_ACK_IDX = 20

# I2C Get Data response fields
GET_DATA_ERROR = 0x41
GET_DATA_LENGTH_ERROR = 0x7F
GET_DATA_PAYLOAD_IDX = 4

POLL_PERIOD_S = 0.001


def i2c_divider(frequency: int) -> int:
    """Compute the MCP2221 I2C divider for a bus frequency.

    :param frequency: Bus frequency in Hz.
    :raises RCWValueError: The frequency cannot be produced by the bridge.
    :return: Divider value, 27 for 400 kHz and 117 for 100 kHz.
    """
    if frequency <= 0:
        raise RCWValueError(f"Invalid I2C frequency: {frequency}")
    divider = MCP2221_CLOCK_HZ // frequency - 3
    if not check_range(divider, 1, 0xFF):
        raise RCWValueError(f"I2C frequency {frequency} Hz is out of the bridge range")
    return divider


class Mcp2221Command(RcwEnum):
    """HID command codes of the MCP2221."""

    STATUS_SET_PARAMETERS = (0x10, "STATUS_SET_PARAMETERS", "Status/Set Parameters")
    I2C_WRITE_DATA = (0x90, "I2C_WRITE_DATA", "I2C Write Data")
    I2C_READ_DATA_REPEATED_START = (0x93, "I2C_READ_DATA_REPEATED_START", "I2C Read Data Repeated Start")
    I2C_WRITE_DATA_NO_STOP = (0x94, "I2C_WRITE_DATA_NO_STOP", "I2C Write Data No Stop")
    I2C_GET_DATA = (0x40, "I2C_GET_DATA", "I2C Get Data")


class Mcp2221Status(RcwSoftEnum):
    """Completion code returned in the second byte of a response."""

    SUCCESS = (0x00, "SUCCESS", "Command completed successfully")
    BUSY = (0x01, "BUSY", "I2C engine is busy, command not completed")
    GET_DATA_ERROR = (GET_DATA_ERROR, "GET_DATA_ERROR", "Error reading the I2C slave data")


class I2CState(RcwSoftEnum):
    """State of the MCP2221 I2C engine."""

    IDLE = (I2C_STATE_IDLE, "IDLE", "Idle")
    START_TIMEOUT = (0x12, "START_TIMEOUT", "START condition timeout")
    WRITE_ADDRESS_TIMEOUT = (0x23, "WRITE_ADDRESS_TIMEOUT", "Address write timeout")
    ADDRESS_NACK = (0x25, "ADDRESS_NACK", "Slave address not acknowledged")
    PARTIAL_DATA = (0x41, "PARTIAL_DATA", "Transfer in progress")
    WRITE_DATA_TIMEOUT = (0x44, "WRITE_DATA_TIMEOUT", "Data write timeout")
    WRITING_NO_STOP = (0x45, "WRITING_NO_STOP", "Write done, waiting for repeated START")
    READ_PARTIAL = (0x54, "READ_PARTIAL", "Read in progress")
    DATA_READY = (0x55, "DATA_READY", "Read data ready")
    STOP_TIMEOUT = (0x62, "STOP_TIMEOUT", "STOP condition timeout")


I2C_FAILED_STATES = (
    I2CState.START_TIMEOUT.tag,
    I2CState.WRITE_ADDRESS_TIMEOUT.tag,
    I2CState.ADDRESS_NACK.tag,
    I2CState.WRITE_DATA_TIMEOUT.tag,
    I2CState.STOP_TIMEOUT.tag,
)


class Mcp2221Device(I2CBridgeBase):
    """MCP2221 USB-to-I2C bridge accessed through libusbsio HID API."""

    def __init__(
        self,
        vid: Optional[int] = None,
        pid: Optional[int] = None,
        path: Optional[bytes] = None,
        serial_number: Optional[str] = None,
        vendor_name: Optional[str] = None,
        product_name: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> None:
        """Initialize the MCP2221 bridge object.

        The HID handle is created here but the device is opened only by ``open``.

        :param vid: USB Vendor ID of the bridge.
        :param pid: USB Product ID of the bridge.
        :param path: HID device path used to open the bridge.
        :param serial_number: Serial number string of the bridge.
        :param vendor_name: Vendor name string of the bridge.
        :param product_name: Product name string of the bridge.
        :param timeout: Communication timeout in milliseconds, defaults to 1000ms.
        """
        self._opened = False
        self.vid = vid or MCP2221_DEFAULT_VID
        self.pid = pid or MCP2221_DEFAULT_PID
        self.path = path or b""
        self.serial_number = serial_number or ""
        self.vendor_name = vendor_name or ""
        self.product_name = product_name or ""
        self._timeout = timeout or 1000
        libusbsio_logger = logging.getLogger("libusbsio")
        self._device: libusbsio.LIBUSBSIO.HID_DEVICE = libusbsio.usbsio(
            loglevel=libusbsio_logger.getEffectiveLevel()
        ).HIDAPI_DeviceCreate()

    @property
    def timeout(self) -> int:
        """Get timeout value for bridge communication.

        :return: Timeout value in milliseconds.
        """
        return self._timeout

    @timeout.setter
    def timeout(self, value: int) -> None:
        """Set timeout value for bridge communication.

        :param value: Timeout value in milliseconds.
        """
        self._timeout = value

    @property
    def is_opened(self) -> bool:
        """Indicates whether device is open.

        :return: True if device is open, False otherwise.
        """
        return self._opened

    def open(self) -> None:
        """Open the HID device.

        :raises RCWError: If device is already opened.
        :raises RCWConnectionError: If the device cannot be opened.
        """
        logger.debug(f"Opening the bridge: {str(self)}")
        if self.is_opened:
            # This would get HID_DEVICE into broken state
            raise RCWError("Can't open already opened device")
        try:
            self._device.Open(self.path)
            self._opened = True
        except Exception as error:
            raise RCWConnectionError(f"Unable to open device '{str(self)}'") from error

    def close(self) -> None:
        """Close the HID device, does nothing when the device is not opened.

        :raises RCWConnectionError: If the device cannot be closed.
        """
        logger.debug(f"Closing the bridge: {str(self)}")
        if self.is_opened:
            try:
                self._device.Close()
                self._opened = False
            except Exception as error:
                raise RCWConnectionError(f"Unable to close device '{str(self)}'") from error

    def _transfer(self, report: bytes) -> bytes:
        """Send one command report and return the response report.

        :param report: Command report without the HID report ID, zero padded to 64 bytes.
        :raises RCWConnectionError: Device is not opened or the HID transfer failed.
        :raises RCWTimeoutError: The bridge did not answer in time.
        :return: The 64-byte response report.
        """
        if not self.is_opened:
            raise RCWConnectionError("Device is not opened")
        packet = bytes([MCP2221_REPORT_ID]) + report.ljust(MCP2221_REPORT_SIZE, b"\x00")
        logger.debug(f"[MCP2221-OUT] {report.hex(' ')}")
        try:
            bytes_written = self._device.Write(packet, timeout_ms=self.timeout)
        except Exception as e:
            raise RCWConnectionError(str(e)) from e
        if bytes_written < MCP2221_REPORT_SIZE:
            raise RCWConnectionError(
                f"Invalid size of written bytes has been detected: {bytes_written} != {len(packet)}"
            )
        try:
            (data, result) = self._device.Read(MCP2221_REPORT_SIZE, timeout_ms=self.timeout)
        except Exception as e:
            raise RCWConnectionError(str(e)) from e
        if not data:
            logger.debug(f"Cannot read from HID device, error={result}")
            raise RCWTimeoutError("No response from the bridge")
        response = bytes(data)
        logger.debug(f"[MCP2221-IN] {response[:GET_DATA_PAYLOAD_IDX + 8].hex(' ')}")
        if len(response) < MCP2221_REPORT_SIZE or response[0] != report[0]:
            raise RCWConnectionError(f"Unexpected response to command 0x{report[0]:02X}")
        return response

    def _status(self, cancel: bool = False, divider: Optional[int] = None) -> bytes:
        report = bytearray(5)
        report[0] = Mcp2221Command.STATUS_SET_PARAMETERS.tag
        if cancel:
            report[2] = STATUS_CANCEL_REQUEST
        if divider is not None:
            report[3] = STATUS_SET_SPEED_REQUEST
            report[4] = divider
        return self._transfer(bytes(report))

    def get_i2c_state(self) -> int:
        """Query the state of the I2C engine.

        :return: Raw engine state, see ``I2CState``.
        """
        state = self._status()[RESPONSE_STATE_IDX]
        logger.debug(f"I2C engine state: {I2CState.get_label(state)}")
        return state

    def cancel_i2c(self) -> None:
        """Cancel the current I2C transfer.

        :raises RCWTransportError: The bridge did not accept the cancellation.
        """
        logger.info("Cancelling pending I2C transfer")
        response = self._status(cancel=True)
        # 0x10 marked for cancellation, 0x11 already idle
        if response[RESPONSE_CANCEL_IDX] not in (0x10, 0x11):
            raise RCWTransportError("I2C transfer cancel rejected", response[RESPONSE_CANCEL_IDX])
        time.sleep(POLL_PERIOD_S)

    def set_i2c_divider(self, divider: int) -> None:
        """Set the I2C clock divider.

        :param divider: Divider value, bus frequency is 12 MHz / (divider + 3).
        :raises RCWValueError: Divider does not fit one byte.
        :raises RCWTransportError: The bridge rejected the new speed.
        """
        if not check_range(divider, 1, 0xFF):
            raise RCWValueError(f"Invalid I2C divider: {divider}")
        response = self._status(divider=divider)
        if response[RESPONSE_SPEED_IDX] != STATUS_SET_SPEED_REQUEST:
            raise RCWTransportError(
                f"I2C divider {divider} rejected", response[RESPONSE_SPEED_IDX]
            )
        logger.debug(f"I2C divider set to {divider}")

    @staticmethod
    def _header(command: Mcp2221Command, address: int, length: int, read: bool) -> bytes:
        if not check_range(address, 0, 0x7F):
            raise RCWValueError(f"Invalid 7-bit I2C address: 0x{address:02X}")
        if not check_range(length, 0, MCP2221_MAX_LENGTH):
            raise RCWLengthError(f"Invalid I2C transfer length: {length}")
        return bytes([command.tag, length & 0xFF, (length >> 8) & 0xFF, (address << 1) | int(read)])

    def _wait_write_done(self, address: int, no_stop: bool, timeout: Timeout) -> None:
        while True:
            response = self._status()
            state = response[RESPONSE_STATE_IDX]
            if response[RESPONSE_ACK_IDX] & STATUS_ADDRESS_NACK_MASK:
                raise RCWTransportError(
                    f"I2C address 0x{address:02X} not acknowledged", I2CState.ADDRESS_NACK.tag
                )
            if state == I2C_STATE_IDLE:
                return
            if no_stop and state == I2CState.WRITING_NO_STOP.tag:
                return
            if state in I2C_FAILED_STATES:
                raise RCWTransportError(f"I2C write failed: {I2CState.get_label(state)}", state)
            if timeout.overflow():
                raise RCWTransportError("I2C write did not complete", state)
            time.sleep(POLL_PERIOD_S)

    def _write(self, command: Mcp2221Command, address: int, data: bytes) -> None:
        header = self._header(command, address, len(data), read=False)
        timeout = Timeout(self.timeout, "ms")
        for chunk in list(split_data(data, MCP2221_MAX_TRANSFER)) or [b""]:
            response = self._transfer(header + chunk)
            if response[1] != Mcp2221Status.SUCCESS.tag:
                raise RCWTransportError(
                    f"I2C write to 0x{address:02X} rejected: {Mcp2221Status.get_label(response[1])}",
                    response[2],
                )
            # the next chunk is accepted only once the engine drained the previous one
            while self.get_i2c_state() == I2CState.PARTIAL_DATA.tag:
                if timeout.overflow():
                    raise RCWTransportError(
                        "I2C write chunk not transmitted", I2CState.PARTIAL_DATA.tag
                    )
                time.sleep(POLL_PERIOD_S)
        self._wait_write_done(
            address, no_stop=command == Mcp2221Command.I2C_WRITE_DATA_NO_STOP, timeout=timeout
        )

    def _read(self, command: Mcp2221Command, address: int, length: int) -> bytes:
        response = self._transfer(self._header(command, address, length, read=True))
        if response[1] != Mcp2221Status.SUCCESS.tag:
            raise RCWTransportError(
                f"I2C read from 0x{address:02X} rejected: {Mcp2221Status.get_label(response[1])}",
                response[2],
            )
        data = bytearray()
        timeout = Timeout(self.timeout, "ms")
        while len(data) < length:
            response = self._transfer(bytes([Mcp2221Command.I2C_GET_DATA.tag]))
            state = response[2]
            not_ready = response[1] == GET_DATA_ERROR or response[3] == GET_DATA_LENGTH_ERROR
            if not_ready and state in I2C_FAILED_STATES:
                raise RCWTransportError(
                    f"I2C read from 0x{address:02X} failed: {I2CState.get_label(state)}", state
                )
            if not not_ready and response[3]:
                chunk_length = min(response[3], MCP2221_MAX_TRANSFER)
                data.extend(response[GET_DATA_PAYLOAD_IDX : GET_DATA_PAYLOAD_IDX + chunk_length])
                continue
            if timeout.overflow():
                raise RCWTransportError("I2C read data not available", state)
            time.sleep(POLL_PERIOD_S)
        return bytes(data[:length])

    def i2c_write(self, address: int, data: bytes) -> None:
        """Write data to the slave, the transaction ends with STOP.

        :param address: 7-bit slave address.
        :param data: Bytes to write.
        """
        logger.debug(f"I2C write 0x{address:02X}: {data.hex(' ')}")
        self._write(Mcp2221Command.I2C_WRITE_DATA, address, data)

    def i2c_write_read(self, address: int, data: bytes, length: int) -> bytes:
        """Write data, then read with a repeated START.

        A zero read length degrades to a plain write.

        :param address: 7-bit slave address.
        :param data: Bytes written before reading, usually the register offset.
        :param length: Number of bytes to read.
        :return: Bytes read from the slave.
        """
        if length == 0:
            self.i2c_write(address, data)
            return b""
        logger.debug(f"I2C write-read 0x{address:02X}: {data.hex(' ')}, {length} byte(s)")
        self._write(Mcp2221Command.I2C_WRITE_DATA_NO_STOP, address, data)
        result = self._read(Mcp2221Command.I2C_READ_DATA_REPEATED_START, address, length)
        logger.debug(f"I2C read 0x{address:02X}: {result.hex(' ')}")
        return result

    def __str__(self) -> str:
        return (
            f"{self.product_name or 'MCP2221'} (0x{self.vid:04X}, 0x{self.pid:04X}) "
            f"path={self.path!r} sn='{self.serial_number}'"
        )

    @classmethod
    def scan(
        cls,
        vid: int = MCP2221_DEFAULT_VID,
        pid: int = MCP2221_DEFAULT_PID,
        timeout: Optional[int] = None,
    ) -> list[Self]:
        """Enumerate connected bridges matching the USB identifiers.

        Devices are returned unopened, in the enumeration order of the HID layer.

        :param vid: USB Vendor ID to match.
        :param pid: USB Product ID to match.
        :param timeout: Communication timeout in milliseconds for the created devices.
        :return: List of matching bridge devices.
        """
        devices = []
        libusbsio_logger = logging.getLogger("libusbsio")
        sio = libusbsio.usbsio(loglevel=libusbsio_logger.getEffectiveLevel())
        for dev in sio.HIDAPI_Enumerate():
            if dev["vendor_id"] != vid or dev["product_id"] != pid:
                continue
            devices.append(
                cls(
                    vid=dev["vendor_id"],
                    pid=dev["product_id"],
                    path=dev["path"],
                    serial_number=dev["serial_number"],
                    vendor_name=dev["manufacturer_string"],
                    product_name=dev["product_string"],
                    timeout=timeout,
                )
            )
        logger.debug(f"Found {len(devices)} device(s) with 0x{vid:04X}:0x{pid:04X}")
        return devices
