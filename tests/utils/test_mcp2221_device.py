#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""MCP2221 USB-to-I2C bridge tests.

The libusbsio HID layer is replaced by a model of the MCP2221 firmware
answering the command reports with an EEPROM on the bus.
"""

from typing import Iterator
from unittest.mock import MagicMock, patch

import pytest

from rcwtool.exceptions import (
    RCWConnectionError,
    RCWError,
    RCWTransportError,
    RCWValueError,
)
from rcwtool.utils.exceptions import RCWTimeoutError
from rcwtool.utils.interfaces.device.mcp2221_device import (
    I2CState,
    Mcp2221Device,
    i2c_divider,
)

LIBUSBSIO = "rcwtool.utils.interfaces.device.mcp2221_device.libusbsio"


class FakeMcp2221:
    """Model of the MCP2221 HID command interface with one EEPROM on the bus.

    ``busy_polls`` is the number of status queries reporting a partially sent
    chunk after every write report. ``empty_get_data`` is the number of Get Data
    requests answered with success but no data.
    """

    def __init__(self, memory: bytes, address: int = 0x50, state: int = 0x00) -> None:
        self.memory = bytearray(memory.ljust(128, b"\xff"))
        self.address = address
        self.state = state
        self.divider = 0
        self.nack = False
        self.pointer = 0
        self.received = bytearray()
        self.pending = b""
        self.reports: list[bytes] = []
        self.reject_speed = False
        self.busy_polls = 0
        self.polls_left = 0
        self.next_state = 0x00
        self.empty_get_data = 0

    def write(self, data: bytes, timeout_ms: int = 0) -> int:
        assert data[0] == 0x00
        assert len(data) == 65
        self.reports.append(bytes(data[1:]))
        return len(data)

    def _transaction(self, report: bytes) -> None:
        command = report[0]
        length = report[1] | report[2] << 8
        address = report[3] >> 1
        if address != self.address:
            self.nack = True
            self.state = I2CState.ADDRESS_NACK.tag
            return
        self.nack = False
        if command in (0x90, 0x94):
            self.received += report[4 : 4 + min(length - len(self.received), 60)]
            self.next_state = 0x00
            if len(self.received) == length:
                payload, self.received = bytes(self.received), bytearray()
                self.pointer = payload[0]
                if command == 0x90:
                    self.memory[self.pointer : self.pointer + length - 1] = payload[1:]
                else:
                    self.next_state = I2CState.WRITING_NO_STOP.tag
            self.polls_left = self.busy_polls
            self.state = I2CState.PARTIAL_DATA.tag if self.busy_polls else self.next_state
        elif command == 0x93:
            self.pending = bytes(self.memory[self.pointer : self.pointer + length])
            self.state = I2CState.DATA_READY.tag

    def read(self, length: int, timeout_ms: int = 0) -> tuple[bytes, int]:
        report = self.reports[-1]
        response = bytearray(64)
        response[0] = report[0]
        if report[0] == 0x10:
            if report[2] == 0x10:
                response[2] = 0x10
                self.state = 0x00
                self.nack = False
            if report[3] == 0x20:
                response[3] = 0x21 if self.reject_speed else 0x20
                self.divider = report[4]
            response[8] = self.state
            response[20] = 0x40 if self.nack else 0x00
            if self.state == I2CState.PARTIAL_DATA.tag:
                self.polls_left -= 1
                if self.polls_left <= 0:
                    self.state = self.next_state
        elif report[0] in (0x90, 0x93, 0x94):
            self._transaction(report)
        elif report[0] == 0x40:
            if self.empty_get_data:
                self.empty_get_data -= 1
                response[2] = self.state
                return bytes(response), len(response)
            chunk, self.pending = self.pending[:60], self.pending[60:]
            response[3] = len(chunk)
            response[4 : 4 + len(chunk)] = chunk
            if not self.pending:
                self.state = 0x00
        return bytes(response), len(response)


@pytest.fixture
def sio() -> Iterator[MagicMock]:
    """Patched libusbsio library object."""
    with patch(LIBUSBSIO) as libusbsio_mock:
        yield libusbsio_mock.usbsio.return_value


@pytest.fixture
def chip(sio: MagicMock) -> FakeMcp2221:
    fake = FakeMcp2221(bytes.fromhex("40000000"))
    hid = sio.HIDAPI_DeviceCreate.return_value
    hid.Write.side_effect = fake.write
    hid.Read.side_effect = fake.read
    return fake


@pytest.fixture
def device(chip: FakeMcp2221) -> Iterator[Mcp2221Device]:
    with Mcp2221Device(path=b"/dev/hidraw0") as bridge:
        yield bridge


@pytest.mark.parametrize(
    "frequency, divider", [(400_000, 27), (100_000, 117), (47_000, 252)]
)
def test_i2c_divider(frequency: int, divider: int) -> None:
    assert i2c_divider(frequency) == divider


@pytest.mark.parametrize("frequency", [0, -100, 1_000, 10_000_000])
def test_i2c_divider_out_of_range(frequency: int) -> None:
    with pytest.raises(RCWValueError):
        i2c_divider(frequency)


def test_scan(sio: MagicMock) -> None:
    """Test only bridges with matching USB identifiers are listed."""
    sio.HIDAPI_Enumerate.return_value = [
        {
            "vendor_id": 0x04D8,
            "product_id": 0x00DD,
            "path": b"/dev/hidraw1",
            "serial_number": "0001",
            "manufacturer_string": "Microchip Technology Inc.",
            "product_string": "MCP2221 USB-I2C/UART Combo",
        },
        {
            "vendor_id": 0x1FC9,
            "product_id": 0x0143,
            "path": b"/dev/hidraw2",
            "serial_number": "ABCD",
            "manufacturer_string": "NXP",
            "product_string": "LPC-Link2",
        },
        {
            "vendor_id": 0x04D8,
            "product_id": 0x00DD,
            "path": b"/dev/hidraw3",
            "serial_number": "0002",
            "manufacturer_string": "Microchip Technology Inc.",
            "product_string": "",
        },
    ]
    devices = Mcp2221Device.scan()
    assert [device.path for device in devices] == [b"/dev/hidraw1", b"/dev/hidraw3"]
    assert devices[0].serial_number == "0001"
    assert str(devices[1]) == "MCP2221 (0x04D8, 0x00DD) path=b'/dev/hidraw3' sn='0002'"
    assert not devices[0].is_opened

    assert len(Mcp2221Device.scan(vid=0x1FC9, pid=0x0143)) == 1
    assert Mcp2221Device.scan(vid=0x1234, pid=0x5678) == []


def test_open_close(sio: MagicMock) -> None:
    hid = sio.HIDAPI_DeviceCreate.return_value
    device = Mcp2221Device(path=b"/dev/hidraw0")
    device.open()
    hid.Open.assert_called_once_with(b"/dev/hidraw0")
    assert device.is_opened
    with pytest.raises(RCWError):
        device.open()
    device.close()
    hid.Close.assert_called_once()
    assert not device.is_opened


def test_open_failure(sio: MagicMock) -> None:
    sio.HIDAPI_DeviceCreate.return_value.Open.side_effect = OSError("access denied")
    with pytest.raises(RCWConnectionError):
        Mcp2221Device(path=b"/dev/hidraw0").open()


def test_not_opened(chip: FakeMcp2221) -> None:
    with pytest.raises(RCWConnectionError):
        Mcp2221Device().get_i2c_state()
    assert chip.reports == []


def test_get_i2c_state(chip: FakeMcp2221, device: Mcp2221Device) -> None:
    chip.state = 0x25
    assert device.get_i2c_state() == 0x25
    assert chip.reports[-1][:5] == bytes([0x10, 0, 0, 0, 0])


def test_cancel_i2c(chip: FakeMcp2221, device: Mcp2221Device) -> None:
    chip.state = 0x52
    device.cancel_i2c()
    assert chip.reports[-1][:3] == bytes([0x10, 0x00, 0x10])
    assert device.get_i2c_state() == 0x00


def test_set_i2c_divider(chip: FakeMcp2221, device: Mcp2221Device) -> None:
    device.set_i2c_divider(27)
    assert chip.reports[-1][:5] == bytes([0x10, 0x00, 0x00, 0x20, 27])
    assert chip.divider == 27


def test_set_i2c_divider_rejected(chip: FakeMcp2221, device: Mcp2221Device) -> None:
    chip.reject_speed = True
    with pytest.raises(RCWTransportError) as exc_info:
        device.set_i2c_divider(117)
    assert exc_info.value.status == 0x21


@pytest.mark.parametrize("divider", [0, 256])
def test_set_i2c_divider_invalid(chip: FakeMcp2221, device: Mcp2221Device, divider: int) -> None:
    with pytest.raises(RCWValueError):
        device.set_i2c_divider(divider)
    assert chip.reports == []


def test_write_read(chip: FakeMcp2221, device: Mcp2221Device) -> None:
    """Test the offset write without STOP followed by the repeated START read."""
    assert device.i2c_write_read(0x50, b"\x00", 4) == bytes.fromhex("40000000")
    commands = [report[0] for report in chip.reports]
    assert commands[0] == 0x94
    assert chip.reports[0][:5] == bytes([0x94, 0x01, 0x00, 0xA0, 0x00])
    read_index = commands.index(0x93)
    assert chip.reports[read_index][:4] == bytes([0x93, 0x04, 0x00, 0xA1])
    assert commands[-1] == 0x40


def test_write(chip: FakeMcp2221, device: Mcp2221Device) -> None:
    device.i2c_write(0x50, bytes.fromhex("0040010f00"))
    assert chip.reports[0][:9] == bytes([0x90, 0x05, 0x00, 0xA0]) + bytes.fromhex("0040010f00")
    assert chip.memory[:4] == bytes.fromhex("40010f00")
    assert device.i2c_write_read(0x50, b"\x00", 4) == bytes.fromhex("40010f00")


def test_write_read_zero_length(chip: FakeMcp2221, device: Mcp2221Device) -> None:
    assert device.i2c_write_read(0x50, b"\x10\xaa", 0) == b""
    assert chip.reports[0][0] == 0x90
    assert chip.memory[0x10] == 0xAA


def test_address_nack(chip: FakeMcp2221, device: Mcp2221Device) -> None:
    with pytest.raises(RCWTransportError) as exc_info:
        device.i2c_write_read(0x51, b"\x00", 4)
    assert exc_info.value.status == 0x25
    assert 0x93 not in [report[0] for report in chip.reports]


def test_invalid_address(chip: FakeMcp2221, device: Mcp2221Device) -> None:
    with pytest.raises(RCWValueError):
        device.i2c_write(0x80, b"\x00")
    assert chip.reports == []


def test_no_response(sio: MagicMock, chip: FakeMcp2221, device: Mcp2221Device) -> None:
    sio.HIDAPI_DeviceCreate.return_value.Read.side_effect = None
    sio.HIDAPI_DeviceCreate.return_value.Read.return_value = (b"", -1)
    with pytest.raises(RCWTimeoutError):
        device.get_i2c_state()


def test_state_labels() -> None:
    assert I2CState.get_label(0x25) == "ADDRESS_NACK"
    assert I2CState.get_label(0x99) == "Unknown (153)"


def test_write_read_long_transfer(chip: FakeMcp2221, device: Mcp2221Device) -> None:
    """Test transfers above 60 bytes are split into chunks of one report each."""
    data = bytes(range(1, 100))
    device.i2c_write(0x50, b"\x00" + data)
    write_reports = [report for report in chip.reports if report[0] == 0x90]
    assert [report[1] for report in write_reports] == [100, 100]
    assert write_reports[0][4:64] == b"\x00" + data[:59]
    assert write_reports[1][4:44] == data[59:]
    assert chip.memory[:99] == data

    chip.reports.clear()
    assert device.i2c_write_read(0x50, b"\x00", 99) == data
    assert [report[0] for report in chip.reports].count(0x40) == 2


def test_write_waits_for_partial_data(chip: FakeMcp2221, device: Mcp2221Device) -> None:
    chip.busy_polls = 3
    device.i2c_write(0x50, b"\x00" + bytes(range(70)))
    assert chip.memory[:70] == bytes(range(70))


def test_write_stuck_in_partial_data(chip: FakeMcp2221, device: Mcp2221Device) -> None:
    """Test a write never leaving the partial data state fails within the device timeout."""
    chip.busy_polls = 1_000_000_000
    device.timeout = 20
    with pytest.raises(RCWTransportError) as exc_info:
        device.i2c_write(0x50, bytes.fromhex("0040010f00"))
    assert exc_info.value.status == I2CState.PARTIAL_DATA.tag


def test_read_empty_data(chip: FakeMcp2221, device: Mcp2221Device) -> None:
    chip.empty_get_data = 3
    assert device.i2c_write_read(0x50, b"\x00", 4) == bytes.fromhex("40000000")
    assert [report[0] for report in chip.reports].count(0x40) == 4


def test_read_empty_data_timeout(chip: FakeMcp2221, device: Mcp2221Device) -> None:
    """Test Get Data answering success with no data fails within the device timeout."""
    chip.empty_get_data = 1_000_000_000
    device.timeout = 20
    with pytest.raises(RCWTransportError) as exc_info:
        device.i2c_write_read(0x50, b"\x00", 4)
    assert exc_info.value.status == I2CState.DATA_READY.tag
