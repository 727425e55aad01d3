#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Reset Configuration Word codec.

The RCW is a single 32-bit value stored little endian at offset 0 of the boot
EEPROM. Depending on the boot media the same bits carry different fields, so
the word is kept as the raw value plus the view used to interpret it. The view
is never switched implicitly; ``expected_view`` tells which view matches the
``boot`` field.
"""

import logging
from typing import Any

from typing_extensions import Self

from rcwtool.exceptions import RCWLengthError, RCWTypeError, RCWValueError
from rcwtool.rcw.bitfields import RCW_MASK, BitField
from rcwtool.rcw.enums import BootMedia
from rcwtool.utils.exceptions import RCWBitfieldNotFound
from rcwtool.utils.misc import Endianness, check_range
from rcwtool.utils.rcw_enum import RcwEnum

logger = logging.getLogger(__name__)

RCW_SIZE = 4
RCW_ENDIANNESS = Endianness.LITTLE


class RcwView(RcwEnum):
    """Interpretation of the 32 bits of the word."""

    RCON = (0, "rcon", "Generic reset configuration")
    SD = (1, "sd", "SD card boot")
    MMC = (2, "mmc", "MMC/eMMC boot")
    QSPI = (3, "qspi", "QSPI flash boot")


_RCON_FIELDS = (
    BitField("phy", 0, 2, "Ethernet PHY interface"),
    BitField("boot", 5, 3, "Boot media"),
    BitField("src", 8, 1, "Boot configuration source"),
    BitField("xosc", 15, 1, "Crystal oscillator mode"),
    BitField("pll", 31, 1, "Boot clock"),
)

LAYOUTS: dict[RcwView, tuple[BitField, ...]] = {
    RcwView.RCON: _RCON_FIELDS,
    RcwView.SD: _RCON_FIELDS
    + (
        BitField("wait", 16, 3, "Wait period"),
        BitField("speed", 19, 1, "SD bus speed"),
    ),
    RcwView.MMC: _RCON_FIELDS
    + (
        BitField("wait", 16, 3, "Wait period"),
        BitField("mode", 19, 4, "MMC bus mode"),
    ),
    RcwView.QSPI: (
        BitField("phy", 0, 2, "Ethernet PHY interface"),
        BitField("mode", 2, 3, "QSPI mode"),
        BitField("boot", 5, 3, "Boot media"),
        BitField("src", 8, 1, "Boot configuration source"),
        BitField("port", 9, 1, "QSPI port"),
        BitField("ck2", 10, 1, "CK2 clock"),
        BitField("cas", 11, 4, "QuadSPI_SFACR[CAS] value"),
        BitField("xosc", 15, 1, "Crystal oscillator mode"),
        BitField("por_delay", 16, 3, "Power-on reset delay"),
        BitField("ckn", 19, 1, "Differential clock"),
        BitField("tdh", 22, 2, "Time hold delay"),
        BitField("fsphs", 24, 1, "Full speed phase selection SMPR[FSPHS]"),
        BitField("fsdly", 25, 1, "Full speed delay selection SMPR[FSDLY]"),
        BitField("dllfsmpf", 26, 3, "DLL sampling tap"),
        BitField("dqs_sel", 29, 2, "DQS selection"),
        BitField("pll", 31, 1, "Boot clock"),
    ),
}

BOOT_MEDIA_VIEWS = {
    BootMedia.QSPI.tag: RcwView.QSPI,
    BootMedia.SD.tag: RcwView.SD,
    BootMedia.MMC.tag: RcwView.MMC,
}


class ResetConfigWord:
    """32-bit Reset Configuration Word seen through one of its views."""

    def __init__(self, value: int = 0, view: RcwView = RcwView.RCON) -> None:
        """Initialize the word.

        :param value: Raw 32-bit value.
        :param view: View used to access the fields.
        :raises RCWValueError: The value does not fit 32 bits.
        :raises RCWTypeError: Unknown view.
        """
        if not check_range(value, 0, RCW_MASK):
            raise RCWValueError(f"RCW value 0x{value:X} does not fit 32 bits")
        if not isinstance(view, RcwView):
            raise RCWTypeError(f"Invalid RCW view: {view}")
        self.value = value
        self.view = view

    @classmethod
    def from_fields(cls, view: RcwView = RcwView.RCON, **fields: int) -> Self:
        """Create a word from field values, the other bits are zero.

        :param view: View defining the fields.
        :param fields: Field values by name.
        :return: New word.
        """
        rcw = cls(0, view)
        for name, value in fields.items():
            rcw.set_field(name, value)
        return rcw

    @property
    def bitfields(self) -> tuple[BitField, ...]:
        """Bitfields defined by the current view."""
        return LAYOUTS[self.view]

    def get_bitfield(self, name: str) -> BitField:
        """Get bitfield of the current view by its name.

        :param name: Bitfield name, case insensitive.
        :raises RCWBitfieldNotFound: The view does not define such field.
        :return: Bitfield description.
        """
        for bitfield in self.bitfields:
            if bitfield.name == name.lower():
                return bitfield
        raise RCWBitfieldNotFound(f"Field '{name}' is not defined in the {self.view.label} view")

    def get_field(self, name: str) -> int:
        """Get raw value of a field."""
        return self.get_bitfield(name).get_value(self.value)

    def set_field(self, name: str, value: int) -> None:
        """Set raw value of a field.

        :param name: Field name.
        :param value: New value, must fit the field width.
        """
        self.value = self.get_bitfield(name).set_value(self.value, value)

    def get_fields(self) -> dict[str, int]:
        """Get all fields of the current view.

        :return: Field values by name, in bit order.
        """
        return {bitfield.name: bitfield.get_value(self.value) for bitfield in self.bitfields}

    @property
    def boot(self) -> int:
        """Boot media code, present at the same place in all views."""
        return self.get_field("boot")

    def expected_view(self) -> RcwView:
        """Get the view matching the boot media of the word.

        :return: Boot media view, generic view for unknown boot media.
        """
        return view_for_boot_media(self.boot)

    def select_view(self, view: RcwView) -> Self:
        """Reinterpret the same bits under another view.

        :param view: New view.
        :return: The word itself.
        """
        if view != self.view:
            logger.debug(f"RCW view changed: {self.view.label} -> {view.label}")
        self.view = view
        return self

    def copy(self) -> Self:
        """Get an independent copy of the word."""
        return type(self)(self.value, self.view)

    def export(self) -> bytes:
        """Encode the word to its on-wire representation.

        :return: 4 bytes, little endian.
        """
        return self.value.to_bytes(RCW_SIZE, RCW_ENDIANNESS.value)

    @classmethod
    def parse(cls, data: bytes, view: RcwView = RcwView.RCON) -> Self:
        """Decode the word from its on-wire representation.

        :param data: Exactly 4 bytes, little endian.
        :param view: View to access the fields.
        :raises RCWLengthError: The data are not 4 bytes long.
        :return: Decoded word.
        """
        if len(data) != RCW_SIZE:
            raise RCWLengthError(f"RCW must be {RCW_SIZE} bytes long, got {len(data)}")
        return cls(int.from_bytes(data, RCW_ENDIANNESS.value), view)

    def __eq__(self, obj: Any) -> bool:
        return isinstance(obj, ResetConfigWord) and self.value == obj.value and self.view == obj.view

    def __repr__(self) -> str:
        return f"ResetConfigWord(0x{self.value:08x}, {self.view.label})"

    def __str__(self) -> str:
        return f"RCW: 0x{self.value:08x}"


def decode(data: bytes, view: RcwView = RcwView.RCON) -> ResetConfigWord:
    """Decode 4 little endian bytes to a word with the given view.

    :param data: Raw RCW bytes.
    :param view: View of the decoded word.
    :return: Decoded word.
    """
    return ResetConfigWord.parse(data, view)


def encode(rcw: ResetConfigWord) -> bytes:
    """Encode a word to 4 little endian bytes.

    :param rcw: Word to encode.
    :return: Raw RCW bytes.
    """
    return rcw.export()


def view_for_boot_media(boot: int) -> RcwView:
    """Get the view used for the given boot media code.

    :param boot: Boot media code.
    :return: Matching view, generic view for unknown codes.
    """
    return BOOT_MEDIA_VIEWS.get(boot, RcwView.RCON)
