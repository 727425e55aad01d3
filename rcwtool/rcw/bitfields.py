#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Bitfield description of the Reset Configuration Word layouts."""

from dataclasses import dataclass
from typing import Optional

from rcwtool.exceptions import RCWValueError
from rcwtool.utils.misc import check_range

RCW_WIDTH = 32
RCW_MASK = (1 << RCW_WIDTH) - 1


@dataclass(frozen=True)
class BitField:
    """Named bit range inside the 32-bit word."""

    name: str
    offset: int
    width: int
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if self.width < 1 or self.offset < 0 or self.offset + self.width > RCW_WIDTH:
            raise RCWValueError(
                f"Bitfield {self.name} ({self.offset}, {self.width}) does not fit {RCW_WIDTH} bits"
            )

    @property
    def max_value(self) -> int:
        """Largest value the bitfield can hold."""
        return (1 << self.width) - 1

    @property
    def mask(self) -> int:
        """Mask of the bitfield bits in the word."""
        return self.max_value << self.offset

    def get_value(self, word: int) -> int:
        """Extract the bitfield value from the word.

        Any stored value is returned as is, interpretation is left to the caller.

        :param word: 32-bit word.
        :return: Bitfield value.
        """
        return (word >> self.offset) & self.max_value

    def set_value(self, word: int, value: int) -> int:
        """Return the word with the bitfield replaced by the value.

        :param word: 32-bit word.
        :param value: New bitfield value.
        :raises RCWValueError: The value is out of bitfield range.
        :return: Updated 32-bit word.
        """
        if not check_range(value, 0, self.max_value):
            raise RCWValueError(
                f"The value {value} is out of range of bitfield {self.name} (width {self.width})"
            )
        return ((word & ~self.mask) | (value << self.offset)) & RCW_MASK

    def __str__(self) -> str:
        return f"{self.name}[{self.offset + self.width - 1}:{self.offset}]"
