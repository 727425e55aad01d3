#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2023-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Labeled enumerations used for hardware codes.

Every member carries the raw numeric code (tag), a short machine friendly
label and an optional human readable description. The RCW label tables, bridge
status codes and application exit codes are all expressed this way.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from typing_extensions import Self

from rcwtool.exceptions import RCWKeyError, RCWTypeError


@dataclass(frozen=True)
class RcwEnumMember:
    """Single member of a labeled enumeration."""

    tag: int
    label: str
    description: Optional[str] = None


class RcwEnum(RcwEnumMember, Enum):
    """Enumeration with tag/label/description members.

    Members compare equal to their tag and to their label, so
    ``BootMedia.SD == 2`` and ``BootMedia.SD == "sd"`` both hold.
    """

    def __eq__(self, __value: object) -> bool:
        return self.tag == __value or self.label == __value

    def __hash__(self) -> int:
        return hash((self.tag, self.label, self.description))

    @classmethod
    def labels(cls) -> list[str]:
        """Get list of labels of all enum members.

        :return: List of all labels.
        """
        return [value.label for value in cls.__members__.values()]

    @classmethod
    def tags(cls) -> list[int]:
        """Get list of tags of all enum members.

        :return: List of all tags.
        """
        return [value.tag for value in cls.__members__.values()]

    @classmethod
    def contains(cls, obj: Union[int, str]) -> bool:
        """Check if member with given tag/label exists in enum.

        :param obj: Label or tag of enum member to check for existence.
        :raises RCWTypeError: Object must be either string or integer.
        :return: True if member exists, False otherwise.
        """
        if not isinstance(obj, (int, str)):
            raise RCWTypeError("Object must be either string or integer")
        try:
            cls.from_attr(obj)
            return True
        except RCWKeyError:
            return False

    @classmethod
    def get_label(cls, tag: int) -> str:
        """Get label of enum member with given tag.

        :param tag: Tag to be used for searching.
        :return: Label of found enum member.
        """
        return cls.from_tag(tag).label

    @classmethod
    def get_description(cls, tag: int, default: Optional[str] = None) -> Optional[str]:
        """Get description of enum member with given tag.

        :param tag: Tag to be used for searching.
        :param default: Default value if member contains no description.
        :return: Description of found enum member or default value.
        """
        return cls.from_tag(tag).description or default

    @classmethod
    def from_attr(cls, attribute: Union[int, str]) -> Self:
        """Get enum member with given tag (int) or label (str).

        :param attribute: Tag value or label value of the enum member to find.
        :return: Found enum member.
        """
        if isinstance(attribute, int):
            return cls.from_tag(attribute)
        return cls.from_label(attribute)

    @classmethod
    def from_tag(cls, tag: int) -> Self:
        """Get enum member with given tag.

        :param tag: Tag to be used for searching
        :raises RCWKeyError: If enum with given tag is not found
        :return: Found enum member
        """
        for item in cls.__members__.values():
            if item.tag == tag:
                return item
        raise RCWKeyError(f"There is no {cls.__name__} item with tag {tag} defined")

    @classmethod
    def from_label(cls, label: str) -> Self:
        """Get enum member with given label, case insensitive.

        :param label: Label to be used for searching
        :raises RCWKeyError: If enum with given label is not found or label is not string
        :return: Found enum member
        """
        if not isinstance(label, str):
            raise RCWKeyError("Label must be string")
        for item in cls.__members__.values():
            if item.label.upper() == label.upper():
                return item
        raise RCWKeyError(f"There is no {cls.__name__} item with label {label} defined")


class RcwSoftEnum(RcwEnum):
    """Labeled enumeration that never fails on lookups of undefined codes.

    Hardware fields may hold reserved values; their label and description
    lookups return an "Unknown (<code>)" marker instead of raising.
    """

    @classmethod
    def get_label(cls, tag: int) -> str:
        """Get label of enum member with given tag.

        :param tag: Tag value to search for in enum members.
        :return: Label of found enum member or "Unknown (tag)" if not found.
        """
        try:
            return super().get_label(tag)
        except RCWKeyError:
            return f"Unknown ({tag})"

    @classmethod
    def get_description(cls, tag: int, default: Optional[str] = None) -> Optional[str]:
        """Get description of enum member with given tag.

        :param tag: Tag to be used for searching the enum member.
        :param default: Default value if member contains no description.
        :return: Description of found enum member or "Unknown (tag)" if not found.
        """
        try:
            return super().get_description(tag, default)
        except RCWKeyError:
            return f"Unknown ({tag})"
