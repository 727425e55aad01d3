#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2020-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""rcwtool - Reset Configuration Word tool for S32G boards.

The package reads, decodes, updates and verifies the 32-bit Reset Configuration
Word kept in an I2C EEPROM that is reachable through a USB-to-I2C bridge.

MULTIPLE INTERFACES:
    - Pure Python library (codec, EEPROM access, boot policy)
    - The `rcwtool` command line application
"""

import os
from typing import Optional, Union

from packaging.version import Version, parse
from platformdirs import PlatformDirs


def get_rcwtool_version() -> Version:
    """Get rcwtool version information.

    :return: Parsed version object.
    """
    from .__version__ import __version__ as rcwtool_version

    return parse(rcwtool_version)


def value_to_bool(value: Optional[Union[bool, int, str]]) -> bool:
    """Convert value to boolean from various input formats.

    Supports conversion from string representations like "True", "true", "T", "1"
    and standard Python truthy/falsy values for other types.

    :param value: Value to convert to boolean (string, int, bool, or None).
    :return: Boolean representation of the input value.
    """
    if isinstance(value, str):
        return value in ("True", "true", "T", "1")
    return bool(value)


version = get_rcwtool_version()

__author__ = "NXP"
__license__ = "BSD-3-Clause"
__version__ = str(version)

# The rcwtool behavior settings
RCWTOOL_PLATFORM_DIRS = PlatformDirs(
    appauthor="nxp",
    appname="rcwtool",
    version=version.base_version,
)

RCWTOOL_INTERACTIVE_DISABLED = value_to_bool(os.environ.get("RCWTOOL_INTERACTIVE_DISABLED"))

# 7-bit address of the RCW EEPROM, hexadecimal string as on the command line
RCWTOOL_EEPROM_ADDRESS = os.environ.get("RCWTOOL_EEPROM_ADDRESS", "0x50")

RCWTOOL_DEBUG_LOGGING_DISABLED = value_to_bool(os.environ.get("RCWTOOL_DEBUG_LOGGING_DISABLED"))
RCWTOOL_DEBUG_LOG_FILE = os.environ.get(
    "RCWTOOL_DEBUG_LOG_FILE", os.path.join(RCWTOOL_PLATFORM_DIRS.user_log_dir, "debug.log")
)

RCWTOOL_USER_CONFIG_DIR = os.path.expanduser("~/.rcwtool")
