#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2020-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""rcwtool miscellaneous utilities and helper functions.

Number conversion and formatting, timeouts for polling the bridge, file lookup
and configuration loading used by the library and the application.
"""

import json
import logging
import os
import re
import time
from enum import Enum
from math import ceil
from typing import Callable, Generator, Optional, Union

import yaml

from rcwtool.exceptions import RCWError, RCWValueError
from rcwtool.utils.exceptions import RCWTimeoutError

logger = logging.getLogger(__name__)


class Endianness(str, Enum):
    """Byte order of multi-byte values on the wire."""

    BIG = "big"
    LITTLE = "little"

    @classmethod
    def values(cls) -> list[str]:
        """Get enumeration values.

        :return: List of all enumeration values as strings.
        """
        return [mem.value for mem in Endianness.__members__.values()]


def format_value(value: int, size: int, delimiter: str = "_", use_prefix: bool = True) -> str:
    """Convert integer value to formatted binary or hexadecimal string representation.

    Binary format is used when size is not divisible by 8, hexadecimal otherwise.
    Digits are grouped by 4 characters using the delimiter.

    :param value: Integer value to be converted.
    :param size: Bit size that determines output format and padding.
    :param delimiter: Character used to separate digit groups, defaults to underscore.
    :param use_prefix: Whether to include format prefix (0b/0x), defaults to True.
    :return: Formatted string representation of the value.
    """
    padding = size if size % 8 else (size // 8) * 2
    infix = "b" if size % 8 else "x"
    sign = "-" if value < 0 else ""
    parts = re.findall(".{1,4}", f"{abs(value):0{padding}{infix}}"[::-1])
    rev = delimiter.join(parts)[::-1]
    prefix = f"0{infix}" if use_prefix else ""
    return f"{sign}{prefix}{rev}"


def value_to_int(value: Union[bytes, bytearray, int, str], default: Optional[int] = None) -> int:
    """Convert value from multiple formats to integer.

    Strings may carry 0b/0o/0x prefixes; bytes are read as big endian.

    :param value: Input value to convert (int, bytes, bytearray, or str).
    :param default: Default value returned when conversion fails.
    :return: Converted integer value.
    :raises RCWError: Unsupported input type or invalid conversion without default.
    """
    if isinstance(value, int):
        return value

    if isinstance(value, (bytes, bytearray)):
        return int.from_bytes(value, Endianness.BIG.value)

    if isinstance(value, str) and value != "":
        match = re.match(
            r"(?P<prefix>0[box])?(?P<number>[0-9a-f_]+)(?P<suffix>[ul]{0,3})$",
            value.strip().lower(),
        )
        if match:
            base = {"0b": 2, "0o": 8, "0x": 16, None: 10}[match.group("prefix")]
            try:
                return int(match.group("number"), base=base)
            except ValueError:
                pass

    if default is not None:
        return default
    raise RCWError(f"Invalid input number type({type(value)}) with value ({value})")


def check_range(x: int, start: int = 0, end: int = (1 << 32) - 1) -> bool:
    """Check if the number is in range.

    :param x: Number to check.
    :param start: Lower border of range, default is 0.
    :param end: Upper border of range, default is unsigned 32-bit range.
    :return: True if fits, False otherwise.
    """
    return start <= x <= end


def split_data(data: Union[bytearray, bytes], size: int) -> Generator[bytes, None, None]:
    """Split data into chunks of specified size.

    :param data: Array of bytes to be split into chunks.
    :param size: Size of each chunk in bytes.
    :return: Generator yielding byte chunks of the specified size.
    """
    for i in range(0, len(data), size):
        yield bytes(data[i : i + size])


class Timeout:
    """Timeout handler for polling loops.

    :cvar UNITS: Supported time units and their conversion factors to microseconds.
    """

    UNITS = {
        "s": 1000000,
        "ms": 1000,
        "us": 1,
    }

    def __init__(self, timeout: int, units: str = "s") -> None:
        """Initialize timeout class with specified timeout value and units.

        :param timeout: Timeout value in specified units, 0 disables the timeout.
        :param units: Timeout units (MUST be from the UNITS list).
        :raises RCWValueError: Invalid input value.
        """
        if units not in self.UNITS:
            raise RCWValueError("Units are not in supported units.")
        self.enabled = timeout != 0
        self.timeout_us = timeout * self.UNITS[units]
        self.start_time_us = self._get_current_time_us()
        self.end_time = self.start_time_us + self.timeout_us
        self.units = units

    @staticmethod
    def _get_current_time_us() -> int:
        return ceil(time.time() * 1_000_000)

    def _convert_to_units(self, time_us: int) -> int:
        return time_us // self.UNITS[self.units]

    def get_consumed_time(self) -> int:
        """Get consumed time since start of timeout operation.

        :return: Consumed time in units as the class was constructed.
        """
        return self._convert_to_units(self._get_current_time_us() - self.start_time_us)

    def get_rest_time_ms(self, raise_exc: bool = False) -> int:
        """Get remaining time until timeout overflow.

        :param raise_exc: If set, the function raises RCWTimeoutError in case of overflow.
        :return: Remaining time in milliseconds.
        :raises RCWTimeoutError: In case of timeout overflow when raise_exc is True.
        """
        if self.enabled and self._get_current_time_us() > self.end_time and raise_exc:
            raise RCWTimeoutError("Timeout of operation.")

        return ((self.end_time - self._get_current_time_us()) // 1000) if self.enabled else 0

    def overflow(self, raise_exc: bool = False) -> bool:
        """Check if the timer has overflowed.

        :param raise_exc: If True, raises RCWTimeoutError when overflow occurs.
        :return: True if timeout has overflowed, False otherwise.
        :raises RCWTimeoutError: When overflow occurs and raise_exc is True.
        """
        overflow = self.enabled and self._get_current_time_us() > self.end_time
        if overflow and raise_exc:
            raise RCWTimeoutError("Timeout of operation.")
        return overflow


def get_abs_path(file_path: str, base_dir: Optional[str] = None) -> str:
    """Convert relative or absolute file path to normalized absolute path.

    :param file_path: File path to be converted to absolute path.
    :param base_dir: Base directory to create absolute path, if not specified the system CWD is used.
    :return: Absolute file path with normalized separators.
    """
    if os.path.isabs(file_path):
        return file_path.replace("\\", "/")

    return os.path.abspath(os.path.join(base_dir or os.getcwd(), file_path)).replace("\\", "/")


def _find_path(
    path: str,
    check_func: Callable[[str], bool],
    use_cwd: bool = True,
    search_paths: Optional[list[str]] = None,
    raise_exc: bool = True,
) -> str:
    path = path.replace("\\", "/")

    if os.path.isabs(path):
        if not check_func(path):
            if raise_exc:
                raise RCWError(f"Path '{path}' not found")
            return ""
        return path
    for dir_candidate in filter(None, search_paths or []):
        path_candidate = get_abs_path(path, base_dir=dir_candidate.replace("\\", "/"))
        if check_func(path_candidate):
            return path_candidate
    if use_cwd and check_func(path):
        return get_abs_path(path)
    searched_in: list[str] = []
    if use_cwd:
        searched_in.append(os.path.abspath(os.curdir))
    searched_in.extend(filter(None, search_paths or []))
    err_str = f"Path '{path}' not found, Searched in: {', '.join(searched_in)}"
    if not raise_exc:
        logger.debug(err_str)
        return ""
    raise RCWError(err_str)


def find_file(
    file_path: str,
    use_cwd: bool = True,
    search_paths: Optional[list[str]] = None,
    raise_exc: bool = True,
) -> str:
    """Find file in filesystem using multiple search strategies.

    Search paths take precedence over current working directory.

    :param file_path: File name, part of file path or full path to search for.
    :param use_cwd: Try current working directory to find the file, defaults to True.
    :param search_paths: List of paths where to search for the file, defaults to None.
    :param raise_exc: Raise exception if file is not found, defaults to True.
    :return: Full absolute path to the found file, empty string if not found and raise_exc is False.
    :raises RCWError: File not found in any of the search locations.
    """
    return _find_path(
        path=file_path,
        check_func=os.path.isfile,
        use_cwd=use_cwd,
        search_paths=search_paths,
        raise_exc=raise_exc,
    )


def load_text(path: str, search_paths: Optional[list[str]] = None) -> str:
    """Load text file content.

    :param path: Path to the text file.
    :param search_paths: List of paths where to search for the file, defaults to None.
    :return: Content of the text file as string.
    """
    with open(find_file(path, search_paths=search_paths), "r", encoding="utf-8") as f:
        return f.read()


def load_configuration(path: str, search_paths: Optional[list[str]] = None) -> dict:
    """Load configuration from YAML or JSON file.

    :param path: Path to configuration file (relative or absolute).
    :param search_paths: List of paths where to search for the file, defaults to None.
    :raises RCWError: When file cannot be loaded, parsed, or contains invalid format.
    :return: Content of configuration as dictionary.
    """
    try:
        config = load_text(path, search_paths=search_paths)
    except (OSError, RCWError) as exc:
        raise RCWError(f"Can't load configuration file: {str(exc)}") from exc

    config_data: Optional[dict] = None
    try:
        config_data = json.loads(config)
    except json.JSONDecodeError:
        try:
            config_data = yaml.safe_load(config)
        except yaml.YAMLError:
            pass

    if not config_data:
        raise RCWError(f"Can't parse configuration file: {path}")
    if not isinstance(config_data, dict):
        raise RCWError(f"Invalid configuration file: {path}")

    return config_data
