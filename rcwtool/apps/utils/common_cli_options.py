#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2020-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""CLI helper for Click."""

import logging
from typing import Any, Callable, Optional, TypeVar, Union

import click

from rcwtool import RCWTOOL_EEPROM_ADDRESS
from rcwtool import __version__ as rcwtool_version
from rcwtool.apps.utils.utils import INT, ExitCode, RCWAppError
from rcwtool.exceptions import RCWError
from rcwtool.utils.interfaces.device.mcp2221_device import (
    MCP2221_DEFAULT_PID,
    MCP2221_DEFAULT_VID,
    i2c_divider,
)
from rcwtool.utils.misc import check_range, value_to_int

FC = TypeVar("FC", bound=Union[Callable[..., Any], click.Command])
logger = logging.getLogger(__name__)

I2C_SPEEDS_KHZ = ["400", "100"]


def _parse_usb_id(
    ctx: click.Context, param: click.Parameter, value: Optional[str]
) -> tuple[int, int]:
    """Convert ``VID:PID`` to a tuple of integers, hexadecimal by default."""
    if value is None:
        return MCP2221_DEFAULT_VID, MCP2221_DEFAULT_PID
    vid, sep, pid = value.partition(":")
    if not sep:
        raise click.BadParameter(f"'{value}' is not in VID:PID format", ctx, param)
    try:
        return tuple(  # type: ignore[return-value]
            value_to_int(part if part.lower().startswith("0x") else "0x" + part)
            for part in (vid, pid)
        )
    except RCWError as exc:
        raise click.BadParameter(f"'{value}' is not a valid VID:PID pair", ctx, param) from exc


def _parse_address(ctx: click.Context, param: click.Parameter, value: Any) -> int:
    """Convert the hexadecimal 7-bit EEPROM address.

    :raises RCWAppError: The address is not a number or does not fit 7 bits.
    """
    try:
        address = INT(base=16).convert(value, param, ctx)
    except click.BadParameter as exc:
        raise RCWAppError(
            f"Error: illegal address: '{value}' is not a number!", ExitCode.ILLEGAL_ADDRESS.tag
        ) from exc
    if not check_range(address, 0, 0x7F):
        raise RCWAppError(f"Error: illegal address: 0x{address:02x}!", ExitCode.ILLEGAL_ADDRESS.tag)
    return address


def rcwtool_apps_common_options(options: FC) -> FC:
    """Common click options.

    Sets --help, --version; provides: `log_level: int` for logging.

    :return: click decorator
    """
    options = click.help_option("--help")(options)
    options = click.version_option(rcwtool_version, "--version")(options)
    options = click.option(
        "-vv",
        "--debug",
        "log_level",
        flag_value=logging.DEBUG,
        help="Display more debugging information.",
    )(options)
    options = click.option(
        "-v",
        "--verbose",
        "log_level",
        flag_value=logging.INFO,
        help="Print more detailed information",
    )(options)
    return options


def bridge_options(options: FC) -> FC:
    """Bridge selection click options.

    Provides: `usb: tuple[int, int]` VID and PID, `device_index: Optional[int]`
    and `divider: int` I2C clock divider.

    :return: click decorator
    """
    options = click.option(
        "-s",
        "--speed",
        "divider",
        type=click.Choice(I2C_SPEEDS_KHZ),
        default="400",
        show_default=True,
        callback=lambda ctx, param, value: i2c_divider(int(value) * 1000),
        help="I2C bus speed in kHz.",
    )(options)
    options = click.option(
        "-d",
        "--device-index",
        type=int,
        help="Index of the bridge when more of them are connected, see the 'scan' command.",
    )(options)
    options = click.option(
        "-u",
        "--usb",
        metavar="VID:PID",
        callback=_parse_usb_id,
        help=(
            "USB identifiers of the bridge, hexadecimal, "
            f"defaults to {MCP2221_DEFAULT_VID:04x}:{MCP2221_DEFAULT_PID:04x}."
        ),
    )(options)
    return options


def address_option(options: FC) -> FC:
    """EEPROM address click option.

    Provides: `address: int` 7-bit I2C address of the RCW EEPROM.

    :return: click decorator
    """
    return click.option(
        "-a",
        "--address",
        default=RCWTOOL_EEPROM_ADDRESS,
        callback=_parse_address,
        show_default=True,
        help="7-bit I2C address of the EEPROM (hex).",
    )(options)
