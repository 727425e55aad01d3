#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Console script for the Reset Configuration Word aka rcwtool."""

import contextlib
import logging
import sys
from typing import Any, ContextManager, Iterator

import click

from rcwtool import RCWTOOL_INTERACTIVE_DISABLED
from rcwtool.apps.utils import rcw_logger
from rcwtool.apps.utils.common_cli_options import (
    address_option,
    bridge_options,
    rcwtool_apps_common_options,
)
from rcwtool.apps.utils.utils import ExitCode, RCWAppError, catch_rcw_error, format_vid_pid
from rcwtool.exceptions import RCWError
from rcwtool.rcw.enums import BootMedia
from rcwtool.rcw.manager import RcwManager, RcwStep
from rcwtool.rcw.report import format_rcw_report
from rcwtool.utils.interfaces.device.mcp2221_device import Mcp2221Device
from rcwtool.utils.misc import check_range

logger = logging.getLogger(__name__)


STAGE_ERRORS = {
    RcwStep.STATE: (ExitCode.STATE_QUERY_FAILED, "cannot get state"),
    RcwStep.DIVIDER: (ExitCode.DIVIDER_FAILED, "cannot set divider"),
    RcwStep.READ: (ExitCode.READ_FAILED, "cannot read RCW"),
    RcwStep.WRITE: (ExitCode.WRITE_FAILED, "cannot write RCW"),
    RcwStep.READ_BACK: (ExitCode.VERIFY_READ_FAILED, "cannot read RCW"),
    RcwStep.COMPARE: (ExitCode.VERIFY_MISMATCH, "RCW verification failed"),
}


@contextlib.contextmanager
def _stage(error_code: ExitCode, message: str) -> Iterator[None]:
    """Turn library errors raised in the block into the exit code of the stage."""
    try:
        yield
    except RCWAppError:
        raise
    except RCWError as exc:
        raise RCWAppError(f"Error: {message}: {exc}", error_code.tag) from exc


def _step_stage(step: RcwStep) -> ContextManager[None]:
    return _stage(*STAGE_ERRORS[step])


def _select_device(obj: dict[str, Any]) -> Mcp2221Device:
    """Find the bridge to use.

    :param obj: Click context object.
    :raises RCWAppError: No bridge found or the index is out of range.
    :return: Selected bridge, not opened.
    """
    vid, pid = obj["usb"]
    devices = Mcp2221Device.scan(vid, pid)
    if not devices:
        raise RCWAppError(
            f"Note: no devices found ({format_vid_pid(vid, pid)})!", ExitCode.NO_DEVICE.tag
        )
    click.echo(f"Found {len(devices)} device{'s' if len(devices) > 1 else ''}")

    index = obj["device_index"]
    if index is None:
        if len(devices) == 1:
            index = 0
        elif RCWTOOL_INTERACTIVE_DISABLED:
            raise RCWAppError(
                "Error: more devices found, select one with --device-index!",
                ExitCode.ILLEGAL_DEVICE_INDEX.tag,
            )
        else:
            index = click.prompt(f"Enter number of desired device [0-{len(devices) - 1}]", type=int)
    if not check_range(index, 0, len(devices) - 1):
        raise RCWAppError(
            f"Error: illegal device number {index} out of range!",
            ExitCode.ILLEGAL_DEVICE_INDEX.tag,
        )
    return devices[index]


@contextlib.contextmanager
def _connect(obj: dict[str, Any]) -> Iterator[RcwManager]:
    """Open the bridge and prepare the I2C bus; the bridge is closed on exit."""
    bridge = _select_device(obj)
    with _stage(ExitCode.OPEN_FAILED, "cannot open MCP2221 device"):
        bridge.open()
    try:
        manager = RcwManager(
            bridge, address=obj["address"], divider=obj["divider"], stage=_step_stage
        )
        manager.prepare()
        yield manager
    finally:
        bridge.close()


@click.group(name="rcwtool", no_args_is_help=True)
@address_option
@bridge_options
@rcwtool_apps_common_options
@click.pass_context
def main(
    ctx: click.Context,
    address: int,
    usb: tuple[int, int],
    device_index: int,
    divider: int,
    log_level: int,
) -> int:
    """Read and update the Reset Configuration Word of S32G boards.

    The RCW is kept in the I2C EEPROM of the board and accessed through an
    MCP2221 USB-to-I2C bridge.
    """
    rcw_logger.install(level=log_level)
    ctx.obj = {
        "address": address,
        "usb": usb,
        "device_index": device_index,
        "divider": divider,
    }
    return 0


@main.command()
@click.pass_obj
def scan(obj: dict[str, Any]) -> None:
    """List the connected bridges with their index."""
    devices = Mcp2221Device.scan(*obj["usb"])
    if not devices:
        click.echo("Note: no devices found!")
        return
    for index, device in enumerate(devices):
        click.echo(f"{index}: {device}")


@main.command()
@click.pass_obj
def read(obj: dict[str, Any]) -> None:
    """Read and decode the Reset Configuration Word."""
    with _connect(obj) as manager:
        rcw = manager.read_rcw()
    click.echo(format_rcw_report(rcw))


@main.command(name="set-boot")
@click.option(
    "-b",
    "--boot",
    type=click.Choice(BootMedia.labels(), case_sensitive=False),
    default=BootMedia.SD.label,
    show_default=True,
    help="Boot media to configure.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Show the resulting word without writing it.",
)
@click.pass_obj
def set_boot(obj: dict[str, Any], boot: str, dry_run: bool) -> None:
    """Configure the boot media, booting with configuration from I2C.

    The word is rewritten only when it changes; the written word is read back
    and verified.
    """
    target = BootMedia.from_label(boot)
    with _connect(obj) as manager:
        update = manager.update_boot_media(target, dry_run=dry_run)

    click.echo(format_rcw_report(update.before))
    if not update.changed:
        click.echo("RCW is up to date")
    elif update.after is None:
        click.echo("Dry run, RCW would be written as:")
        click.echo(format_rcw_report(update.planned))
    else:
        click.echo(format_rcw_report(update.after))


@catch_rcw_error
def safe_main() -> None:
    """Calls the main function."""
    sys.exit(main())  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    safe_main()
