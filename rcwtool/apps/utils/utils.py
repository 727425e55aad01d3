#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2020-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""rcwtool application utilities.

Exit codes, the application error and the decorator that turns exceptions
into process exit codes.
"""

import logging
import sys
from functools import wraps
from typing import Any, Callable, Optional

import click

from rcwtool import RCWTOOL_DEBUG_LOG_FILE, RCWTOOL_DEBUG_LOGGING_DISABLED
from rcwtool.exceptions import RCWError
from rcwtool.utils.rcw_enum import RcwEnum

logger = logging.getLogger(__name__)


class ExitCode(RcwEnum):
    """Process exit codes of the rcwtool application."""

    SUCCESS = (0, "SUCCESS", "Success")
    ILLEGAL_ADDRESS = (10, "ILLEGAL_ADDRESS", "Illegal EEPROM address")
    NO_DEVICE = (11, "NO_DEVICE", "No bridge device found")
    ILLEGAL_DEVICE_INDEX = (12, "ILLEGAL_DEVICE_INDEX", "Illegal device index")
    OPEN_FAILED = (13, "OPEN_FAILED", "Cannot open the bridge device")
    STATE_QUERY_FAILED = (14, "STATE_QUERY_FAILED", "Cannot get the I2C state")
    DIVIDER_FAILED = (15, "DIVIDER_FAILED", "Cannot set the I2C divider")
    READ_FAILED = (16, "READ_FAILED", "Cannot read RCW")
    WRITE_FAILED = (17, "WRITE_FAILED", "Cannot write RCW")
    VERIFY_READ_FAILED = (18, "VERIFY_READ_FAILED", "Cannot read RCW back")
    VERIFY_MISMATCH = (19, "VERIFY_MISMATCH", "RCW verification failed")


class RCWAppError(RCWError):
    """Application error carrying the process exit code.

    :cvar fmt: Format string template for error message display.
    """

    fmt = "{description}"

    def __init__(self, desc: Optional[str] = None, error_code: int = 1) -> None:
        """Initialize the AppError.

        :param desc: Description to print out on command line, defaults to None
        :param error_code: Error code passed to OS, defaults to 1
        """
        super().__init__(desc)
        self.description = desc
        self.error_code = error_code


class INT(click.ParamType):
    """Click parameter type for integers given in the requested base.

    :cvar name: Parameter type name used by Click framework.
    """

    name = "integer"

    def __init__(self, base: int = 0) -> None:
        """Initialize custom INT param class.

        :param base: requested base for the number, defaults to 0
        """
        super().__init__()
        self.base = base

    # pylint: disable=inconsistent-return-statements
    def convert(
        self,
        value: Any,
        param: Optional[click.Parameter] = None,
        ctx: Optional[click.Context] = None,
    ) -> int:
        """Perform the conversion str -> int.

        :param value: value to convert
        :param param: Click parameter, defaults to None
        :param ctx: Click context, defaults to None
        :return: value as integer
        """
        if isinstance(value, int):
            return value
        try:
            return int(value, self.base)
        except TypeError:
            self.fail(
                "expected string for int() conversion, got "
                f"{value!r} of type {type(value).__name__}",
                param,
                ctx,
            )
        except ValueError:
            self.fail(f"{value!r} is not a valid integer", param, ctx)


def format_vid_pid(vid: int, pid: int) -> str:
    """Format VID:PID information in human-readable format."""
    return f"{vid:#06x}:{pid:#06x}"


def catch_rcw_error(function: Callable) -> Callable:
    """Catch and handle RCWError and other exceptions.

    RCWAppError exits with its own error code. Other RCWError and
    AssertionError exit with code 2, any other exception with code 3. The
    exception is logged with its traceback to the debug log.

    :param function: The function to be decorated.
    :return: The decorated function.
    """

    @wraps(function)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            retval = function(*args, **kwargs)
            return retval
        except RCWAppError as app_exc:
            if app_exc.description:
                click.echo(f"{app_exc.__class__.__name__}: {app_exc}", err=True)
            logger.debug(str(app_exc), exc_info=True)
            if 0 < app_exc.error_code < 256:
                sys.exit(app_exc.error_code)
            sys.exit(1)
        except (AssertionError, RCWError) as rcw_exc:
            click.echo(f"{rcw_exc.__class__.__name__}: {rcw_exc}", err=True)
            logger.debug(str(rcw_exc), exc_info=True)
            if not RCWTOOL_DEBUG_LOGGING_DISABLED:
                click.secho(
                    f"See debug log file: {RCWTOOL_DEBUG_LOG_FILE} for more info", fg="yellow"
                )
            sys.exit(2)
        except (Exception, KeyboardInterrupt) as base_exc:  # pylint: disable=broad-except
            click.echo(f"GENERAL ERROR: {type(base_exc).__name__}: {base_exc}", err=True)
            logger.debug(str(base_exc), exc_info=True)
            if not RCWTOOL_DEBUG_LOGGING_DISABLED:
                click.secho(
                    f"See debug log file: {RCWTOOL_DEBUG_LOG_FILE} for more info.", fg="yellow"
                )
            sys.exit(3)

    return wrapper
