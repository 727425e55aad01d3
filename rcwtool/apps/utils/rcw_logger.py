#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2023-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""rcwtool logging setup with colored console output and debug log file."""

import logging
import logging.config
import logging.handlers
import os
import platform
import re
import sys
from datetime import datetime
from typing import Optional, TextIO

import colorama

from rcwtool import (
    RCWTOOL_DEBUG_LOG_FILE,
    RCWTOOL_DEBUG_LOGGING_DISABLED,
    RCWTOOL_USER_CONFIG_DIR,
    __version__,
)
from rcwtool.exceptions import RCWError
from rcwtool.utils.misc import find_file, load_configuration

colorama.just_fix_windows_console()

LOGGER_NAME = "rcwtool"
CONSOLE_HANDLER_NAME = "rcwtool-console"


def load_logging_config() -> Optional[str]:
    """Apply ``logging.yaml`` from the user configuration directory, if present.

    :return: Path of the applied configuration file, None when there is none.
    """
    logging_config_file = find_file(
        "logging.yaml", use_cwd=False, search_paths=[RCWTOOL_USER_CONFIG_DIR], raise_exc=False
    )
    if not logging_config_file:
        return None
    try:
        logging.config.dictConfig(load_configuration(logging_config_file))
    except (RCWError, ValueError, TypeError) as exc:
        logging.getLogger(LOGGER_NAME).warning(
            f"Invalid logging config {logging_config_file}: {exc}"
        )
        return None
    return logging_config_file


class ColoredFormatter(logging.Formatter):
    """Logging formatter with colors per level.

    :cvar COLORED_FORMATS: Color-coded format strings for each logging level.
    :cvar FORMATS: Plain text format strings for each logging level.
    """

    FORMAT = logging.BASIC_FORMAT
    FORMAT_DEBUG = FORMAT + " (%(relativeCreated)dms since start, %(filename)s:%(lineno)d)"

    COLORED_FORMATS = {
        logging.DEBUG: colorama.Fore.BLUE + FORMAT_DEBUG + colorama.Fore.RESET,
        logging.INFO: colorama.Fore.WHITE
        + colorama.Style.BRIGHT
        + FORMAT
        + colorama.Fore.RESET
        + colorama.Style.RESET_ALL,
        logging.WARNING: colorama.Fore.YELLOW + FORMAT + colorama.Fore.RESET,
        logging.ERROR: colorama.Fore.RED + FORMAT_DEBUG + colorama.Fore.RESET,
        logging.CRITICAL: colorama.Fore.RED
        + colorama.Style.BRIGHT
        + FORMAT_DEBUG
        + colorama.Fore.RESET
        + colorama.Style.RESET_ALL,
    }
    FORMATS = {
        logging.DEBUG: FORMAT_DEBUG,
        logging.INFO: FORMAT,
        logging.WARNING: FORMAT,
        logging.ERROR: FORMAT_DEBUG,
        logging.CRITICAL: FORMAT_DEBUG,
    }

    def __init__(self, colored: bool = True) -> None:
        super().__init__()
        self.colored = colored
        self.formats = self.COLORED_FORMATS if colored else self.FORMATS

    def format(self, record: logging.LogRecord) -> str:
        """Format the record with the level specific format.

        :param record: Input logging record to print.
        :return: Formatted logging string.
        """
        formatter = logging.Formatter(self.formats.get(record.levelno))
        if not self.colored and isinstance(record.msg, str):
            record.msg = re.sub(r"\x1b\[\d{1,3}m", "", record.msg)
        return formatter.format(record)


def _has_debug_handler(target_logger: logging.Logger) -> bool:
    return any(
        isinstance(h, logging.handlers.RotatingFileHandler)
        and h.baseFilename == os.path.abspath(RCWTOOL_DEBUG_LOG_FILE)
        for h in target_logger.handlers
    )


def install(
    level: Optional[int] = None,
    stream: Optional[TextIO] = None,
    colored: Optional[bool] = None,
    logger: Optional[logging.Logger] = None,
    create_debug_logger: bool = True,
) -> None:
    """Install rcwtool log handlers.

    :param level: console logging level, defaults to logging.WARNING
    :param stream: stream to output logging, defaults to current sys.stderr
    :param colored: colored output, by default colored on a console
    :param logger: defaults to the rcwtool logger
    :param create_debug_logger: create the rotating debug log file handler
    """
    level = level or logging.WARNING
    stream = stream or sys.stderr
    target_logger = logger or logging.getLogger(LOGGER_NAME)
    target_logger.setLevel(logging.DEBUG)
    load_logging_config()

    color = hasattr(stream, "isatty") and stream.isatty() and "NO_COLOR" not in os.environ
    if colored is not None:
        color = colored

    for old_handler in [h for h in target_logger.handlers if h.get_name() == CONSOLE_HANDLER_NAME]:
        target_logger.removeHandler(old_handler)
    handler = logging.StreamHandler(stream)
    handler.set_name(CONSOLE_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(color))
    target_logger.addHandler(handler)

    if not create_debug_logger or RCWTOOL_DEBUG_LOGGING_DISABLED or _has_debug_handler(target_logger):
        return
    try:
        os.makedirs(os.path.dirname(RCWTOOL_DEBUG_LOG_FILE), exist_ok=True)
        debug_handler = logging.handlers.RotatingFileHandler(
            RCWTOOL_DEBUG_LOG_FILE, mode="a", maxBytes=1_000_000, backupCount=5, encoding="utf-8"
        )
    except OSError as exc:
        target_logger.warning(f"Failed to initialize debug logging: {str(exc)}")
        return
    debug_handler.setFormatter(ColoredFormatter(colored=False))
    debug_handler.setLevel(logging.DEBUG)
    target_logger.addHandler(debug_handler)

    starter = f"* RCWTOOL DEBUG LOGGING STARTED {datetime.now().strftime('%Y-%m-%d %H:%M:%S')} *"
    padding = len(starter) - 2
    target_logger.debug("*" * len(starter))
    target_logger.debug(starter)
    target_logger.debug(f"* rcwtool version: {__version__}".ljust(padding) + " *")
    target_logger.debug(f"* Python version: {sys.version.split()[0]}".ljust(padding) + " *")
    target_logger.debug(f"* OS version: {platform.platform()}".ljust(padding) + " *")
    target_logger.debug(f"* Last command: {sys.argv}".ljust(padding) + " *")
    target_logger.debug("*" * len(starter))
