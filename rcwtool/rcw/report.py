#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Human readable summary of the Reset Configuration Word."""

from rcwtool.rcw.enums import (
    BootMedia,
    BootSource,
    PhyMode,
    PllMode,
    SdSpeed,
    WaitPeriod,
    XoscMode,
    wait_period_to_ms,
)
from rcwtool.rcw.rcw import RcwView, ResetConfigWord
from rcwtool.utils.misc import format_value

QSPI_TIMING_FIELDS = (
    "mode",
    "port",
    "ck2",
    "cas",
    "por_delay",
    "ckn",
    "tdh",
    "fsphs",
    "fsdly",
    "dllfsmpf",
    "dqs_sel",
)


def format_wait(code: int) -> str:
    """Format the wait period, reserved codes are reported as unknown."""
    wait_ms = wait_period_to_ms(code)
    if wait_ms is None:
        return WaitPeriod.get_label(code)
    return f"{wait_ms}ms"


def get_summary(rcw: ResetConfigWord) -> list[tuple[str, str]]:
    """Get decoded fields of the word as (name, text) pairs.

    The boot media specific fields are decoded under the view matching the
    ``boot`` field, regardless of the view the word is currently seen through.

    :param rcw: Word to describe.
    :return: List of report lines.
    """
    generic = rcw.copy().select_view(RcwView.RCON)
    lines = [
        ("PHY", PhyMode.get_label(generic.get_field("phy"))),
        ("BOOT", BootMedia.get_description(generic.boot) or ""),
        ("SRC", BootSource.get_label(generic.get_field("src"))),
        ("XOSC", XoscMode.get_label(generic.get_field("xosc"))),
        ("PLL", PllMode.get_label(generic.get_field("pll"))),
    ]
    specific = rcw.copy().select_view(rcw.expected_view())
    if specific.view == RcwView.SD:
        lines.append(("WAIT", format_wait(specific.get_field("wait"))))
        lines.append(("SPEED", SdSpeed.get_label(specific.get_field("speed"))))
    elif specific.view == RcwView.MMC:
        lines.append(("WAIT", format_wait(specific.get_field("wait"))))
        lines.append(("MODE", str(specific.get_field("mode"))))
    elif specific.view == RcwView.QSPI:
        for name in QSPI_TIMING_FIELDS:
            bitfield = specific.get_bitfield(name)
            lines.append((name.upper(), format_value(specific.get_field(name), bitfield.width)))
    return lines


def format_rcw_report(rcw: ResetConfigWord) -> str:
    """Format the word value and its decoded fields.

    :param rcw: Word to describe.
    :return: Multi-line report.
    """
    lines = [str(rcw), "RCW", "=" * 33]
    lines.extend(f"    {name + ':':<10} {text}" for name, text in get_summary(rcw))
    return "\n".join(lines)
