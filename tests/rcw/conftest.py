#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Fixtures of the RCW tests."""

from typing import Iterator

import pytest

from tests.rcw.virtual_bridge import VirtualBridge


@pytest.fixture
def bridge() -> Iterator[VirtualBridge]:
    """Opened virtual bridge holding RCW 0x00000040 (SD boot, configuration from parallel)."""
    with VirtualBridge(bytes.fromhex("40000000")) as device:
        yield device


@pytest.fixture(autouse=True)
def no_write_cycle_wait(monkeypatch: pytest.MonkeyPatch) -> None:
    """Skip the EEPROM write cycle wait."""
    monkeypatch.setattr("rcwtool.rcw.eeprom.time.sleep", lambda _seconds: None)
