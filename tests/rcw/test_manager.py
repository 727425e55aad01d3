#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Tests of the RCW read-modify-write transaction."""

import contextlib
from typing import Iterator

import pytest

from rcwtool.exceptions import RCWError, RCWTransportError, RCWVerificationError
from rcwtool.rcw.enums import BootMedia
from rcwtool.rcw.manager import RcwManager, RcwStep
from rcwtool.rcw.rcw import RcwView, ResetConfigWord
from tests.rcw.virtual_bridge import VirtualBridge


def test_update_to_sd(bridge: VirtualBridge) -> None:
    """Test the whole update of a word booting SD with parallel configuration."""
    update = RcwManager(bridge).update_boot_media(BootMedia.SD)
    assert update.changed
    assert update.written
    assert update.before == ResetConfigWord(0x40, RcwView.SD)
    assert update.after == ResetConfigWord(0x000F0140, RcwView.SD)
    assert update.after.get_fields()["wait"] == 7
    assert bridge.divider == 27
    assert bridge.writes == [bytes.fromhex("0040010f00")]
    assert bridge.reads == [(0, 4), (0, 4)]
    assert bridge.memory[:4] == bytes.fromhex("40010f00")
    assert bridge.memory[4:] == b"\xff" * 124


def test_up_to_date() -> None:
    with VirtualBridge(bytes.fromhex("40010f00")) as bridge:
        update = RcwManager(bridge).update_boot_media(BootMedia.SD)
    assert not update.changed
    assert not update.written
    assert bridge.writes == []
    assert bridge.reads == [(0, 4)]


def test_dry_run(bridge: VirtualBridge) -> None:
    update = RcwManager(bridge).update_boot_media(BootMedia.QSPI, dry_run=True)
    assert update.changed
    assert update.planned == ResetConfigWord(0x100, RcwView.QSPI)
    assert update.after is None
    assert bridge.writes == []


def test_custom_address_and_divider() -> None:
    with VirtualBridge(bytes.fromhex("60010000"), address=0x51) as bridge:
        update = RcwManager(bridge, address=0x51, divider=117).update_boot_media(BootMedia.MMC)
    assert not update.changed
    assert bridge.divider == 117


@pytest.mark.parametrize("state, cancels", [(0x00, 0), (0x25, 1), (0x52, 1)])
def test_check_bus_state(state: int, cancels: int) -> None:
    """Test a pending transfer is cancelled before the first read.

    :param state: Engine state reported by the bridge.
    :param cancels: Expected number of cancellations.
    """
    with VirtualBridge(state=state) as bridge:
        assert RcwManager(bridge).check_bus_state() == state
        assert bridge.cancel_count == cancels
        assert bridge.state == 0


def test_verification_mismatch(bridge: VirtualBridge) -> None:
    bridge.corrupt_writes = True
    with pytest.raises(RCWVerificationError, match="written 40 01 0f 00, read 40 01 0f 01"):
        RcwManager(bridge).update_boot_media(BootMedia.SD)


def test_divider_failure_stops_before_read(bridge: VirtualBridge) -> None:
    bridge.fail_on = {"divider": 1}
    with pytest.raises(RCWTransportError):
        RcwManager(bridge).update_boot_media(BootMedia.SD)
    assert bridge.reads == []


@pytest.mark.parametrize("operation", ["state", "read", "write"])
def test_transport_error_propagates(bridge: VirtualBridge, operation: str) -> None:
    bridge.fail_on = {operation: 1}
    with pytest.raises(RCWTransportError) as exc_info:
        RcwManager(bridge).update_boot_media(BootMedia.SD)
    assert exc_info.value.status == 0x44


def test_read_back_failure(bridge: VirtualBridge) -> None:
    """Test the verification read failure leaves the written word in place."""
    bridge.fail_on = {"read": 2}
    manager = RcwManager(bridge)
    with pytest.raises(RCWTransportError):
        manager.update_boot_media(BootMedia.SD)
    assert bridge.memory[:4] == bytes.fromhex("40010f00")


def test_compare() -> None:
    RcwManager.compare(b"\x01\x02", b"\x01\x02")
    with pytest.raises(RCWVerificationError):
        RcwManager.compare(b"\x01\x02", b"\x01\x03")


def test_stage_hook(bridge: VirtualBridge) -> None:
    """Test every step of an update runs inside the stage hook, in order."""
    steps: list[RcwStep] = []

    @contextlib.contextmanager
    def record(step: RcwStep) -> Iterator[None]:
        steps.append(step)
        yield

    RcwManager(bridge, stage=record).update_boot_media(BootMedia.SD)
    assert steps == [
        RcwStep.STATE,
        RcwStep.DIVIDER,
        RcwStep.READ,
        RcwStep.WRITE,
        RcwStep.READ_BACK,
        RcwStep.COMPARE,
    ]


def test_stage_hook_sees_failure(bridge: VirtualBridge) -> None:
    """Test the failing step is reported to the stage hook that wraps it."""
    failed: list[RcwStep] = []

    @contextlib.contextmanager
    def record(step: RcwStep) -> Iterator[None]:
        try:
            yield
        except RCWError:
            failed.append(step)
            raise

    bridge.fail_on = {"read": 2}
    with pytest.raises(RCWTransportError):
        RcwManager(bridge, stage=record).update_boot_media(BootMedia.SD)
    assert failed == [RcwStep.READ_BACK]


def test_prepare_once(bridge: VirtualBridge) -> None:
    manager = RcwManager(bridge)
    manager.prepare()
    manager.update_boot_media(BootMedia.SD)
    assert bridge.calls["state"] == 1
    assert bridge.calls["divider"] == 1
