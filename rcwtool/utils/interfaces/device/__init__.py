#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2023,2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Low-level USB-to-I2C bridge device abstractions.

The abstract bridge defines what the RCW transaction layer needs from a
transport; concrete bridges implement it on top of a USB library.
"""
