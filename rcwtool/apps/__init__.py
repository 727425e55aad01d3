#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2020-2022,2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""rcwtool applications package."""
