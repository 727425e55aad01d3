# Copyright 2020-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

__version__ = "1.0.4"
