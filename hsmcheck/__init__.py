#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Monitoring plug-in for Utimaco CryptoServer hardware security modules.

The plug-in queries the appliance through the vendor's ``csadm`` tool and
reports in the Nagios/Icinga active check format."""

__version__ = "0.1"
