#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

# Parsers for the text output of the Utimaco ``csadm`` administration tool.
# None of these functions raise on unexpected input. A parser that finds
# nothing it recognizes returns None (or an empty sequence) and leaves it to
# the caller to turn that into an UNKNOWN result.

# Example output of csadm Dev=hsm1 CSLGetLoad
# CryptoServer load: 7.7 %

# Example output of csadm Dev=hsm1 CSLGetStatus
# system time                = 2021-05-26 16:48:51 (UTC)
# uptime                     = 40 days, 3:21:09
# fan speed [rpm]            = 4530
# CPU temperature [C]        = 36.5
# redundant power supply     = OK

# Example output of csadm Dev=hsm1 CSLGetConnections
# 1 TCP 10.0.0.12:52118 -> 10.0.0.3:288 (idle 2 s)
# 2 TCP 10.0.0.13:44302 -> 10.0.0.3:288 (idle 0 s)

# Example output of csadm Dev=hsm1 GetState
# mode      = Operational Mode
# state     = INITIALIZED (0x00100004)
# temp      = 35.3 [C]
# alarm     = OFF
# bl_ver    = 5.01.4.0      (Model: Se-Series Gen2)

# Example output of csadm Dev=hsm1 GetBattState
# Carrier Battery: ok (3.06 V)
# External Battery: ok (3.65 V)

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

_LOAD = re.compile(r"([0-9]+[.][0-9]+)\s+%")

_STATUS = re.compile(
    r"uptime\s+=\s+(?P<uptime_days>[0-9]+)\s+day.*\n"
    r"fan speed \[rpm\]\s+=\s+(?P<fan_speed>[0-9]+).*\n"
    r"CPU temperature \[C\]\s+=\s+(?P<cpu_temp>[0-9]+\.[0-9]+).*\n"
    r"redundant power supply\s+=\s+(?P<redundant_psu_status>.*)"
)

_CONNECTION = re.compile(r"^([0-9]+)\s+TCP\s+")

# Checked in this order, the first one that matches a line wins
_STATE_FLAGS = (
    ("alarm", re.compile(r"(alarm)\s+=\s+([^ ]*)")),
    ("mode", re.compile(r"(mode)\s+=\s+(.*)")),
    ("state", re.compile(r"(state)\s+=\s+(.*)")),
)

_BATTERY = re.compile(
    r"(?P<type>[^\s]+) Battery:\s+(?P<status>[^\s]*)\s+\((?P<voltage>[0-9]+\.[0-9]*)\s+V\)"
)


@dataclass(frozen=True)
class LoadRecord:
    load: float


@dataclass(frozen=True)
class StatusRecord:
    uptime_days: int
    fan_speed: int
    cpu_temp: float
    redundant_psu_status: str


@dataclass(frozen=True)
class ConnectionsRecord:
    count: int


@dataclass(frozen=True)
class StateFlag:
    name: str
    value: str


@dataclass(frozen=True)
class BatteryRecord:
    type: str
    status: str
    voltage: float


@dataclass(frozen=True)
class BatteryParseError:
    line: str


def parse_load(output: str) -> LoadRecord | None:
    """
    >>> parse_load("CryptoServer load: 7.7 %")
    LoadRecord(load=7.7)
    >>> parse_load("load: n/a") is None
    True
    """
    if (match := _LOAD.search(output)) is None:
        return None
    return LoadRecord(float(match.group(1)))


def parse_status(output: str) -> StatusRecord | None:
    if (match := _STATUS.search(output)) is None:
        return None
    return StatusRecord(
        uptime_days=int(match["uptime_days"]),
        fan_speed=int(match["fan_speed"]),
        cpu_temp=float(match["cpu_temp"]),
        redundant_psu_status=match["redundant_psu_status"].strip(),
    )


def parse_connections(output: str) -> ConnectionsRecord:
    """Counts the TCP connection lines, the leading number is just an index

    >>> parse_connections("1 TCP 10.0.0.12:52118\\n7 TCP 10.0.0.13:44302\\n3 UDP x\\n")
    ConnectionsRecord(count=2)
    """
    return ConnectionsRecord(
        sum(1 for line in output.splitlines() if _CONNECTION.match(line) is not None)
    )


def parse_state_flags(output: str) -> Sequence[StateFlag]:
    flags = []
    for line in output.splitlines():
        for name, regex in _STATE_FLAGS:
            if (match := regex.search(line)) is not None:
                flags.append(StateFlag(name, match.group(2).strip()))
                break
    return flags


def parse_batteries(output: str) -> Sequence[BatteryRecord] | BatteryParseError:
    """Every non-empty line has to describe one battery

    >>> parse_batteries("Carrier Battery: ok (3.06 V)\\n")
    [BatteryRecord(type='carrier', status='ok', voltage=3.06)]
    >>> parse_batteries("Carrier Battery: ok (3.06 V)\\ngarbage")
    BatteryParseError(line='garbage')
    """
    batteries = []
    for line in output.splitlines():
        if not line.strip():
            continue
        if (match := _BATTERY.search(line)) is None:
            return BatteryParseError(line)
        batteries.append(
            BatteryRecord(
                type=match["type"].lower(),
                status=match["status"],
                voltage=float(match["voltage"]),
            )
        )
    return batteries
