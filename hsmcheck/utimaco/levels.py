#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Evaluation of parsed ``csadm`` values against warn/crit levels

Most values are "high is bad". Uptime is "low is bad", and the fan speed is
bad when too low (critical) or when spinning above the warning level.
"""

from __future__ import annotations

from collections.abc import Sequence

from hsmcheck.utimaco.parse import BatteryRecord, StateFlag
from hsmcheck.utimaco.report import CheckResult, State

Number = int | float
Levels = tuple[Number, Number]

EXPECTED_STATE_FLAGS = {
    "alarm": "OFF",
    "mode": "Operational Mode",
    "state": "INITIALIZED (0x00100004)",
}

PSU_OK = "OK"
BATTERY_OK = "ok"


def parse_failure(subcommand: str, what: str) -> CheckResult:
    return CheckResult(
        State.UNKNOWN,
        f"UNKNOWN: {what} output does not match regex, check output of csadm {subcommand}",
    )


def check_load(load: float, levels: Levels) -> CheckResult:
    """
    >>> check_load(39.9, (20, 40))
    CheckResult(state=<State.WARNING: 1>, text='WARNING: Load: 39.9 % >= 20', perfdata='load=39.9%;20;40;', multiline='')
    """
    warn, crit = levels
    perfdata = f"load={load}%;{warn};{crit};"
    if load >= crit:
        return CheckResult(State.CRITICAL, f"CRITICAL: Load: {load} % >= {crit}", perfdata)
    if load >= warn:
        return CheckResult(State.WARNING, f"WARNING: Load: {load} % >= {warn}", perfdata)
    return CheckResult(State.OK, f"OK: Load: {load} % < {warn}", perfdata)


def check_uptime(uptime: int, levels: Levels) -> CheckResult:
    warn, crit = levels
    perfdata = f"uptime={uptime};{warn};{crit}"
    if uptime < crit:
        return CheckResult(
            State.CRITICAL, f"CRITICAL: status uptime {uptime} days < {crit} days", perfdata
        )
    if uptime < warn:
        return CheckResult(
            State.WARNING, f"WARNING: status uptime {uptime} days < {warn} days", perfdata
        )
    return CheckResult(State.OK, f"OK: uptime: {uptime} days >= {warn} days", perfdata)


def check_fan_speed(fan_speed: int, levels: Levels) -> CheckResult:
    warn, crit = levels
    perfdata = f"fan_speed={fan_speed};{warn};{crit}"
    if fan_speed < crit:
        return CheckResult(
            State.CRITICAL, f"CRITICAL: status fan_speed {fan_speed} rpm < {crit} rpm", perfdata
        )
    if fan_speed > warn:
        return CheckResult(
            State.WARNING, f"WARNING: status fan_speed {fan_speed} rpm > {warn} rpm", perfdata
        )
    return CheckResult(
        State.OK,
        f"OK: fan_speed: {fan_speed} rpm >= {crit} rpm and <= {warn} rpm",
        perfdata,
    )


def check_cpu_temp(cpu_temp: float, levels: Levels) -> CheckResult:
    warn, crit = levels
    perfdata = f"cpu_temp={cpu_temp};{warn};{crit}"
    if cpu_temp > crit:
        return CheckResult(
            State.CRITICAL, f"CRITICAL: status cpu_temp {cpu_temp} C > {crit} C", perfdata
        )
    if cpu_temp > warn:
        return CheckResult(
            State.WARNING, f"WARNING: status cpu_temp {cpu_temp} C > {warn} C", perfdata
        )
    return CheckResult(State.OK, f"OK: cpu_temp: {cpu_temp} C <= {warn} C", perfdata)


def check_redundant_psu(status: str) -> CheckResult:
    if status != PSU_OK:
        return CheckResult(
            State.CRITICAL, f"CRITICAL: status redundant psu {status} != {PSU_OK}"
        )
    return CheckResult(State.OK, f"OK: status redundant psu: {status}")


def check_connections(count: int, levels: Levels) -> CheckResult:
    """
    >>> check_connections(65, (65, 100)).state
    <State.WARNING: 1>
    """
    warn, crit = levels
    perfdata = f"connections={count};{warn};{crit};"
    if count >= crit:
        return CheckResult(State.CRITICAL, f"CRITICAL: Connections: {count} >= {crit}", perfdata)
    if count >= warn:
        return CheckResult(State.WARNING, f"WARNING: Connections: {count} >= {warn}", perfdata)
    return CheckResult(State.OK, f"OK: Connections: {count} < {warn}", perfdata)


def check_state_flags(flags: Sequence[StateFlag]) -> CheckResult:
    """Compares the GetState flags with the values of a healthy, operational device

    Matching flags are always listed in the long output. Each mismatch makes
    the check critical and is named in the summary.
    """
    alarms = []
    details = []
    for flag in flags:
        expected = EXPECTED_STATE_FLAGS[flag.name]
        if flag.value != expected:
            alarms.append(f"CRITICAL: {flag.name} != {expected}: {flag.value}")
        else:
            details.append(f"OK: GetState: {flag.name}: {flag.value}")

    multiline = "\n".join(details)
    if alarms:
        return CheckResult(State.CRITICAL, " ".join(alarms), multiline=multiline)
    return CheckResult(State.OK, "OK: state is OK", multiline=multiline)


def check_battery(battery: BatteryRecord) -> CheckResult:
    perfdata = f"battery_{battery.type}={battery.voltage}"
    if battery.status != BATTERY_OK:
        return CheckResult(
            State.CRITICAL,
            f"CRITICAL: {battery.type} Battery is {battery.status} != {BATTERY_OK} ({battery.voltage} V)",
            perfdata,
        )
    return CheckResult(
        State.OK,
        f"OK: {battery.type} Battery is {battery.status} == {BATTERY_OK} ({battery.voltage} V)",
        perfdata,
    )


def check_batteries(batteries: Sequence[BatteryRecord]) -> CheckResult:
    """Merges the per battery results into one

    All OK: one battery per line, so they show up nicely in the long output.
    Otherwise everything has to fit into the summary line.
    """
    if not batteries:
        return CheckResult(State.UNKNOWN, "UNKNOWN: no battery found in output of csadm GetBattState")

    results = [check_battery(battery) for battery in batteries]
    state = State.worst(*(r.state for r in results))
    return CheckResult(
        state,
        ("\n" if state is State.OK else " ").join(r.text for r in results),
        " ".join(r.perfdata for r in results),
    )
