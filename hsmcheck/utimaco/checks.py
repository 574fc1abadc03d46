#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""The individual checks of the Utimaco CryptoServer plug-in

Each check calls ``csadm`` once, parses the output and yields its results.
:func:`run_checks` executes them in a fixed order and makes sure that a
failing check does not affect the others.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence

import pydantic

from hsmcheck.exceptions import CommandError
from hsmcheck.utils.log import debug_header
from hsmcheck.utimaco import levels, parse
from hsmcheck.utimaco.csadm import CsadmProto, SubCommand
from hsmcheck.utimaco.report import CheckResult, State

LOGGER = logging.getLogger(__name__)

UNKNOWN_VERSION = "(unknown version)"


class CheckParams(pydantic.BaseModel, frozen=True):
    load_levels: levels.Levels = (20, 40)
    uptime_levels: levels.Levels = (1, 1)
    fan_speed_levels: levels.Levels = (6000, 2500)
    cpu_temp_levels: levels.Levels = (38, 45)
    connections_levels: levels.Levels = (65, 100)


CheckFunction = Callable[[CsadmProto, CheckParams], Iterable[CheckResult]]


def check_load(csadm: CsadmProto, params: CheckParams) -> Iterator[CheckResult]:
    if (record := parse.parse_load(csadm(SubCommand.GET_LOAD))) is None:
        yield levels.parse_failure(SubCommand.GET_LOAD.value, "Load")
        return
    LOGGER.debug("%r", record)
    yield levels.check_load(record.load, params.load_levels)


def check_status(csadm: CsadmProto, params: CheckParams) -> Iterator[CheckResult]:
    """Uptime, fan speed, CPU temperature and power supply from one CSLGetStatus call

    Without a parsable status block none of them can be evaluated, so a
    single UNKNOWN result is reported instead of four.
    """
    if (record := parse.parse_status(csadm(SubCommand.GET_STATUS))) is None:
        yield levels.parse_failure(SubCommand.GET_STATUS.value, "Status")
        return
    LOGGER.debug("%r", record)
    yield levels.check_uptime(record.uptime_days, params.uptime_levels)
    yield levels.check_fan_speed(record.fan_speed, params.fan_speed_levels)
    yield levels.check_cpu_temp(record.cpu_temp, params.cpu_temp_levels)
    yield levels.check_redundant_psu(record.redundant_psu_status)


def check_state(csadm: CsadmProto, params: CheckParams) -> Iterator[CheckResult]:
    if not (flags := parse.parse_state_flags(csadm(SubCommand.GET_STATE))):
        yield levels.parse_failure(SubCommand.GET_STATE.value, "State")
        return
    LOGGER.debug("%r", flags)
    yield levels.check_state_flags(flags)


def check_connections(csadm: CsadmProto, params: CheckParams) -> Iterator[CheckResult]:
    record = parse.parse_connections(csadm(SubCommand.GET_CONNECTIONS))
    LOGGER.debug("%r", record)
    yield levels.check_connections(record.count, params.connections_levels)


def check_battery(csadm: CsadmProto, params: CheckParams) -> Iterator[CheckResult]:
    batteries = parse.parse_batteries(csadm(SubCommand.GET_BATTERY_STATE))
    if isinstance(batteries, parse.BatteryParseError):
        LOGGER.debug("cannot parse line: %r", batteries.line)
        yield levels.parse_failure(SubCommand.GET_BATTERY_STATE.value, "Battery")
        return
    LOGGER.debug("%r", batteries)
    yield levels.check_batteries(batteries)


CHECKS: Sequence[tuple[str, CheckFunction]] = (
    ("check_load", check_load),
    ("check_status", check_status),
    ("check_state", check_state),
    ("check_connections", check_connections),
    ("check_battery", check_battery),
)


def _run_check(
    name: str,
    check: CheckFunction,
    csadm: CsadmProto,
    params: CheckParams,
    *,
    debug: bool,
) -> Sequence[CheckResult]:
    debug_header(name)
    try:
        results = list(check(csadm, params))
    except CommandError as e:
        results = [CheckResult(State.UNKNOWN, f"UNKNOWN: {e}")]
    except Exception as e:
        if debug:
            raise
        results = [CheckResult(State.UNKNOWN, f"UNKNOWN: Unhandled exception in {name}: {e!r}")]
    for result in results:
        LOGGER.debug("%r", result)
    return results


def run_checks(
    csadm: CsadmProto,
    params: CheckParams,
    *,
    debug: bool = False,
    checks: Sequence[tuple[str, CheckFunction]] = CHECKS,
) -> list[CheckResult]:
    return [
        result
        for name, check in checks
        for result in _run_check(name, check, csadm, params, debug=debug)
    ]


def get_version(csadm: CsadmProto) -> str:
    """The CSLAN version, only used to label the output"""
    debug_header("get_version")
    try:
        version = csadm(SubCommand.GET_VERSION).strip()
    except CommandError as e:
        LOGGER.debug("%s", e)
        return UNKNOWN_VERSION
    return version or UNKNOWN_VERSION
