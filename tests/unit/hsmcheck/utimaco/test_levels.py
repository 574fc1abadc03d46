#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import pytest

from hsmcheck.utimaco import levels
from hsmcheck.utimaco.parse import BatteryRecord, StateFlag
from hsmcheck.utimaco.report import CheckResult, State


@pytest.mark.parametrize(
    "load, state, text",
    [
        pytest.param(19.9, State.OK, "OK: Load: 19.9 % < 20", id="ok"),
        pytest.param(20.0, State.WARNING, "WARNING: Load: 20.0 % >= 20", id="warn boundary"),
        pytest.param(39.9, State.WARNING, "WARNING: Load: 39.9 % >= 20", id="warn"),
        pytest.param(40.0, State.CRITICAL, "CRITICAL: Load: 40.0 % >= 40", id="crit boundary"),
    ],
)
def test_check_load(load: float, state: State, text: str) -> None:
    assert levels.check_load(load, (20, 40)) == CheckResult(
        state, text, f"load={load}%;20;40;"
    )


@pytest.mark.parametrize(
    "uptime, expected_state",
    [
        (0, State.CRITICAL),
        (2, State.WARNING),
        (7, State.OK),
    ],
)
def test_check_uptime(uptime: int, expected_state: State) -> None:
    result = levels.check_uptime(uptime, (7, 1))
    assert result.state is expected_state
    assert result.perfdata == f"uptime={uptime};7;1"


def test_check_uptime_default_levels() -> None:
    assert levels.check_uptime(0, (1, 1)) == CheckResult(
        State.CRITICAL, "CRITICAL: status uptime 0 days < 1 days", "uptime=0;1;1"
    )
    assert levels.check_uptime(1, (1, 1)).state is State.OK


@pytest.mark.parametrize(
    "fan_speed, expected_state",
    [
        pytest.param(2499, State.CRITICAL, id="too slow"),
        pytest.param(2500, State.OK, id="lower boundary"),
        pytest.param(6000, State.OK, id="upper boundary"),
        pytest.param(6001, State.WARNING, id="too fast"),
    ],
)
def test_check_fan_speed(fan_speed: int, expected_state: State) -> None:
    result = levels.check_fan_speed(fan_speed, (6000, 2500))
    assert result.state is expected_state
    assert result.perfdata == f"fan_speed={fan_speed};6000;2500"


def test_check_fan_speed_texts() -> None:
    assert levels.check_fan_speed(4530, (6000, 2500)).text == (
        "OK: fan_speed: 4530 rpm >= 2500 rpm and <= 6000 rpm"
    )
    assert levels.check_fan_speed(6500, (6000, 2500)).text == (
        "WARNING: status fan_speed 6500 rpm > 6000 rpm"
    )


@pytest.mark.parametrize(
    "cpu_temp, expected_state",
    [
        (36.5, State.OK),
        (38.0, State.OK),
        (38.5, State.WARNING),
        (45.0, State.WARNING),
        (45.1, State.CRITICAL),
    ],
)
def test_check_cpu_temp(cpu_temp: float, expected_state: State) -> None:
    result = levels.check_cpu_temp(cpu_temp, (38, 45))
    assert result.state is expected_state
    assert result.perfdata == f"cpu_temp={cpu_temp};38;45"


def test_check_redundant_psu() -> None:
    assert levels.check_redundant_psu("OK") == CheckResult(
        State.OK, "OK: status redundant psu: OK"
    )
    assert levels.check_redundant_psu("FAILED") == CheckResult(
        State.CRITICAL, "CRITICAL: status redundant psu FAILED != OK"
    )


@pytest.mark.parametrize(
    "count, expected_state",
    [
        (0, State.OK),
        (64, State.OK),
        (65, State.WARNING),
        (99, State.WARNING),
        (100, State.CRITICAL),
    ],
)
def test_check_connections(count: int, expected_state: State) -> None:
    result = levels.check_connections(count, (65, 100))
    assert result.state is expected_state
    assert result.perfdata == f"connections={count};65;100;"


_HEALTHY_FLAGS = [
    StateFlag("alarm", "OFF"),
    StateFlag("mode", "Operational Mode"),
    StateFlag("state", "INITIALIZED (0x00100004)"),
]


class TestCheckStateFlags:
    def test_all_ok(self) -> None:
        assert levels.check_state_flags(_HEALTHY_FLAGS) == CheckResult(
            State.OK,
            "OK: state is OK",
            multiline=(
                "OK: GetState: alarm: OFF\n"
                "OK: GetState: mode: Operational Mode\n"
                "OK: GetState: state: INITIALIZED (0x00100004)"
            ),
        )

    @pytest.mark.parametrize(
        "flag, text",
        [
            pytest.param(
                StateFlag("alarm", "ON"),
                "CRITICAL: alarm != OFF: ON",
                id="alarm",
            ),
            pytest.param(
                StateFlag("mode", "Maintenance Mode"),
                "CRITICAL: mode != Operational Mode: Maintenance Mode",
                id="mode",
            ),
            pytest.param(
                StateFlag("state", "DEFECT (0x00000000)"),
                "CRITICAL: state != INITIALIZED (0x00100004): DEFECT (0x00000000)",
                id="state",
            ),
        ],
    )
    def test_one_mismatch(self, flag: StateFlag, text: str) -> None:
        flags = [flag if f.name == flag.name else f for f in _HEALTHY_FLAGS]
        result = levels.check_state_flags(flags)
        assert result.state is State.CRITICAL
        assert result.text == text
        assert flag.name not in [line.split(": ")[2] for line in result.multiline.splitlines()]
        assert len(result.multiline.splitlines()) == 2

    def test_all_mismatch(self) -> None:
        result = levels.check_state_flags(
            [StateFlag("alarm", "ON"), StateFlag("mode", "Boot Mode")]
        )
        assert result.text == (
            "CRITICAL: alarm != OFF: ON CRITICAL: mode != Operational Mode: Boot Mode"
        )
        assert result.multiline == ""


class TestCheckBatteries:
    def test_all_ok(self) -> None:
        assert levels.check_batteries(
            [BatteryRecord("carrier", "ok", 3.06), BatteryRecord("external", "ok", 3.65)]
        ) == CheckResult(
            State.OK,
            "OK: carrier Battery is ok == ok (3.06 V)\nOK: external Battery is ok == ok (3.65 V)",
            "battery_carrier=3.06 battery_external=3.65",
        )

    def test_low_battery(self) -> None:
        assert levels.check_batteries(
            [BatteryRecord("carrier", "low", 2.573), BatteryRecord("external", "ok", 3.65)]
        ) == CheckResult(
            State.CRITICAL,
            "CRITICAL: carrier Battery is low != ok (2.573 V) "
            "OK: external Battery is ok == ok (3.65 V)",
            "battery_carrier=2.573 battery_external=3.65",
        )

    def test_status_is_case_sensitive(self) -> None:
        assert levels.check_batteries([BatteryRecord("carrier", "OK", 3.0)]).state is (
            State.CRITICAL
        )

    def test_no_battery(self) -> None:
        assert levels.check_batteries([]).state is State.UNKNOWN


def test_parse_failure_names_subcommand() -> None:
    assert levels.parse_failure("CSLGetStatus", "Status") == CheckResult(
        State.UNKNOWN,
        "UNKNOWN: Status output does not match regex, check output of csadm CSLGetStatus",
    )
