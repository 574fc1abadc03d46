#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Check results and their aggregation into one active check output

Every check contributes one :class:`CheckResult`. The :class:`Report` merges
them: alarms (WARNING and worse) go to the first line, OK texts are collected
in the long output below it, and the performance data of all checks is
concatenated.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass, field

from hsmcheck import __version__

PRODUCT_LABEL = "Utimaco CryptoServer"
OK_PLACEHOLDER = f"OK - v{__version__}"


class State(enum.IntEnum):
    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    @classmethod
    def worst(cls, *states: State) -> State:
        """
        >>> State.worst(State.OK, State.UNKNOWN, State.CRITICAL)
        <State.UNKNOWN: 3>
        >>> State.worst()
        <State.OK: 0>
        """
        return cls(max(states, default=cls.OK))


@dataclass(frozen=True)
class CheckResult:
    state: State
    text: str
    perfdata: str = ""
    multiline: str = ""


@dataclass
class Report:
    host: str
    version: str
    state: State = State.OK
    crit_text: list[str] = field(default_factory=list)
    warn_text: list[str] = field(default_factory=list)
    unknown_text: list[str] = field(default_factory=list)
    multiline: list[str] = field(default_factory=list)
    perfdata: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.multiline.append(f"OK: {self.version}")

    @classmethod
    def from_results(cls, host: str, version: str, results: Iterable[CheckResult]) -> Report:
        report = cls(host=host, version=version)
        for result in results:
            report.add(result)
        return report

    def add(self, result: CheckResult) -> None:
        if result.perfdata:
            self.perfdata.append(result.perfdata)

        if result.state >= State.WARNING:
            self.state = State.worst(self.state, result.state)
            self._bucket(result.state).append(result.text)
        else:
            self.multiline.append(result.text)

        if result.multiline:
            self.multiline.append(result.multiline)

    def _bucket(self, state: State) -> list[str]:
        if state is State.UNKNOWN:
            return self.unknown_text
        if state is State.CRITICAL:
            return self.crit_text
        return self.warn_text

    @property
    def summary(self) -> str:
        # Critical first, then warning, then unknown
        return " ".join(self.crit_text + self.warn_text + self.unknown_text) or OK_PLACEHOLDER

    def render(self) -> str:
        """
        >>> print(Report(host="hsm1", version="CSLAN 4.1").render())
        OK - v0.1 Utimaco CryptoServer hsm1 CSLAN 4.1|
        OK: CSLAN 4.1
        """
        return "%s %s %s %s|%s\n%s" % (
            self.summary,
            PRODUCT_LABEL,
            self.host,
            self.version,
            " ".join(self.perfdata),
            "\n".join(self.multiline).rstrip("\n"),
        )
