#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from __future__ import annotations

import enum
import logging
import os
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from hsmcheck.exceptions import CommandError

LOGGER = logging.getLogger(__name__)

DEFAULT_PLUGIN_DIR = Path("/etc/utimaco/bin")
DEFAULT_PING_COMMAND = Path("/usr/lib/nagios/plugins/check_ping")

# Round trip average 10ms/20ms, packet loss 2%/5%, 2 seconds timeout
PING_ARGUMENTS = ("-w", "10,2%", "-c", "20,5%", "-t", "2")


class SubCommand(enum.Enum):
    GET_LOAD = "CSLGetLoad"
    GET_STATUS = "CSLGetStatus"
    GET_CONNECTIONS = "CSLGetConnections"
    GET_STATE = "GetState"
    GET_BATTERY_STATE = "GetBattState"
    GET_VERSION = "CSLGetVersion"


class CsadmProto(Protocol):
    def __call__(self, subcommand: SubCommand) -> str: ...


class PingProto(Protocol):
    def __call__(self, host: str) -> bool: ...


def csadm_path(plugin_dir: Path) -> Path:
    return plugin_dir / "csadm"


def _run(cmd: Sequence[str], timeout: float | None) -> subprocess.CompletedProcess[str]:
    LOGGER.debug("executing %s", subprocess.list2cmdline(cmd))
    try:
        return subprocess.run(
            cmd,
            capture_output=True,
            encoding="utf8",
            errors="replace",
            check=False,
            timeout=timeout,
            env={k: v for k, v in os.environ.items() if k != "LANG"},
        )
    except subprocess.TimeoutExpired as e:
        raise CommandError(cmd, f"{cmd[-1]} timed out after {timeout} seconds") from e
    except OSError as e:
        raise CommandError(cmd, f"cannot execute {cmd[0]}: {e.strerror}") from e


class Csadm:
    """Runs ``csadm Dev=<host> <subcommand>`` and returns its standard output"""

    def __init__(self, host: str, plugin_dir: Path, timeout: float | None = None) -> None:
        self.host = host
        self.executable = csadm_path(plugin_dir)
        self.timeout = timeout

    def command(self, subcommand: SubCommand) -> list[str]:
        """
        >>> Csadm("hsm1", Path("/opt/utimaco")).command(SubCommand.GET_LOAD)
        ['/opt/utimaco/csadm', 'Dev=hsm1', 'CSLGetLoad']
        """
        return [str(self.executable), f"Dev={self.host}", subcommand.value]

    def __call__(self, subcommand: SubCommand) -> str:
        cmd = self.command(subcommand)
        completed_process = _run(cmd, self.timeout)
        if completed_process.stderr:
            LOGGER.debug("stderr: %s", completed_process.stderr.rstrip())
        if completed_process.returncode:
            raise CommandError(
                cmd,
                "csadm %s failed with exit code %d: %s"
                % (
                    subcommand.value,
                    completed_process.returncode,
                    (completed_process.stderr or completed_process.stdout).strip(),
                ),
            )
        LOGGER.debug("%s", completed_process.stdout.rstrip())
        return completed_process.stdout


class CheckPing:
    """Pre-flight reachability probe using the monitoring plugins' check_ping"""

    def __init__(self, executable: Path) -> None:
        self.executable = executable

    def __call__(self, host: str) -> bool:
        cmd = [str(self.executable), "-H", host, *PING_ARGUMENTS]
        try:
            completed_process = _run(cmd, None)
        except CommandError as e:
            LOGGER.debug("%s", e)
            return False
        LOGGER.debug("%s", completed_process.stdout.rstrip())
        return completed_process.returncode == 0
