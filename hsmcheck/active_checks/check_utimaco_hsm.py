#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_utimaco_hsm - Monitor Utimaco CryptoServer hardware security modules"""

# The appliance is queried with the csadm tool shipped by Utimaco:
#   csadm Dev=<host> CSLGetLoad | CSLGetStatus | GetState | CSLGetConnections
#                    | GetBattState | CSLGetVersion
# Before that, check_ping of the monitoring plugins makes sure the
# appliance is reachable at all. If it is not, nothing else is queried.

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel

from hsmcheck import __version__
from hsmcheck.exceptions import MKBailOut
from hsmcheck.utils import log
from hsmcheck.utimaco.checks import CheckParams, get_version, run_checks
from hsmcheck.utimaco.csadm import (
    CheckPing,
    Csadm,
    csadm_path,
    CsadmProto,
    DEFAULT_PING_COMMAND,
    DEFAULT_PLUGIN_DIR,
    PingProto,
)
from hsmcheck.utimaco.report import Report, State

LOGGER = logging.getLogger(__name__)


class Args(BaseModel, frozen=True):
    host: None | str
    debug: bool
    plugin_dir: Path
    ping_command: Path
    timeout: None | float
    params: CheckParams


def _number(value: str) -> int | float:
    """
    >>> _number("20"), _number("38.5")
    (20, 38.5)
    """
    try:
        return int(value)
    except ValueError:
        return float(value)


def _add_levels(
    parser: argparse.ArgumentParser, name: str, default: tuple[int, int], help_text: str
) -> None:
    parser.add_argument(
        f"--{name}-levels",
        type=_number,
        nargs=2,
        default=list(default),
        metavar=("WARNING", "CRITICAL"),
        help=f"{help_text} (Defaults: {default[0]} and {default[1]})",
    )


def parse_arguments(argv: Sequence[str]) -> Args:
    parser = argparse.ArgumentParser(
        prog="check_utimaco_hsm",
        description=__doc__,
    )
    parser.add_argument(
        "-H",
        "--host",
        default=None,
        metavar="CRYPTOSERVER",
        help="Utimaco CryptoServer appliance FQDN or IP",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Print every executed command and all intermediate results, let Python "
        "exceptions come through",
    )
    parser.add_argument(
        "--plugin-dir",
        type=Path,
        default=DEFAULT_PLUGIN_DIR,
        metavar="DIRECTORY",
        help=f"Directory containing the csadm binary (Default: {DEFAULT_PLUGIN_DIR})",
    )
    parser.add_argument(
        "--ping-command",
        type=Path,
        default=DEFAULT_PING_COMMAND,
        metavar="PATH",
        help=f"Path to the check_ping plugin (Default: {DEFAULT_PING_COMMAND})",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Seconds before a csadm call is aborted (Default: no timeout)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    _add_levels(parser, "load", (20, 40), "CryptoServer load in percent")
    _add_levels(parser, "uptime", (1, 1), "Uptime in days below which to alert")
    _add_levels(
        parser,
        "fan-speed",
        (6000, 2500),
        "Fan speed in rpm: warn above the first, crit below the second value",
    )
    _add_levels(parser, "cpu-temp", (38, 45), "CPU temperature in degrees Celsius")
    _add_levels(parser, "connections", (65, 100), "Number of open TCP connections")

    args = parser.parse_args(argv)
    return Args(
        host=args.host,
        debug=args.debug,
        plugin_dir=args.plugin_dir,
        ping_command=args.ping_command,
        timeout=args.timeout,
        params=CheckParams(
            load_levels=tuple(args.load_levels),
            uptime_levels=tuple(args.uptime_levels),
            fan_speed_levels=tuple(args.fan_speed_levels),
            cpu_temp_levels=tuple(args.cpu_temp_levels),
            connections_levels=tuple(args.connections_levels),
        ),
    )


def preflight(args: Args) -> str:
    """Make sure we have everything needed to query the appliance"""
    if not csadm_path(args.plugin_dir).exists():
        raise MKBailOut(
            "ERROR: You need to make sure the csadm binary is available and executable! "
            f"Checked {csadm_path(args.plugin_dir)}"
        )
    if not args.host:
        raise MKBailOut(
            "ERROR: You need to specify your Utimaco CryptoServer appliance FQDN or IP "
            "with --host / -H parameter"
        )
    return args.host


def output_check_result(s: str) -> None:
    sys.stdout.write("%s\n" % s)


def check_utimaco_hsm(
    host: str,
    args: Args,
    csadm: CsadmProto,
    ping: PingProto,
) -> tuple[State, str]:
    log.debug_header("check_ping")
    if not ping(host):
        return State.CRITICAL, f"CRITICAL: can't ping {host}"

    results = run_checks(csadm, args.params, debug=args.debug)
    report = Report.from_results(host, get_version(csadm), results)
    LOGGER.debug("result array: %r", results)
    return report.state, report.render()


def main(
    argv: Sequence[str] | None = None,
    csadm: CsadmProto | None = None,
    ping: PingProto | None = None,
) -> int:
    args = parse_arguments(sys.argv[1:] if argv is None else argv)

    if args.debug:
        log.setup_console_logging()
        log.logger.setLevel(log.verbosity_to_log_level(1))

    try:
        host = preflight(args)
    except MKBailOut as e:
        output_check_result(str(e))
        return State.UNKNOWN

    state, output = check_utimaco_hsm(
        host,
        args,
        csadm or Csadm(host, args.plugin_dir, args.timeout),
        ping or CheckPing(args.ping_command),
    )
    output_check_result(output)
    return state


if __name__ == "__main__":
    sys.exit(main())
