#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import logging
import sys
from typing import IO

logger = logging.getLogger("hsmcheck")


def get_formatter(
    format_str: str = "%(asctime)s [%(levelno)s] [%(name)s %(process)d] %(message)s",
) -> logging.Formatter:
    """Returns a new message formater instance that uses the standard
    log format by default. You can also set another format if you like."""
    return logging.Formatter(format_str)


def clear_console_logging() -> None:
    logger.handlers[:] = []
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.INFO)


# Set default logging handler to avoid "No handler found" warnings.
clear_console_logging()


def setup_console_logging(stream: IO[str] | None = None) -> None:
    """This method enables all log messages to be written to the console
    without any additional information like date/time, logger-name. Just
    the log line is written.

    Like the check result, the trace goes to stdout and ends up in front of it.
    """
    setup_logging_handler(sys.stdout if stream is None else stream, get_formatter("%(message)s"))


def setup_logging_handler(stream: IO[str], formatter: logging.Formatter | None = None) -> None:
    """This method enables all log messages to be written to the given
    stream file object."""
    if formatter is None:
        formatter = get_formatter("%(asctime)s [%(levelno)s] [%(name)s] %(message)s")

    handler = logging.StreamHandler(stream=stream)
    handler.setFormatter(formatter)

    del logger.handlers[:]  # Remove all previously existing handlers
    logger.addHandler(handler)


def verbosity_to_log_level(verbosity: int) -> int:
    """Values for "verbosity":

      0: enables INFO and above
      1: enables DEBUG and above (ALL messages)

    >>> verbosity_to_log_level(0) == logging.INFO
    True
    >>> verbosity_to_log_level(3) == logging.DEBUG
    True
    """
    if verbosity == 0:
        return logging.INFO
    return logging.DEBUG


def debug_header(name: str) -> None:
    """Separates the trace of the individual checks in the debug output"""
    logger.debug("# ------------------------------")
    logger.debug("# %s", name)
    logger.debug("# ------------------------------")
