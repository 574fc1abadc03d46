#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from collections.abc import Iterator
from pathlib import Path

import pytest

from tests.unit.mocks_and_helpers import FakeCsadm, HEALTHY_OUTPUT

from hsmcheck.utils import log


@pytest.fixture(name="healthy_csadm")
def fixture_healthy_csadm() -> FakeCsadm:
    return FakeCsadm(dict(HEALTHY_OUTPUT))


@pytest.fixture(name="plugin_dir")
def fixture_plugin_dir(tmp_path: Path) -> Path:
    (tmp_path / "csadm").touch(mode=0o755)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    log.clear_console_logging()
