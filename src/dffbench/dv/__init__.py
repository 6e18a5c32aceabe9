# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/__init__.py

"""Verification environment for the one-bit register.

Records and plumbing:
- DffItem: Immutable {d, reset, q} record
- DffChannel: Typed, unbounded, closable FIFO between stages
- DffIf / DffIfWriter: Signal bundle with a single claimable writer
- DffTaskGroup: Named cocotb tasks with bounded shutdown

Stages:
- DffGenerator: Random stimulus from an injected random.Random
- DffDriver: Reset sequence and one record per drive edge
- DffMonitor: Samples q after each rising edge plus a settle delay
- DffScoreboard: Positional comparison (classify, Verdict, DffScoreStats)
- DffCoverage: cocotb-coverage on d, reset and their cross

Glue:
- DffEnv: Builds and supervises the stages
- DffBaseTest: Settings -> config_db, clock driver, env
- DffClockDriver: Free-running clock
- DffTiming: Drive and sample points within a clock period
- DffRefModel: Cycle model used by the tests

Utilities:
- utils_dv: config_db accessors, signal helpers, error types
- utils_cli: env/plusarg settings and factory overrides

The pyuvm tests live in test_dff and are loaded by the cocotb runner, not
imported here.
"""

from __future__ import annotations

from dffbench import __version__

from . import utils_cli, utils_dv
from .dff_base_test import DffBaseTest
from .dff_channel import ChannelClosed, DffChannel
from .dff_clock_driver import DffClockDriver
from .dff_coverage import DffCoverage
from .dff_driver import DffDriver
from .dff_env import DffEnv
from .dff_generator import DffGenerator
from .dff_if import DffIf, DffIfWriter
from .dff_item import DffItem
from .dff_monitor import DffMonitor
from .dff_ref_model import DffRefModel
from .dff_scoreboard import DffScoreboard, DffScoreStats, Verdict, classify
from .dff_task_group import DffTaskGroup
from .dff_timing import DffTiming
from .utils_dv import ConfigKeyError, ProtocolError

__all__ = (
    "ChannelClosed",
    "ConfigKeyError",
    "DffBaseTest",
    "DffChannel",
    "DffClockDriver",
    "DffCoverage",
    "DffDriver",
    "DffEnv",
    "DffGenerator",
    "DffIf",
    "DffIfWriter",
    "DffItem",
    "DffMonitor",
    "DffRefModel",
    "DffScoreStats",
    "DffScoreboard",
    "DffTaskGroup",
    "DffTiming",
    "ProtocolError",
    "Verdict",
    "classify",
    "utils_cli",
    "utils_dv",
    "__version__",
)
