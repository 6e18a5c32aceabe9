# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/__init__.py

"""dffbench: a self-checking verification bench for a one-bit register.

The register under test is a D flip-flop with a synchronous, active-high
reset. The bench drives randomized stimulus into it, samples its output after
every rising edge, and scores each observed cycle against the expected one.

Main Components:

dv:
    The cocotb/pyuvm verification environment: stimulus records, channels,
    the shared interface handle, generator, driver, monitor, scoreboard,
    coverage, environment, and pyuvm tests.

rtl:
    The SystemVerilog register used as the device under test.

tools:
    Command-line tools to build and run the bench (dffbench-dv) and to run
    YAML-defined regressions (dffbench-regress).

utils:
    Common helpers shared by the tools.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

try:
    __version__ = pkg_version("dffbench")
except PackageNotFoundError:
    __version__ = "0+local"
