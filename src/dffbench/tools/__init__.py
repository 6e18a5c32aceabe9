# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/tools/__init__.py

"""dffbench tools package.

Command-line tools for building and running the register bench with cocotb,
pyuvm, and pytest.

Command-line tools:
- dffbench-dv: Build the DUT and run the pyuvm tests for one or more seeds
- dffbench-regress: Run YAML-defined regression suites
- dffbench-report: Summarize run manifests
"""
