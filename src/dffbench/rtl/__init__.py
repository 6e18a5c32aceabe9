# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/rtl/__init__.py

"""RTL sources for the register under test."""

from __future__ import annotations

from pathlib import Path

RTL_DIR: Path = Path(__file__).resolve().parent
TOPLEVEL: str = "dff"


def sources() -> list[Path]:
    """Return the HDL source files of the DUT, in compile order."""
    return [RTL_DIR / "dff.sv"]
