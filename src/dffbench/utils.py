# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/utils.py

"""Small helpers shared by dffbench-dv, dffbench-regress and dffbench-report."""

from __future__ import annotations

import random
import shlex
import time
from typing import Sequence

RESET = "\033[0m"
_SGR = {"red": 31, "green": 32, "yellow": 33}

# Seed words that ask for a fresh draw from the tool's seed generator
RANDOM_SEED_WORDS = frozenset({"rand", "random", "auto"})


def colour(name: str, s: str) -> str:
    """s between the ANSI code for name and RESET."""
    return f"\033[{_SGR[name]}m{s}{RESET}"


def red(s: str) -> str:
    return colour("red", s)


def green(s: str) -> str:
    return colour("green", s)


def yellow(s: str) -> str:
    return colour("yellow", s)


def iso_utc() -> str:
    """Current UTC time as 2025-01-31T12:00:00Z."""
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


def normalize_seed(rng: random.Random, s: str) -> int:
    """32-bit seed from a decimal/0x.. string or a RANDOM_SEED_WORDS word.

    Random words draw from rng, so a seeded rng gives a repeatable list.
    Anything else exits with a usage message.
    """
    if s.lower() in RANDOM_SEED_WORDS:
        return rng.getrandbits(32)
    try:
        value = int(s, 0)
    except ValueError:
        raise SystemExit(
            f"[dv] Invalid seed '{s}': expected decimal, 0x.. or 'random'"
        ) from None
    return value & 0xFFFF_FFFF


def pretty_cmd(cmd: Sequence[str]) -> str:
    """cmd as one shell-quoted line, for logs and replay."""
    return shlex.join(cmd)
