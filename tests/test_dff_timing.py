# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: tests/test_dff_timing.py

"""Drive/sample timing limits."""

from __future__ import annotations

import dataclasses

import pytest

from dffbench.dv.dff_base_test import BENCH_SETTINGS
from dffbench.dv.dff_timing import DffTiming


def test_defaults_drive_on_falling_edge() -> None:
    t = DffTiming()
    assert t.drive_falling_edge
    assert (t.clock_period_ps, t.settle_ps) == (10_000, 5_000)


def test_defaults_agree_with_bench_settings() -> None:
    defaults = {key: value for _, key, value in BENCH_SETTINGS}
    for f in dataclasses.fields(DffTiming):
        assert defaults[f.name] == f.default


@pytest.mark.parametrize(
    "kwargs",
    [
        {"drive_falling_edge": False, "drive_skew_ps": 1},
        {"drive_falling_edge": False, "drive_skew_ps": 9_999},
        {"settle_ps": 0},
        {"settle_ps": 9_999},
        # skew is unused on the falling edge
        {"drive_skew_ps": 0},
    ],
)
def test_accepted_timings(kwargs: dict) -> None:
    DffTiming(**kwargs)


@pytest.mark.parametrize(
    ("kwargs", "msg"),
    [
        ({"clock_period_ps": 0}, "clock_period_ps"),
        ({"drive_falling_edge": False, "drive_skew_ps": 0}, "drive_skew_ps"),
        ({"drive_falling_edge": False, "drive_skew_ps": 10_000}, "drive_skew_ps"),
        ({"settle_ps": -1}, "settle_ps"),
        ({"settle_ps": 10_000}, "settle_ps"),
        ({"clock_period_ps": 4_000}, "settle_ps"),
    ],
)
def test_rejected_timings(kwargs: dict, msg: str) -> None:
    with pytest.raises(ValueError, match=msg):
        DffTiming(**kwargs)


def test_timing_is_frozen() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        DffTiming().settle_ps = 1  # type: ignore[misc]
