# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: tests/test_utils_cli.py

"""Setting resolution: environment, then plusargs, then default."""

from __future__ import annotations

import pytest

from dffbench.dv import utils_cli
from dffbench.dv.dff_base_test import read_setting


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in utils_cli.PLUSARG_VARS:
        monkeypatch.delenv(var, raising=False)
    for name in ("GEN_NUM_ITEMS", "CHECK_EN", "CLOCK_NAME"):
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(f"DFF_{name}", raising=False)


def test_default_when_nothing_set() -> None:
    assert utils_cli.get_int_setting("GEN_NUM_ITEMS", 100) == 100
    assert utils_cli.get_bool_setting("CHECK_EN", True) is True
    assert utils_cli.get_str_setting("CLOCK_NAME", "clk") == "clk"


def test_plusarg_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLUSARGS", "+GEN_NUM_ITEMS=7 +CLOCK_NAME=clock")
    assert utils_cli.get_int_setting("GEN_NUM_ITEMS", 100) == 7
    assert utils_cli.get_str_setting("CLOCK_NAME", "clk") == "clock"


def test_bare_plusarg_is_true(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COCOTB_PLUSARGS", "+CHECK_EN")
    assert utils_cli.get_bool_setting("CHECK_EN", False) is True


def test_hex_ints(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLUSARGS", "+GEN_NUM_ITEMS=0x10")
    assert utils_cli.get_int_setting("GEN_NUM_ITEMS", 0) == 16


def test_env_beats_plusarg(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLUSARGS", "+GEN_NUM_ITEMS=7")
    monkeypatch.setenv("GEN_NUM_ITEMS", "9")
    assert utils_cli.get_int_setting("GEN_NUM_ITEMS", 100) == 9


def test_prefixed_env_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DFF_CHECK_EN", "no")
    assert utils_cli.get_bool_setting("CHECK_EN", True) is False


def test_unparsable_env_falls_through(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEN_NUM_ITEMS", "lots")
    monkeypatch.setenv("PLUSARGS", "+GEN_NUM_ITEMS=3")
    assert utils_cli.get_int_setting("GEN_NUM_ITEMS", 100) == 3
    monkeypatch.setenv("PLUSARGS", "+GEN_NUM_ITEMS=many")
    assert utils_cli.get_int_setting("GEN_NUM_ITEMS", 100) == 100


def test_first_non_empty_plusarg_var_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLUSARGS", "")
    monkeypatch.setenv("COCOTB_PLUSARGS", "+GEN_NUM_ITEMS=4")
    monkeypatch.setenv("DFF_PLUSARGS", "+GEN_NUM_ITEMS=5")
    assert list(utils_cli.iter_plusargs()) == ["+GEN_NUM_ITEMS=4"]
    assert utils_cli.get_int_setting("GEN_NUM_ITEMS", 100) == 4


def test_prefix_match_is_exact(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLUSARGS", "+CHECK_ENABLED +CHECK_EN_X=1")
    assert utils_cli.get_bool_setting("CHECK_EN", False) is False


def test_bench_settings_parse_by_default_type(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DRIVE_SKEW_PS", raising=False)
    monkeypatch.delenv("DRIVE_FALLING_EDGE", raising=False)
    monkeypatch.setenv(
        "COCOTB_PLUSARGS", "+DRIVE_FALLING_EDGE=0 +DRIVE_SKEW_PS=4000 +CLOCK_NAME=ck"
    )
    assert read_setting("DRIVE_FALLING_EDGE", True) is False
    assert read_setting("DRIVE_SKEW_PS", 2_000) == 4_000
    assert read_setting("CLOCK_NAME", "clk") == "ck"
