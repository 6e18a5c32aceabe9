# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: tests/test_dff_scoreboard.py

"""Comparison rule and statistics of the scoreboard."""

from __future__ import annotations

import itertools

import pytest

from dffbench.dv.dff_item import DffItem
from dffbench.dv.dff_scoreboard import DffScoreStats, Verdict, classify


@pytest.mark.parametrize(
    ("d", "reset", "q", "verdict"),
    [
        (0, 0, 0, Verdict.MATCH),
        (1, 0, 1, Verdict.MATCH),
        (0, 0, 1, Verdict.MISMATCH),
        (1, 0, 0, Verdict.MISMATCH),
        # reset dominance
        (1, 1, 0, Verdict.MATCH),
        (0, 1, 0, Verdict.MATCH),
        # q follows d even under reset
        (1, 1, 1, Verdict.MATCH),
        (0, 1, 1, Verdict.MISMATCH),
    ],
)
def test_classify_truth_table(d: int, reset: int, q: int, verdict: Verdict) -> None:
    exp = DffItem.expected(d=d, reset=reset)
    act = DffItem.observed(q=q, d=d, reset=reset)
    assert classify(exp, act) is verdict


def test_observed_d_and_reset_are_ignored() -> None:
    exp = DffItem.expected(d=1, reset=0)
    for d, reset in itertools.product((0, 1), repeat=2):
        assert classify(exp, DffItem.observed(q=1, d=d, reset=reset)) is Verdict.MATCH


def test_expected_q_is_ignored() -> None:
    exp = DffItem(d=1, reset=0, q=0)
    assert classify(exp, DffItem.observed(q=1, d=1)) is Verdict.MATCH


def test_stats_count_and_keep_history_in_order() -> None:
    stats = DffScoreStats()
    pairs = [
        (DffItem.expected(1, 0), DffItem.observed(q=1, d=1)),
        (DffItem.expected(0, 0), DffItem.observed(q=1, d=0)),
        (DffItem.expected(1, 1), DffItem.observed(q=0, d=1, reset=1)),
    ]
    verdicts = [stats.record(exp, act) for exp, act in pairs]

    assert verdicts == [Verdict.MATCH, Verdict.MISMATCH, Verdict.MATCH]
    assert (stats.compared, stats.matched, stats.mismatched) == (3, 2, 1)
    assert [h[0] for h in stats.history] == [0, 1, 2]
    assert stats.verdicts() == verdicts
    assert stats.observed_q() == [1, 1, 0]
    assert stats.history[1][2] is pairs[1][0]
    assert stats.history[1][3] is pairs[1][1]


def test_mismatch_does_not_stop_recording() -> None:
    stats = DffScoreStats()
    for _ in range(5):
        stats.record(DffItem.expected(1, 0), DffItem.observed(q=0, d=1))
    stats.record(DffItem.expected(0, 0), DffItem.observed(q=0, d=0))
    assert stats.compared == 6
    assert stats.mismatched == 5
    assert stats.verdicts()[-1] is Verdict.MATCH


def test_five_item_scenario_all_match() -> None:
    d = [1, 0, 1, 1, 0]
    stats = DffScoreStats()
    for bit in d:
        stats.record(DffItem.expected(bit, 0), DffItem.observed(q=bit, d=bit))
    assert stats.verdicts() == [Verdict.MATCH] * 5
    assert stats.observed_q() == d
