# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/dff_scoreboard.py

"""Positional expected/observed comparator."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

import pyuvm

from . import utils_dv
from .dff_channel import ChannelClosed, DffChannel
from .dff_item import DffItem


class Verdict(enum.Enum):
    """Outcome of one expected/observed comparison."""

    MATCH = "MATCH"
    MISMATCH = "MISMATCH"


def classify(exp: DffItem, act: DffItem) -> Verdict:
    """Return MATCH when q follows d, or when q is 0 under reset."""
    if exp.d == act.q:
        return Verdict.MATCH
    if act.q == 0 and exp.reset == 1:
        return Verdict.MATCH
    return Verdict.MISMATCH


@dataclass
class DffScoreStats:
    """Running counts plus the ordered verdict history."""

    compared: int = 0
    matched: int = 0
    mismatched: int = 0
    history: list[tuple[int, Verdict, DffItem, DffItem]] = field(default_factory=list)

    def record(self, exp: DffItem, act: DffItem) -> Verdict:
        verdict = classify(exp, act)
        self.history.append((self.compared, verdict, exp, act))
        self.compared += 1
        if verdict is Verdict.MATCH:
            self.matched += 1
        else:
            self.mismatched += 1
        return verdict

    def verdicts(self) -> list[Verdict]:
        return [v for _, v, _, _ in self.history]

    def observed_q(self) -> list[int]:
        return [act.q for _, _, _, act in self.history]


class DffScoreboard(pyuvm.uvm_component):
    """Pair expected and observed records by position and classify each pair.

    Each iteration takes one expected record, then one observed record,
    blocking on whichever is not yet there. A mismatch is logged and counted
    and the loop carries on; the run ends when either channel is closed and
    drained.

    Configuration (via config_db):
        sb_fail_on_error (bool): Raise in final_phase if any pair mismatched
                                 (default: True)

    Reference:
        C.E. Cummings, "OVM/UVM Scoreboards - Fundamental Architectures,"
        SNUG 2013 (Silicon Valley)
    """

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
        self.stats: DffScoreStats = DffScoreStats()
        self.fail_on_error: bool = True
        self.exp_ch: DffChannel[DffItem] | None = None
        self.obs_ch: DffChannel[DffItem] | None = None

    def end_of_elaboration_phase(self) -> None:
        self.logger.debug("end_of_elaboration_phase begin")
        super().end_of_elaboration_phase()
        self.fail_on_error = utils_dv.pull_bool(
            self, "sb_fail_on_error", self.fail_on_error
        )
        self.logger.debug("end_of_elaboration_phase end")

    async def run(self) -> None:
        self.logger.debug("run begin")
        assert self.exp_ch is not None and self.obs_ch is not None, (
            "DffScoreboard.run called before connect_phase"
        )
        while True:
            try:
                exp = await self.exp_ch.recv()
                act = await self.obs_ch.recv()
            except ChannelClosed:
                break
            verdict = self.stats.record(exp, act)
            if verdict is Verdict.MATCH:
                self.logger.debug(
                    "MATCH [%d] exp=%s act=%s",
                    self.stats.compared - 1,
                    exp.inputs_str(),
                    act.outputs_str(),
                )
            else:
                self.logger.error(
                    "MISMATCH [%d] exp=%s act=%s",
                    self.stats.compared - 1,
                    exp.to_dict(),
                    act.to_dict(),
                )
        self.logger.debug("run end")

    def report_phase(self) -> None:
        self.logger.debug("report_phase begin")
        s = self.stats
        if s.compared == 0:
            self.logger.warning("Scoreboard made no comparisons")
        elif s.mismatched == 0:
            self.logger.info(
                "*** TEST PASSED - %d ran, %d passed ***", s.compared, s.matched
            )
        else:
            self.logger.error(
                "*** TEST FAILED - %d ran, %d passed, %d failed ***",
                s.compared,
                s.matched,
                s.mismatched,
            )
        self.logger.debug("report_phase end")

    def final_phase(self) -> None:
        self.logger.debug("final_phase begin")
        if self.fail_on_error and self.stats.mismatched > 0:
            raise AssertionError(
                f"Scoreboard saw {self.stats.mismatched} mismatch(es); "
                "sb_fail_on_error is enabled"
            )
        self.logger.debug("final_phase end")
