# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/test_dff.py

"""Tests for dff verification."""

from __future__ import annotations

import random
from collections import deque
from typing import Iterable

import pyuvm
from cocotb.triggers import NextTimeStep, ReadOnly

from . import utils_dv
from .dff_base_test import DffBaseTest
from .dff_ref_model import DffRefModel
from .dff_scoreboard import DffScoreboard, Verdict
from .utils_dv import ProtocolError


class ScriptedRandom(random.Random):
    """random.Random whose randint() replays fixed (d, reset) pairs."""

    def __init__(self, *, d: Iterable[int], reset: Iterable[int]) -> None:
        super().__init__(0)
        self._draws: deque[int] = deque(v for pair in zip(d, reset) for v in pair)

    def randint(self, a: int, b: int) -> int:
        return self._draws.popleft()


class _DffCheckedTest(DffBaseTest):
    """Common end-of-test checks for the scenarios below."""

    @property
    def sb(self) -> DffScoreboard:
        assert self.env.sb is not None, "scoreboard disabled"
        return self.env.sb

    def check_phase(self) -> None:
        self.logger.debug("check_phase begin")
        super().check_phase()
        pending = self.env.group.pending()
        assert not pending, f"tasks still pending after stop(): {pending}"
        self.logger.debug("check_phase end")

    def check_against_model(self, num_items: int) -> None:
        """All num_items compared, all MATCH, q equal to DffRefModel's."""
        gen, stats = self.env.gen, self.sb.stats
        assert len(gen.emitted) == num_items
        assert stats.compared == num_items
        assert stats.verdicts() == [Verdict.MATCH] * num_items
        assert stats.observed_q() == DffRefModel().run(gen.emitted)


@pyuvm.test()
class DffRandomTest(_DffCheckedTest):
    """Random stimulus until the generator is done; check against the model."""

    def build_config(self) -> None:
        super().build_config()
        self.publish("gen_close_on_done", True)

    def check_phase(self) -> None:
        super().check_phase()
        gen, drv, stats = self.env.gen, self.env.drv, self.sb.stats
        assert drv.driven == gen.emitted, "driver order differs from generator"
        exp = [tr for _, _, tr, _ in stats.history]
        assert exp == gen.emitted, "expected channel order differs from generator"
        self.check_against_model(gen.num_items)


@pyuvm.test()
class DffDirectedTest(_DffCheckedTest):
    """Five scripted records without reset: q follows d one period later."""

    d = [1, 0, 1, 1, 0]

    def build_config(self) -> None:
        super().build_config()
        self.publish("gen_num_items", len(self.d))
        self.publish("gen_close_on_done", True)
        self.publish("gen_rng", ScriptedRandom(d=self.d, reset=[0] * len(self.d)))

    def check_phase(self) -> None:
        super().check_phase()
        stats = self.sb.stats
        assert stats.verdicts() == [Verdict.MATCH] * len(self.d)
        assert stats.observed_q() == self.d


@pyuvm.test()
class DffMidRunResetTest(_DffCheckedTest):
    """Reset asserted at one position forces q to 0 there only."""

    d = [1, 1, 1, 1, 1, 1]
    reset = [0, 0, 0, 1, 0, 0]

    def build_config(self) -> None:
        super().build_config()
        self.publish("gen_num_items", len(self.d))
        self.publish("gen_close_on_done", True)
        self.publish("gen_rng", ScriptedRandom(d=self.d, reset=self.reset))

    def check_phase(self) -> None:
        super().check_phase()
        stats = self.sb.stats
        assert stats.verdicts() == [Verdict.MATCH] * len(self.d)
        assert stats.observed_q() == [0 if r else 1 for r in self.reset]


@pyuvm.test()
class DffIdleTest(_DffCheckedTest):
    """No stimulus: nothing is compared and stop() still tears down cleanly."""

    def build_config(self) -> None:
        super().build_config()
        self.publish("gen_num_items", 0)
        self.publish("run_cycles", 8)

    def check_phase(self) -> None:
        super().check_phase()
        assert self.sb.stats.compared == 0
        assert not self.env.gen.emitted


@pyuvm.test()
class DffResetIdempotentTest(_DffCheckedTest):
    """Applying the reset sequence again leaves q and the inputs unchanged."""

    def build_config(self) -> None:
        super().build_config()
        self.publish("gen_num_items", 4)
        self.publish("gen_close_on_done", True)

    async def run_phase(self) -> None:
        self.logger.debug("run_phase begin")
        self.raise_objection()
        vif = self.env.vif
        states = []
        for _ in range(2):
            await self.env.drv.reset_sequence()
            await ReadOnly()
            states.append((vif.read_q(), vif.read_d(), vif.read_reset()))
            await NextTimeStep()
        assert states == [(0, 0, 0), (0, 0, 0)], f"reset not idempotent: {states}"
        await self.env.start()
        await self.env.wait_done()
        await self.env.stop()
        self.drop_objection()
        self.logger.debug("run_phase end")


@pyuvm.test()
class DffSingleWriterTest(_DffCheckedTest):
    """Only the driver may drive d/rst; a second claim is refused."""

    def build_config(self) -> None:
        super().build_config()
        self.publish("gen_num_items", 3)
        self.publish("gen_close_on_done", True)

    def start_of_simulation_phase(self) -> None:
        super().start_of_simulation_phase()
        vif = self.env.vif
        assert vif.writer_owner == self.env.drv.get_full_name()
        try:
            vif.claim_writer(self.env.mon.get_full_name())
        except ProtocolError as e:
            self.logger.debug("second claim refused: %s", e)
        else:
            raise AssertionError("second writer claim was accepted")
        utils_dv.uvm_config_db_set(self, "", "writer_checked", True)

    def check_phase(self) -> None:
        super().check_phase()
        assert utils_dv.uvm_config_db_get(self, "writer_checked") is True
        assert self.sb.stats.mismatched == 0


@pyuvm.test()
class DffRisingEdgeDriveTest(_DffCheckedTest):
    """Inputs driven a fixed skew after the rising edge instead of the falling."""

    items = 30

    def build_config(self) -> None:
        super().build_config()
        self.publish("drive_falling_edge", False)
        self.publish("drive_skew_ps", 3_000)
        self.publish("gen_num_items", self.items)
        self.publish("gen_close_on_done", True)

    def check_phase(self) -> None:
        super().check_phase()
        assert not self.env.drv.timing.drive_falling_edge
        assert self.env.drv.timing.drive_skew_ps == 3_000
        self.check_against_model(self.items)


@pyuvm.test()
class DffLateSampleTest(_DffCheckedTest):
    """q sampled just before the next rising edge still matches."""

    items = 30

    def build_config(self) -> None:
        super().build_config()
        self.publish("settle_ps", 9_000)
        self.publish("gen_num_items", self.items)
        self.publish("gen_close_on_done", True)

    def check_phase(self) -> None:
        super().check_phase()
        assert self.env.mon.timing.settle_ps == 9_000
        self.check_against_model(self.items)


@pyuvm.test()
class DffTimedRunTest(_DffCheckedTest):
    """Fixed-length run (no close on done) still compares every record."""

    items = 20

    def build_config(self) -> None:
        super().build_config()
        self.publish("gen_num_items", self.items)
        self.publish("gen_close_on_done", False)
        self.publish("run_cycles", 0)

    def check_phase(self) -> None:
        super().check_phase()
        assert not self.close_on_done
        self.check_against_model(self.items)
