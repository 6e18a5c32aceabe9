# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/dff_env.py

"""Environment: channels, interface handle and the four bench stages."""

from __future__ import annotations

import pyuvm

from . import utils_dv
from .dff_channel import DffChannel
from .dff_coverage import DffCoverage
from .dff_driver import DffDriver
from .dff_generator import DffGenerator
from .dff_if import DffIf
from .dff_item import DffItem
from .dff_monitor import DffMonitor
from .dff_scoreboard import DffScoreboard
from .dff_task_group import DffTaskGroup


class DffEnv(pyuvm.uvm_env):
    """Build, connect and supervise the register bench.

    Data Flow:
        gen ──gen2drv──→ drv ──DffIfWriter──→ DUT
        gen ──gen2sb───────────────────────────────→ sb
        DUT ──read side──→ mon ──mon2sb────────────→ sb
        gen.ap ──→ cov

    Components:
        gen (DffGenerator): Random stimulus source
        drv (DffDriver): Reset sequence and stimulus, sole interface writer
        mon (DffMonitor): Per-cycle output sampler
        sb (DffScoreboard): Positional comparator (optional, check_en)
        cov (DffCoverage): Stimulus coverage (optional, coverage_en)

    Configuration (via config_db):
        dut: DUT handle (required)
        clock_name (str): Clock signal name (default: "clk")
        clock_period_ps (int): Used to size the stop grace period
        check_en (bool): Build the scoreboard (default: True)
        coverage_en (bool): Build coverage (default: True)
        stop_grace_cycles (int): Clock periods stop() waits before cancelling
                                 (default: 2)

    The stages do no work in run_phase; the test calls start() and stop() so
    the reset-then-run ordering and the teardown are explicit.

    Example:
        >>> await self.env.start()
        >>> await self.env.wait_done()
        >>> await self.env.stop()
    """

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
        self.vif: DffIf
        self.gen2drv: DffChannel[DffItem]
        self.gen2sb: DffChannel[DffItem]
        self.mon2sb: DffChannel[DffItem]
        self.gen: DffGenerator
        self.drv: DffDriver
        self.mon: DffMonitor
        self.sb: DffScoreboard | None = None
        self.cov: DffCoverage | None = None
        self.group: DffTaskGroup = DffTaskGroup(f"{name}.group")
        self._check_en: bool = True
        self._coverage_en: bool = True
        self.clock_period_ps: int = 10_000
        self.stop_grace_cycles: int = 2
        self._started: bool = False

    def build_phase(self) -> None:
        self.logger.debug("build_phase begin")
        super().build_phase()

        dut = utils_dv.uvm_config_db_get(self, "dut")
        clock_name = utils_dv.uvm_config_db_get_try(self, "clock_name")
        self.vif = DffIf(
            dut, clock_name=clock_name if isinstance(clock_name, str) else "clk"
        )

        self.gen2drv = DffChannel("gen2drv", item_type=DffItem)
        self.gen2sb = DffChannel("gen2sb", item_type=DffItem)
        self.mon2sb = DffChannel("mon2sb", item_type=DffItem)

        create = pyuvm.uvm_factory().create_component_by_type
        parent_inst_path = self.get_full_name()

        self.gen = create(
            DffGenerator, parent_inst_path=parent_inst_path, name="gen", parent=self
        )
        self.drv = create(
            DffDriver, parent_inst_path=parent_inst_path, name="drv", parent=self
        )
        self.mon = create(
            DffMonitor, parent_inst_path=parent_inst_path, name="mon", parent=self
        )

        self._check_en = utils_dv.pull_bool(self, "check_en", self._check_en)
        if self._check_en:
            self.sb = create(
                DffScoreboard, parent_inst_path=parent_inst_path, name="sb", parent=self
            )

        self._coverage_en = utils_dv.pull_bool(self, "coverage_en", self._coverage_en)
        if self._coverage_en:
            self.cov = create(
                DffCoverage,
                parent_inst_path=parent_inst_path,
                name="coverage",
                parent=self,
            )

        self.logger.debug("build_phase end")

    def connect_phase(self) -> None:
        self.logger.debug("connect_phase begin")
        super().connect_phase()
        self.gen.drv_ch = self.gen2drv
        self.gen.exp_ch = self.gen2sb
        self.drv.vif = self.vif
        self.drv.drv_ch = self.gen2drv
        # Monitor gets the read side only; it never claims the writer
        self.mon.vif = self.vif
        self.mon.obs_ch = self.mon2sb
        if self.sb is not None:
            self.sb.exp_ch = self.gen2sb
            self.sb.obs_ch = self.mon2sb
        if self.cov is not None:
            self.gen.ap.connect(self.cov.analysis_export)
        self.logger.debug("connect_phase end")

    def end_of_elaboration_phase(self) -> None:
        self.logger.debug("end_of_elaboration_phase begin")
        super().end_of_elaboration_phase()
        self.clock_period_ps = utils_dv.pull_int(
            self, "clock_period_ps", self.clock_period_ps
        )
        self.stop_grace_cycles = utils_dv.pull_int(
            self, "stop_grace_cycles", self.stop_grace_cycles
        )
        if self.stop_grace_cycles < 0:
            raise ValueError(
                f"stop_grace_cycles must be >= 0, got {self.stop_grace_cycles}"
            )
        self.logger.debug("end_of_elaboration_phase end")

    async def start(self) -> None:
        """Reset the DUT, then launch the stages and return."""
        self.logger.debug("start begin")
        if self._started:
            raise RuntimeError(f"{self.get_full_name()} already started")
        self._started = True
        await self.drv.reset_sequence()
        # Generator first so the driver finds record 0 queued on this edge
        self.group.start("gen", self.gen.run())
        self.group.start("drv", self.drv.run())
        self.group.start("mon", self.mon.run())
        if self.sb is not None:
            self.group.start("sb", self.sb.run())
        self.logger.debug("start end")

    async def wait_done(self) -> None:
        """Wait for the stages that finish on their own (closed channels)."""
        await self.group.wait("gen")
        await self.group.wait("sb" if "sb" in self.group else "drv")

    async def stop(self) -> None:
        """Close every channel, allow a grace period, cancel what is left."""
        self.logger.debug("stop begin")
        for ch in (self.gen2drv, self.gen2sb, self.mon2sb):
            ch.close()
        grace_ps = self.stop_grace_cycles * self.clock_period_ps
        await self.group.shutdown(grace_ps)
        self.logger.debug("stop end")
