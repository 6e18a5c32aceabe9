# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/dff_clock_driver.py

"""Free-running clock on the register's clk port."""

from __future__ import annotations

from typing import cast

import cocotb
import pyuvm
from cocotb.clock import Clock
from cocotb.handle import LogicObject
from cocotb.task import Task

from . import utils_dv


class DffClockDriver(pyuvm.uvm_component):
    """Toggle dut.<clock_name> from start of simulation until final_phase.

    The clock starts before run_phase so the reset sequence sees edges from
    its first await.

    Configuration (via config_db):
        clock_name (str): Clock port (default: "clk")
        clock_period_ps (int): Period (default: 10_000)
        clock_start_high (bool): First half-period high (default: False)
    """

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
        self.clock_name: str = "clk"
        self.clock_period_ps: int = 10_000
        self.clock_start_high: bool = False
        self._task: Task | None = None

    def end_of_elaboration_phase(self) -> None:
        self.logger.debug("end_of_elaboration_phase begin")
        super().end_of_elaboration_phase()
        name = utils_dv.uvm_config_db_get_try(self, "clock_name")
        if isinstance(name, str) and name:
            self.clock_name = name
        self.clock_period_ps = utils_dv.pull_int(
            self, "clock_period_ps", self.clock_period_ps
        )
        if self.clock_period_ps <= 0:
            raise ValueError(f"clock_period_ps must be > 0, got {self.clock_period_ps}")
        self.clock_start_high = utils_dv.pull_bool(
            self, "clock_start_high", self.clock_start_high
        )
        self.logger.debug("end_of_elaboration_phase end")

    def start_of_simulation_phase(self) -> None:
        self.logger.debug("start_of_simulation_phase begin")
        super().start_of_simulation_phase()
        dut = utils_dv.uvm_config_db_get(self, "dut")
        clk = cast(LogicObject, utils_dv.get_signal(dut, self.clock_name))
        clock = Clock(clk, self.clock_period_ps, unit="ps")
        self._task = cocotb.start_soon(clock.start(start_high=self.clock_start_high))
        self.logger.debug(
            "dut.%s: %d ps, start_high=%s",
            self.clock_name,
            self.clock_period_ps,
            self.clock_start_high,
        )
        self.logger.debug("start_of_simulation_phase end")

    def final_phase(self) -> None:
        self.logger.debug("final_phase begin")
        if self._task is not None:
            self._task.cancel()
            self._task = None
        super().final_phase()
        self.logger.debug("final_phase end")
