# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/dff_driver.py

"""Driver: reset sequence plus one stimulus record per clock."""

from __future__ import annotations

import pyuvm
from cocotb.triggers import NextTimeStep, ReadWrite

from . import utils_dv
from .dff_channel import ChannelClosed, DffChannel
from .dff_if import DffIf, DffIfWriter
from .dff_item import DffItem
from .dff_timing import DffTiming


class DffDriver(pyuvm.uvm_component):
    """Sole writer of the register's d and rst inputs.

    The driver claims the interface writer at end of elaboration, so any other
    component that tries to drive d/rst fails before simulation starts.

    Reset Sequence:
        1. Drive d=0, rst=1 using a non-blocking-style write
        2. Hold rst for reset_cycles drive edges
        3. Drive rst=0 (d stays 0) on the last of those edges

    Run Loop:
        Take the next record from the driver channel (blocking while empty),
        drive its d/reset, then wait for the next drive edge. Returns once the
        channel is closed and drained.

    Configuration (via config_db):
        reset_cycles (int): Drive edges to hold reset (default: 5, must be >= 1)
        plus the DffTiming drive settings

    Reference:
        C.E. Cummings, "Applying Stimulus & Sampling Outputs," SNUG 2016
    """

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
        self.timing: DffTiming = DffTiming()
        self.reset_cycles: int = 5
        self.vif: DffIf | None = None
        self.drv_ch: DffChannel[DffItem] | None = None
        self.writer: DffIfWriter | None = None
        self.driven: list[DffItem] = []

    def end_of_elaboration_phase(self) -> None:
        self.logger.debug("end_of_elaboration_phase begin")
        super().end_of_elaboration_phase()
        self.timing = DffTiming.from_config(self)
        self.reset_cycles = utils_dv.pull_int(self, "reset_cycles", self.reset_cycles)
        if self.reset_cycles < 1:
            raise ValueError(f"reset_cycles must be >= 1, got {self.reset_cycles}")
        assert self.vif is not None, "DffDriver.vif not connected"
        self.writer = self.vif.claim_writer(self.get_full_name())
        self.logger.debug("end_of_elaboration_phase end")

    async def reset_sequence(self) -> None:
        """Assert reset for reset_cycles drive edges, then release it."""
        self.logger.debug("reset_sequence begin")
        assert self.writer is not None and self.vif is not None, (
            "reset_sequence before end_of_elaboration"
        )
        self.writer.write(d=0, reset=1)
        await ReadWrite()  # like an NBA
        await NextTimeStep()
        # Hold reset for exactly N drive edges (synchronous semantics)
        for _ in range(self.reset_cycles):
            await self.timing.drive_edge(self.vif)
        self.writer.write(d=0, reset=0)
        self.logger.debug("reset_sequence end")

    async def run(self) -> None:
        """Drive records until the channel is closed and drained."""
        self.logger.debug("run begin")
        assert self.vif is not None and self.writer is not None, (
            "DffDriver.run called before elaboration"
        )
        assert self.drv_ch is not None, (
            "DffDriver.run called before connect_phase"
        )
        while True:
            try:
                tr = await self.drv_ch.recv()
            except ChannelClosed:
                break
            self.writer.write(d=tr.d, reset=tr.reset)
            self.driven.append(tr)
            self.logger.debug("drv[%d] %s", len(self.driven) - 1, tr.inputs_str())
            await self.timing.drive_edge(self.vif)
        self.logger.debug("run end: %d item(s) driven", len(self.driven))
