# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/dff_monitor.py

"""Output monitor: sample q once per clock after it settles."""

from __future__ import annotations

import pyuvm

from . import utils_dv
from .dff_channel import ChannelClosed, DffChannel
from .dff_if import DffIf
from .dff_item import DffItem
from .dff_timing import DffTiming
from .utils_dv import ProtocolError


class DffMonitor(pyuvm.uvm_component):
    """Observe the register once per rising edge.

    After each rising edge the monitor waits ``settle_ps``, moves to the
    ReadOnly region, samples q (and d/rst for tracing) and sends an observed
    record on the observed channel. It only reads the interface.

    Configuration (via config_db):
        settle_ps and clock_period_ps, read through DffTiming
    """

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
        self.timing: DffTiming = DffTiming()
        self.vif: DffIf | None = None
        self.obs_ch: DffChannel[DffItem] | None = None
        self.item_count: int = 0

    def end_of_elaboration_phase(self) -> None:
        self.logger.debug("end_of_elaboration_phase begin")
        super().end_of_elaboration_phase()
        self.timing = DffTiming.from_config(self)
        assert self.vif is not None, "DffMonitor.vif not connected"
        self.logger.debug("end_of_elaboration_phase end")

    async def sample_dut_edge(self) -> None:
        """Wait for rising edge + settle, then enter ReadOnly."""
        assert self.vif is not None
        await self.timing.sample_edge(self.vif)

    def sample_dut(self) -> DffItem:
        """Build an observed record from the current signal levels."""
        assert self.vif is not None
        q = self.vif.read_q()
        d = self.vif.read_d()
        rst = self.vif.read_reset()
        if q is None or d is None or rst is None:
            raise ProtocolError(
                f"{self.get_full_name()}: unresolved sample q={q} d={d} rst={rst} "
                f"at observation {self.item_count}"
            )
        return DffItem.observed(q=q, d=d, reset=rst)

    async def run(self) -> None:
        """Sample every cycle until the observed channel is closed."""
        self.logger.debug("run begin")
        assert self.obs_ch is not None, "DffMonitor.run called before connect_phase"
        while not self.obs_ch.closed:
            await self.sample_dut_edge()
            tr = self.sample_dut()
            try:
                self.obs_ch.send(tr)
            except ChannelClosed:
                break
            self.logger.debug("mon[%d] %s", self.item_count, tr)
            self.item_count += 1
        self.logger.debug("run end: %d sample(s)", self.item_count)
