# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/dff_timing.py

"""When the bench drives inputs and when it samples q, relative to the clock."""

from __future__ import annotations

from dataclasses import dataclass

import pyuvm
from cocotb.triggers import ReadOnly, Timer

from . import utils_dv
from .dff_if import DffIf


@dataclass(frozen=True)
class DffTiming:
    """Drive and sample points inside one clock period.

    Inputs are written on the falling edge by default, or ``drive_skew_ps``
    after the rising edge when ``drive_falling_edge`` is false. Either way
    they are stable well before the next rising edge. q is sampled
    ``settle_ps`` after each rising edge, in the ReadOnly region.

    Configuration (via config_db):
        clock_period_ps (int): Clock period (default: 10_000, > 0)
        drive_falling_edge (bool): Drive on the falling edge (default: True)
        drive_skew_ps (int): Rising-edge drive delay, 0 < skew < period
                             (default: 2_000, ignored on the falling edge)
        settle_ps (int): Sample delay, 0 <= settle < period (default: 5_000)

    Reference:
        C.E. Cummings, "Applying Stimulus & Sampling Outputs," SNUG 2016
    """

    clock_period_ps: int = 10_000
    drive_falling_edge: bool = True
    drive_skew_ps: int = 2_000
    settle_ps: int = 5_000

    def __post_init__(self) -> None:
        period = self.clock_period_ps
        if period <= 0:
            raise ValueError(f"clock_period_ps must be > 0, got {period}")
        if not self.drive_falling_edge and not 0 < self.drive_skew_ps < period:
            raise ValueError(
                f"drive_skew_ps must be in (0, {period}), got {self.drive_skew_ps}"
            )
        if not 0 <= self.settle_ps < period:
            raise ValueError(
                f"settle_ps must be in [0, {period}), got {self.settle_ps}"
            )

    @classmethod
    def from_config(cls, comp: pyuvm.uvm_component) -> DffTiming:
        """Timing visible to comp in config_db, defaults for unset keys."""
        d = cls()
        return cls(
            clock_period_ps=utils_dv.pull_int(
                comp, "clock_period_ps", d.clock_period_ps
            ),
            drive_falling_edge=utils_dv.pull_bool(
                comp, "drive_falling_edge", d.drive_falling_edge
            ),
            drive_skew_ps=utils_dv.pull_int(comp, "drive_skew_ps", d.drive_skew_ps),
            settle_ps=utils_dv.pull_int(comp, "settle_ps", d.settle_ps),
        )

    async def drive_edge(self, vif: DffIf) -> None:
        """Wait for the next point where inputs may change."""
        if self.drive_falling_edge:
            await vif.falling_edge
        else:
            await vif.rising_edge
            await Timer(self.drive_skew_ps, unit="ps")

    async def sample_edge(self, vif: DffIf) -> None:
        """Wait for the next point where q is settled, in ReadOnly."""
        await vif.rising_edge
        if self.settle_ps > 0:
            await Timer(self.settle_ps, unit="ps")
        await ReadOnly()
