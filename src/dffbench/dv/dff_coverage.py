# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/dff_coverage.py

"""Stimulus coverage for the register (cocotb-coverage + pyuvm)."""

from __future__ import annotations

import os

import pyuvm
from cocotb_coverage.coverage import CoverCross, CoverPoint, coverage_db

from . import utils_dv
from .dff_item import DffItem

# (previous d, d): every transition the register can be asked to make
D_TRANSITIONS = [(0, 0), (0, 1), (1, 0), (1, 1)]


class DffCoverage(pyuvm.uvm_subscriber):
    """Cover d, reset, their cross and d transitions on generated records.

    The env builds this subscriber only when coverage_en is set and connects
    it to the generator's analysis port. The first record has no previous d
    and is left out of the transition point. report_phase logs the database
    and writes it to $COV_YAML when that is set.
    """

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
        self.yaml_path: str | None = os.getenv("COV_YAML")
        self.sampled: int = 0
        self._prev_d: int | None = None

    def write(self, tt: DffItem) -> None:
        self.sample(tt, self._prev_d)
        self._prev_d = tt.d
        self.sampled += 1

    @CoverPoint("dff.d", xf=lambda _self, tt, _prev: tt.d, bins=[0, 1])
    @CoverPoint("dff.reset", xf=lambda _self, tt, _prev: tt.reset, bins=[0, 1])
    @CoverPoint(
        "dff.d_transition",
        xf=lambda _self, tt, prev: (prev, tt.d),
        bins=D_TRANSITIONS,
    )
    @CoverCross("dff.d_x_reset", items=["dff.d", "dff.reset"])
    def sample(self, tt: DffItem, prev_d: int | None) -> None:
        """Sampling hook; the decorators do the work."""

    def report_phase(self) -> None:
        self.logger.debug("report_phase begin")
        super().report_phase()
        coverage_db.report_coverage(self.logger.debug)
        if self.sampled:
            self.logger.info(
                "coverage: %d record(s), d x reset %.1f%%, d transitions %.1f%%",
                self.sampled,
                coverage_db["dff.d_x_reset"].cover_percentage,
                coverage_db["dff.d_transition"].cover_percentage,
            )
        else:
            self.logger.info("coverage: no records sampled")
        if self.yaml_path:
            coverage_db.export_to_yaml(self.yaml_path)
            self.logger.debug("coverage YAML written to %s", self.yaml_path)
        self.logger.debug("report_phase end")
