# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/dff_generator.py

"""Randomized stimulus generator."""

from __future__ import annotations

import random

import cocotb
import pyuvm

from . import utils_dv
from .dff_channel import ChannelClosed, DffChannel
from .dff_item import DffItem


class DffGenerator(pyuvm.uvm_component):
    """Produce a finite stream of random {d, reset} records.

    Each record is sent to the driver channel and then to the expected channel,
    so record i on one channel is record i on the other. The same frozen
    instance goes to both. Every record is also written to ``ap`` for coverage.

    Configuration (via config_db):
        gen_num_items (int): Records to produce (default: 100, must be >= 0)
        gen_seed (int): Seed for the private random.Random (default: run seed)
        gen_rng (random.Random): Injected random source; wins over gen_seed
        gen_close_on_done (bool): Close both channels after the last record
                                  (default: False)
    """

    def __init__(self, name: str, parent: pyuvm.uvm_component | None) -> None:
        super().__init__(name, parent)
        utils_dv.configure_component_logger(self)
        self.num_items: int = 100
        self.close_on_done: bool = False
        self.rng: random.Random = random.Random()
        self.emitted: list[DffItem] = []
        self.ap: pyuvm.uvm_analysis_port
        self.drv_ch: DffChannel[DffItem] | None = None
        self.exp_ch: DffChannel[DffItem] | None = None

    def build_phase(self) -> None:
        self.logger.debug("build_phase begin")
        super().build_phase()
        self.ap = pyuvm.uvm_analysis_port("ap", self)
        self.logger.debug("build_phase end")

    def end_of_elaboration_phase(self) -> None:
        self.logger.debug("end_of_elaboration_phase begin")
        super().end_of_elaboration_phase()
        self._pull_config()
        self.logger.debug("end_of_elaboration_phase end")

    def _pull_config(self) -> None:
        self.num_items = utils_dv.pull_int(self, "gen_num_items", self.num_items)
        if self.num_items < 0:
            raise ValueError(f"gen_num_items must be >= 0, got {self.num_items}")
        self.close_on_done = utils_dv.pull_bool(
            self, "gen_close_on_done", self.close_on_done
        )
        rng = utils_dv.uvm_config_db_get_try(self, "gen_rng")
        if isinstance(rng, random.Random):
            self.rng = rng
            self.logger.debug("Using injected random source %r", rng)
        else:
            seed = utils_dv.pull_int(self, "gen_seed", cocotb.RANDOM_SEED)
            self.rng = random.Random(seed)
            self.logger.debug("Generator seed: %d", seed)

    def next_item(self) -> DffItem:
        """Draw one record: d first, then reset."""
        d = self.rng.randint(0, 1)
        reset = self.rng.randint(0, 1)
        return DffItem.expected(d=d, reset=reset)

    async def run(self) -> None:
        """Emit num_items records, then optionally close the channels."""
        self.logger.debug("run begin")
        assert self.drv_ch is not None and self.exp_ch is not None, (
            "DffGenerator.run called before connect_phase"
        )
        try:
            for i in range(self.num_items):
                tr = self.next_item()
                self.drv_ch.send(tr)
                self.exp_ch.send(tr)
                self.emitted.append(tr)
                self.ap.write(tr)
                self.logger.debug("gen[%d] %s", i, tr.inputs_str())
        except ChannelClosed:
            self.logger.debug("run: channel closed after %d item(s)", len(self.emitted))
            return
        if self.close_on_done:
            self.drv_ch.close()
            self.exp_ch.close()
        self.logger.debug("run end: %d item(s)", len(self.emitted))
