# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/dff_ref_model.py

"""Cycle-level reference model of the register."""

from __future__ import annotations

import logging
from typing import Iterable

import pyuvm

from . import utils_dv
from .dff_item import DffItem


class DffRefModel(pyuvm.uvm_object):
    """Golden model: on each rising edge q <= 0 if rst else d.

    The model holds one bit of state. step() advances it by one clock with the
    inputs that were stable before the edge and returns the new q. Before the
    first edge or reset q is unknown (None).

    Example:
        >>> m = DffRefModel()
        >>> m.step(d=1, reset=0)
        1
        >>> m.step(d=1, reset=1)
        0
    """

    def __init__(self, name: str = "dff_ref_model") -> None:
        super().__init__(name)
        self._logger: logging.Logger = logging.getLogger(f"uvm.obj.{name}")
        utils_dv.configure_non_component_logger(self._logger)
        self.q: int | None = None

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def step(self, d: int, reset: int) -> int:
        """Advance one rising edge and return q."""
        d = utils_dv.as_bit("d", d)
        reset = utils_dv.as_bit("reset", reset)
        self.q = 0 if reset else d
        return self.q

    def run(self, items: Iterable[DffItem]) -> list[int]:
        """q after each of items, in order."""
        qs = [self.step(tr.d, tr.reset) for tr in items]
        self.logger.debug("run: %d item(s), final q=%s", len(qs), self.q)
        return qs
