# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/dff_if.py

"""Shared interface handle for the register's signals (single writer)."""

from __future__ import annotations

import logging
from typing import Any

from . import utils_dv
from .utils_dv import ProtocolError


class DffIfWriter:
    """The only path that drives the register's inputs.

    Obtained once from DffIf.claim_writer(); whoever holds it is the sole
    writer of ``d`` and ``rst`` for the lifetime of the interface.
    """

    def __init__(self, owner: str, d: Any, rst: Any) -> None:
        self.owner: str = owner
        self._d = d
        self._rst = rst

    def write(self, d: Any, reset: Any) -> None:
        """Drive d and rst (deposit; takes effect in this time step)."""
        d_bit = utils_dv.as_bit("d", d)
        rst_bit = utils_dv.as_bit("reset", reset)
        self._d.value = d_bit
        self._rst.value = rst_bit


class DffIf:
    """Signal bundle of the register under test: clk, d, rst, q.

    Readers (monitor, driver) sample through read_d(), read_reset() and
    read_q(), and DffTiming synchronizes on rising_edge / falling_edge. The
    inputs have exactly one writer: the first caller of claim_writer() gets a
    DffIfWriter, and any later claim raises ProtocolError. There is no other
    way to write through this class, so the single-writer rule holds by
    construction and needs no locking. ``q`` and ``clk`` are written only by
    the DUT and the clock driver.

    Configuration:
        Signal names default to the dff module's ports and can be overridden
        per bench through the constructor.

    Example:
        >>> vif = DffIf(cocotb.top)
        >>> writer = vif.claim_writer("uvm_test_top.env.drv")
        >>> writer.write(d=1, reset=0)
        >>> await vif.rising_edge
        >>> vif.read_q()
        1
    """

    def __init__(
        self,
        dut: Any,
        *,
        clock_name: str = "clk",
        d_name: str = "d",
        reset_name: str = "rst",
        q_name: str = "q",
    ) -> None:
        self.logger: logging.Logger = logging.getLogger("uvm.dff_if")
        utils_dv.configure_non_component_logger(self.logger)
        self.clock_name: str = clock_name
        self._clk = utils_dv.get_signal(dut, clock_name)
        self._d = utils_dv.get_signal(dut, d_name)
        self._rst = utils_dv.get_signal(dut, reset_name)
        self._q = utils_dv.get_signal(dut, q_name)
        self._writer: DffIfWriter | None = None

    @property
    def rising_edge(self) -> Any:
        """Trigger for the next rising clock edge."""
        return self._clk.rising_edge

    @property
    def falling_edge(self) -> Any:
        """Trigger for the next falling clock edge."""
        return self._clk.falling_edge

    @property
    def writer_owner(self) -> str | None:
        """Full name of the component holding the writer, if claimed."""
        return self._writer.owner if self._writer is not None else None

    def claim_writer(self, owner: str) -> DffIfWriter:
        """Hand out the single writer; a second claim is a wiring bug."""
        if self._writer is not None:
            raise ProtocolError(
                f"{owner} tried to claim the d/rst writer, "
                f"already owned by {self._writer.owner}"
            )
        self._writer = DffIfWriter(owner, self._d, self._rst)
        self.logger.debug("writer claimed by %s", owner)
        return self._writer

    def read_d(self) -> int | None:
        """Current d level, or None if X/Z."""
        return utils_dv.get_signal_value_int(self._d.value)

    def read_reset(self) -> int | None:
        """Current rst level, or None if X/Z."""
        return utils_dv.get_signal_value_int(self._rst.value)

    def read_q(self) -> int | None:
        """Current q level, or None if X/Z."""
        return utils_dv.get_signal_value_int(self._q.value)
