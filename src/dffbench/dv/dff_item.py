# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/dffbench/dv/dff_item.py

"""Stimulus/observation record exchanged between bench stages."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any

from .utils_dv import as_bit


@dataclass(frozen=True)
class DffItem:
    """One register cycle: input bits d/reset and output bit q.

    The same record type travels on both sides of the scoreboard:

    - Expected records come from the generator. Their ``d`` and ``reset``
      fields are the stimulus fed to the DUT; ``q`` is unused and left at 0.
    - Observed records come from the monitor. ``q`` is the sampled output;
      ``d`` and ``reset`` are the input levels seen at the same sampling
      instant and are carried for tracing only.

    Records are frozen, so one instance can be handed to several consumers
    without a copy. Every field is validated at construction; a non-bit value
    raises ProtocolError.

    Example:
        >>> exp = DffItem.expected(d=1, reset=0)
        >>> act = DffItem.observed(q=1, d=0)
        >>> exp == DffItem(d=1, reset=0)
        True
        >>> act.outputs_str()
        '{"q": 1}'
    """

    d: int = 0
    reset: int = 0
    q: int = 0

    def __post_init__(self) -> None:
        for f in self._all_fields():
            object.__setattr__(self, f, as_bit(f, getattr(self, f)))

    @classmethod
    def expected(cls, d: Any, reset: Any) -> DffItem:
        """Input-side record (stimulus)."""
        return cls(d=d, reset=reset)

    @classmethod
    def observed(cls, q: Any, d: Any, reset: Any = 0) -> DffItem:
        """Output-side record (sampled DUT state)."""
        return cls(d=d, reset=reset, q=q)

    def _in_fields(self) -> tuple[str, ...]:
        return ("d", "reset")

    def _out_fields(self) -> tuple[str, ...]:
        return ("q",)

    def _all_fields(self) -> tuple[str, ...]:
        return self._in_fields() + self._out_fields()

    def to_dict(self) -> dict[str, int]:
        """All three bits as a plain dict."""
        return asdict(self)

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)

    def inputs_str(self) -> str:
        """d and reset as sorted JSON, for driver traces."""
        return json.dumps(
            {f: getattr(self, f) for f in self._in_fields()}, sort_keys=True
        )

    def outputs_str(self) -> str:
        """q as JSON, for scoreboard traces."""
        return json.dumps(
            {f: getattr(self, f) for f in self._out_fields()}, sort_keys=True
        )
