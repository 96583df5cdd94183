from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

CELL_MODULUS = 256


def wrap_cell_delta(n: int) -> int:
    """Reduce a cell change modulo 256 into the signed 8-bit range -128..127."""
    v = n % CELL_MODULUS
    return v - CELL_MODULUS if v >= CELL_MODULUS // 2 else v


# ---------------- AST Nodes ----------------
@dataclass(frozen=True)
class PointerMove:
    delta: int  # net >/<, never 0


@dataclass(frozen=True)
class CellDelta:
    delta: int  # net +/- on current cell, -128..127, never 0


@dataclass(frozen=True)
class Output:
    pass


@dataclass(frozen=True)
class Input:
    pass


@dataclass(frozen=True)
class Loop:
    body: Tuple["Op", ...] = ()


@dataclass(frozen=True)
class ClearCell:
    pass  # only produced by the optimizer


Op = Union[PointerMove, CellDelta, Output, Input, Loop, ClearCell]
Program = Tuple[Op, ...]
