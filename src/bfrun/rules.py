from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from .ops import CellDelta, ClearCell, Loop, Op, PointerMove, wrap_cell_delta
from .parser import POINTER_DELTA_MAX, POINTER_DELTA_MIN

Match = Tuple[List[Op], int]


class OptimizationRule(ABC):
    """
    A local rewrite over a window of an op sequence.

    `apply` looks at `ops[start:]` and either returns None (no match) or a
    pair (replacement, consumed): the ops that replace `ops[start:start + consumed]`.
    `consumed` is always >= 1 and the replacement must be observably equivalent
    to the ops it replaces. A match must also shrink the tree, which is what
    lets the optimizer iterate to a fixpoint.
    """

    name = "rule"

    @abstractmethod
    def apply(self, ops: Sequence[Op], start: int) -> Optional[Match]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PointerAdjustmentRule(OptimizationRule):
    """
    Merge adjacent pointer moves: `><><>` => `>`, `>><<` => nothing.

    A merged move must underflow exactly when the original run does. That holds
    when no prefix of the run goes negative, or when the run ends at its lowest
    point. Only the longest such prefix (of at least 2 moves) is merged.
    """

    name = "pointer-adjustment"

    def apply(self, ops: Sequence[Op], start: int) -> Optional[Match]:
        total = 0
        lowest = 0
        best_count = 0
        best_net = 0

        i = start
        while i < len(ops):
            op = ops[i]
            if not isinstance(op, PointerMove):
                break
            total += op.delta
            lowest = total if i == start else min(lowest, total)
            i += 1
            count = i - start
            if count < 2:
                continue
            if not (POINTER_DELTA_MIN <= total <= POINTER_DELTA_MAX):
                continue
            if lowest >= 0 or lowest == total:
                best_count, best_net = count, total

        if best_count < 2:
            return None
        replacement: List[Op] = [PointerMove(best_net)] if best_net != 0 else []
        return replacement, best_count


class CellAdjustmentRule(OptimizationRule):
    """Merge adjacent cell changes modulo 256: `+-+-+` => `+`, `++--` => nothing."""

    name = "cell-adjustment"

    def apply(self, ops: Sequence[Op], start: int) -> Optional[Match]:
        net = 0
        i = start
        while i < len(ops) and isinstance(ops[i], CellDelta):
            net += ops[i].delta  # type: ignore[union-attr]
            i += 1

        consumed = i - start
        if consumed < 2:
            return None
        net = wrap_cell_delta(net)
        replacement: List[Op] = [CellDelta(net)] if net != 0 else []
        return replacement, consumed


class ClearLoopRule(OptimizationRule):
    """
    `[-]` and `[+]` => ClearCell.

    A step of 1 visits every residue mod 256, so the loop always stops at 0.
    Other odd steps would too, but only +/-1 is rewritten.
    """

    name = "clear-loop"

    CLEAR_BODIES = ((CellDelta(1),), (CellDelta(-1),))

    def apply(self, ops: Sequence[Op], start: int) -> Optional[Match]:
        op = ops[start]
        if isinstance(op, Loop) and op.body in self.CLEAR_BODIES:
            return [ClearCell()], 1
        return None


def default_rules() -> Tuple[OptimizationRule, ...]:
    return (PointerAdjustmentRule(), CellAdjustmentRule(), ClearLoopRule())
