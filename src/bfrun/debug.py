from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .ops import CellDelta, ClearCell, Input, Loop, Op, Output, PointerMove

CLEAR_CELL_NOTATION = "[0]"

BASIC_LABELS = (
    ("move_right", "Move pointer right (>)"),
    ("move_left", "Move pointer left (<)"),
    ("increment", "Increment cell (+)"),
    ("decrement", "Decrement cell (-)"),
    ("output", "Output byte (.)"),
    ("input", "Input byte (,)"),
    ("loop", "Loops ([...])"),
)
OPTIMIZED_LABELS = (
    ("clear_cell", "Clear cell"),
)


# ---------------- Rendering ----------------
def _run(ch: str, count: int) -> str:
    return ch + (str(count) if count > 1 else "")


def render_op(op: Op) -> str:
    """Compact notation: runs are the command plus a count (`+3`, `<2`)."""
    if isinstance(op, PointerMove):
        return _run(">", op.delta) if op.delta > 0 else _run("<", -op.delta)
    if isinstance(op, CellDelta):
        return _run("+", op.delta) if op.delta > 0 else _run("-", -op.delta)
    if isinstance(op, Output):
        return "."
    if isinstance(op, Input):
        return ","
    if isinstance(op, ClearCell):
        return CLEAR_CELL_NOTATION
    if isinstance(op, Loop):
        return "[" + render(op.body) + "]"
    raise TypeError(f"Unknown op: {op!r}")


def render(program: Sequence[Op]) -> str:
    return "".join(render_op(op) for op in program)


def render_tree(program: Sequence[Op], indent: int = 2) -> str:
    """One op per line, loop bodies indented between `[` and `]` lines."""
    lines: List[str] = []

    def walk(ops: Sequence[Op], level: int) -> None:
        pad = " " * (indent * level)
        for op in ops:
            if isinstance(op, Loop):
                lines.append(pad + "[")
                walk(op.body, level + 1)
                lines.append(pad + "]")
            else:
                lines.append(pad + render_op(op))

    walk(program, 0)
    return "\n".join(lines) + ("\n" if lines else "")


def to_source(program: Sequence[Op]) -> str:
    """Expand back into plain Brainfuck; ClearCell becomes `[-]`."""
    out: List[str] = []
    for op in program:
        if isinstance(op, PointerMove):
            out.append((">" * op.delta) if op.delta > 0 else ("<" * (-op.delta)))
        elif isinstance(op, CellDelta):
            out.append(("+" * op.delta) if op.delta > 0 else ("-" * (-op.delta)))
        elif isinstance(op, Output):
            out.append(".")
        elif isinstance(op, Input):
            out.append(",")
        elif isinstance(op, ClearCell):
            out.append("[-]")
        elif isinstance(op, Loop):
            out.append("[" + to_source(op.body) + "]")
    return "".join(out)


# ---------------- Operation frequencies ----------------
@dataclass
class OpStats:
    basic: Dict[str, int] = field(default_factory=dict)
    optimized: Dict[str, int] = field(default_factory=dict)

    @property
    def basic_total(self) -> int:
        return sum(self.basic.values())

    @property
    def optimized_total(self) -> int:
        return sum(self.optimized.values())

    def _bump(self, table: Dict[str, int], key: str) -> None:
        table[key] = table.get(key, 0) + 1


def op_stats(program: Sequence[Op]) -> OpStats:
    stats = OpStats()

    def count(ops: Sequence[Op]) -> None:
        for op in ops:
            if isinstance(op, PointerMove):
                stats._bump(stats.basic, "move_right" if op.delta > 0 else "move_left")
            elif isinstance(op, CellDelta):
                stats._bump(stats.basic, "increment" if op.delta > 0 else "decrement")
            elif isinstance(op, Output):
                stats._bump(stats.basic, "output")
            elif isinstance(op, Input):
                stats._bump(stats.basic, "input")
            elif isinstance(op, Loop):
                stats._bump(stats.basic, "loop")
                count(op.body)
            elif isinstance(op, ClearCell):
                stats._bump(stats.optimized, "clear_cell")

    count(program)
    return stats


def format_op_stats(stats: OpStats) -> str:
    out = ["Basic Operations:"]
    for key, label in BASIC_LABELS:
        out.append(f"  {label}: {stats.basic.get(key, 0)}")
    out.append(f"Total Basic Operations: {stats.basic_total}")
    if stats.optimized:
        out.append("Optimized Operations:")
        for key, label in OPTIMIZED_LABELS:
            out.append(f"  {label}: {stats.optimized.get(key, 0)}")
        out.append(f"Total Optimized Operations: {stats.optimized_total}")
    else:
        out.append("No optimized operations found.")
    return "\n".join(out)


# ---------------- Tape inspection ----------------
def tape_summary(cells: bytes, limit: Optional[int] = None) -> List[Tuple[int, int]]:
    """Non-zero cells of a tape as (index, value) pairs, lowest index first."""
    memory = np.frombuffer(bytes(cells), dtype=np.uint8)
    non_zero_addrs = np.nonzero(memory)[0]
    if limit is not None:
        non_zero_addrs = non_zero_addrs[:limit]
    return [(int(addr), int(memory[addr])) for addr in non_zero_addrs]


def format_tape_summary(cells: bytes, pointer: int, limit: Optional[int] = 64) -> str:
    pairs = tape_summary(cells, limit=limit)
    out = [f"Tape: {len(cells)} cells, pointer at {pointer}"]
    if not pairs:
        out.append("  (all cells are zero)")
    for addr, value in pairs:
        marker = " <- pointer" if addr == pointer else ""
        out.append(f"  [{addr:6d}] {value:3d}{marker}")
    return "\n".join(out)
