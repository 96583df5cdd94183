from __future__ import annotations

import logging
import sys

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .errors import unmatched_loop_end, unmatched_loop_start
from .ops import CellDelta, Input, Loop, Op, Output, PointerMove, Program, wrap_cell_delta
from .tokens import CELL_STEP, POINTER_STEP, Token

logger = logging.getLogger(__name__)

# Width of a pointer move, a signed machine word.
POINTER_DELTA_MAX = sys.maxsize
POINTER_DELTA_MIN = -sys.maxsize - 1


@dataclass(frozen=True)
class ParseDiagnostic:
    position: int
    message: str


class Parser:
    """
    Recursive descent parser: token sequence -> AST.

    - Runs of one pointer token (`>>>` or `<<`) fold into one PointerMove;
      a mixed run like `<>` stays two moves, so an underflow partway through
      it is still seen. Runs of `+`/`-` fold into one CellDelta carrying the
      net count. A run whose net is 0 produces no node.
    - Each `[` opens a nesting frame that remembers its token position; the
      body is parsed until the matching `]`.

    Raises UnmatchedLoopStart/UnmatchedLoopEnd on the first bracket error.
    Pointer runs that overflow the pointer width are clamped, not rejected;
    each clamp is recorded in `diagnostics`.
    """

    def __init__(self, tokens: Iterable[Token]):
        self.tokens: List[Token] = list(tokens)
        self.pos = 0
        self.diagnostics: List[ParseDiagnostic] = []

    def parse(self) -> Program:
        self.pos = 0
        self.diagnostics = []
        return self._parse_sequence(None)

    def _parse_sequence(self, loop_start: Optional[int]) -> Program:
        ops: List[Op] = []
        tokens = self.tokens

        while self.pos < len(tokens):
            token = tokens[self.pos]

            if token is Token.LOOP_END:
                if loop_start is None:
                    raise unmatched_loop_end(self.pos)
                # leave ']' for the frame that opened the loop
                return tuple(ops)

            if token in POINTER_STEP:
                start = self.pos
                # only identical pointer tokens fold; `<>` stays two moves
                net = self._count_run({token: POINTER_STEP[token]})
                net = self._clamp_pointer_delta(net, start)
                if net != 0:
                    ops.append(PointerMove(net))
            elif token in CELL_STEP:
                net = wrap_cell_delta(self._count_run(CELL_STEP))
                if net != 0:
                    ops.append(CellDelta(net))
            elif token is Token.OUTPUT:
                ops.append(Output())
                self.pos += 1
            elif token is Token.INPUT:
                ops.append(Input())
                self.pos += 1
            elif token is Token.LOOP_START:
                start = self.pos
                self.pos += 1
                body = self._parse_sequence(start)
                self.pos += 1  # matching ']'
                ops.append(Loop(body))

        if loop_start is not None:
            raise unmatched_loop_start(loop_start)
        return tuple(ops)

    def _count_run(self, steps: Dict[Token, int]) -> int:
        """Consume consecutive tokens found in `steps` and return their net count."""
        net = 0
        tokens = self.tokens
        while self.pos < len(tokens):
            step = steps.get(tokens[self.pos])
            if step is None:
                break
            net += step
            self.pos += 1
        return net

    def _clamp_pointer_delta(self, net: int, start: int) -> int:
        if POINTER_DELTA_MIN <= net <= POINTER_DELTA_MAX:
            return net
        clamped = POINTER_DELTA_MAX if net > 0 else POINTER_DELTA_MIN
        message = f"pointer run at position {start} overflows the move width; net {net} clamped to {clamped}"
        self.diagnostics.append(ParseDiagnostic(position=start, message=message))
        logger.warning(message)
        return clamped


def parse(tokens: Iterable[Token]) -> Program:
    return Parser(tokens).parse()
