from __future__ import annotations

from enum import Enum
from typing import Dict


class Token(Enum):
    """The 8 Brainfuck commands. Tokens carry no payload."""
    MOVE_RIGHT = '>'
    MOVE_LEFT = '<'
    INCREMENT = '+'
    DECREMENT = '-'
    OUTPUT = '.'
    INPUT = ','
    LOOP_START = '['
    LOOP_END = ']'

    @property
    def char(self) -> str:
        return self.value


COMMAND_CHARS = frozenset(t.value for t in Token)

TOKEN_FOR_CHAR: Dict[str, Token] = {t.value: t for t in Token}

# Signed step of the directional tokens. The parser folds runs of one pointer
# token, and mixed runs of the cell tokens.
POINTER_STEP: Dict[Token, int] = {Token.MOVE_RIGHT: 1, Token.MOVE_LEFT: -1}
CELL_STEP: Dict[Token, int] = {Token.INCREMENT: 1, Token.DECREMENT: -1}
