from __future__ import annotations

from typing import Iterator, List

from .tokens import COMMAND_CHARS, TOKEN_FOR_CHAR, Token


class Lexer:
    """
    Brainfuck lexer.

    Turns source text into an ordered token sequence. Every character that is
    not one of the 8 commands is a comment and is dropped; lexing never fails.

    The lexer is restartable: each iteration starts over from the beginning of
    the source, so the same instance can be tokenized any number of times.
    """

    def __init__(self, source: str):
        self.source = source

    def __iter__(self) -> Iterator[Token]:
        pos = 0
        length = len(self.source)
        while pos < length:
            token = TOKEN_FOR_CHAR.get(self.source[pos])
            pos += 1
            if token is not None:
                yield token

    def tokenize(self) -> List[Token]:
        return list(self)


def tokenize(source: str) -> List[Token]:
    return Lexer(source).tokenize()


def command_offsets(source: str) -> List[int]:
    """Source index of every command character, indexed by token position."""
    return [i for i, ch in enumerate(source) if ch in COMMAND_CHARS]
