from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .lexer import command_offsets


def _build_context(lines: List[str], line_no_1: int, column_1: int, *, context: int = 2) -> str:
    idx = max(1, line_no_1)
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
        if i == idx:
            out.append(f"       | {' ' * (column_1 - 1)}^")
    return "\n".join(out)


def _hint_for(error: "ParseError") -> Optional[str]:
    if isinstance(error, UnmatchedLoopStart):
        return "This '[' is never closed. Add a matching ']' or remove it."
    if isinstance(error, UnmatchedLoopEnd):
        return "This ']' has no opening '['. Check for an extra ']' or a missing '[' before it."
    return None


def _line_and_column(source: str, offset: int) -> Tuple[int, int]:
    line = source.count('\n', 0, offset) + 1
    line_start = source.rfind('\n', 0, offset) + 1
    return line, offset - line_start + 1


@dataclass
class BFError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


# ---------------- Parse errors ----------------
@dataclass
class ParseError(BFError):
    position: int  # token index, not source offset


@dataclass
class UnmatchedLoopStart(ParseError):
    pass


@dataclass
class UnmatchedLoopEnd(ParseError):
    pass


def unmatched_loop_start(position: int) -> UnmatchedLoopStart:
    return UnmatchedLoopStart(message=f"Unmatched loop start at position {position}", position=position)


def unmatched_loop_end(position: int) -> UnmatchedLoopEnd:
    return UnmatchedLoopEnd(message=f"Unmatched loop end at position {position}", position=position)


# ---------------- Runtime errors ----------------
@dataclass
class InterpreterError(BFError):
    pass


@dataclass
class PointerUnderflow(InterpreterError):
    position: int
    attempted_move: int


@dataclass
class InputError(InterpreterError):
    cause: BaseException


@dataclass
class OutputError(InterpreterError):
    cause: BaseException


def pointer_underflow(position: int, attempted_move: int) -> PointerUnderflow:
    return PointerUnderflow(
        message=(
            f"Pointer underflow: attempted to move left {attempted_move} steps "
            f"when pointer was at position {position}"
        ),
        position=position,
        attempted_move=attempted_move,
    )


def input_error(cause: BaseException) -> InputError:
    return InputError(message=f"Input error: {cause}", cause=cause)


def output_error(cause: BaseException) -> OutputError:
    return OutputError(message=f"Output error: {cause}", cause=cause)


# ---------------- Host errors ----------------
@dataclass
class SourceError(BFError):
    """A parse error located in the source text it came from."""
    error: ParseError
    line: int
    column: int
    context: str


@dataclass
class ProgramLoadError(BFError):
    path: str


def make_source_error(error: ParseError, source: str) -> SourceError:
    offsets = command_offsets(source)
    if 0 <= error.position < len(offsets):
        offset = offsets[error.position]
    else:
        offset = len(source)
    line, column = _line_and_column(source, offset)
    ctx = _build_context(source.split('\n'), line, column)
    hint = _hint_for(error)
    hint_block = f"\nHint: {hint}" if hint else ""
    return SourceError(
        message=f"ParseError: {error.message} (line {line}, column {column})\n{ctx}{hint_block}",
        error=error,
        line=line,
        column=column,
        context=ctx,
    )
