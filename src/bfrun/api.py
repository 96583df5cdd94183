from __future__ import annotations

import io

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Sequence

from .errors import ParseError, ProgramLoadError, make_source_error
from .interpreter import Interpreter
from .lexer import Lexer
from .ops import Program
from .optimizer import Optimizer
from .parser import Parser
from .rules import OptimizationRule
from .tape import DEFAULT_TAPE_SIZE


@dataclass(frozen=True)
class RunOptions:
    optimize: bool = True
    tape_size: int = DEFAULT_TAPE_SIZE
    rules: Optional[Sequence[OptimizationRule]] = None  # None: default rules


@dataclass(frozen=True)
class RunResult:
    program: Program
    pointer: int
    tape_length: int


def parse_source(source: str) -> Program:
    try:
        return Parser(Lexer(source)).parse()
    except ParseError as e:
        raise make_source_error(e, source) from e


def prepare(source: str, *, options: Optional[RunOptions] = None) -> Program:
    options = options or RunOptions()
    program = parse_source(source)
    if options.optimize:
        program = Optimizer(options.rules).optimize(program)
    return program


def run_string(
    source: str,
    *,
    options: Optional[RunOptions] = None,
    input_stream: Optional[BinaryIO] = None,
    output_stream: Optional[BinaryIO] = None,
) -> RunResult:
    options = options or RunOptions()
    program = prepare(source, options=options)
    interpreter = Interpreter(tape_size=options.tape_size)
    interpreter.run(program, input_stream, output_stream)
    tape = interpreter.last_tape
    return RunResult(
        program=program,
        pointer=interpreter.last_pointer,
        tape_length=len(tape) if tape is not None else 0,
    )


def load_source(path: str | Path, *, encoding: str = "utf-8") -> str:
    p = Path(path)
    try:
        return p.read_text(encoding=encoding, errors="replace")
    except OSError as e:
        raise ProgramLoadError(message=f"Couldn't read program file {p}: {e}", path=str(p)) from e


def run_file(
    path: str | Path,
    *,
    options: Optional[RunOptions] = None,
    input_stream: Optional[BinaryIO] = None,
    output_stream: Optional[BinaryIO] = None,
    encoding: str = "utf-8",
) -> RunResult:
    source = load_source(path, encoding=encoding)
    return run_string(source, options=options, input_stream=input_stream, output_stream=output_stream)


def run_bytes(source: str, input_data: bytes = b"", *, options: Optional[RunOptions] = None) -> bytes:
    """Run against in-memory streams and return everything the program output."""
    out = io.BytesIO()
    run_string(source, options=options, input_stream=io.BytesIO(input_data), output_stream=out)
    return out.getvalue()
