from __future__ import annotations

import sys

from typing import BinaryIO, Optional, Sequence

from .errors import input_error, output_error, pointer_underflow
from .ops import CellDelta, ClearCell, Input, Loop, Op, Output, PointerMove
from .tape import DEFAULT_TAPE_SIZE, Tape


class _Execution:
    """State of one run: its own tape, pointer and streams."""

    def __init__(self, tape: Tape, input_stream: BinaryIO, output_stream: BinaryIO):
        self.tape = tape
        self.cells = tape.cells
        self.pointer = 0
        self.input_stream = input_stream
        self.output_stream = output_stream

    def execute(self, ops: Sequence[Op]) -> None:
        cells = self.cells
        for op in ops:
            if isinstance(op, CellDelta):
                p = self.pointer
                cells[p] = (cells[p] + op.delta) & 0xFF
            elif isinstance(op, PointerMove):
                self._move(op.delta)
            elif isinstance(op, Loop):
                body = op.body
                while cells[self.pointer]:
                    self.execute(body)
            elif isinstance(op, ClearCell):
                cells[self.pointer] = 0
            elif isinstance(op, Output):
                self._write()
            elif isinstance(op, Input):
                self._read()
            else:
                raise TypeError(f"Unknown op: {op!r}")

    def _move(self, delta: int) -> None:
        if delta < 0:
            if self.pointer + delta < 0:
                raise pointer_underflow(self.pointer, -delta)
            self.pointer += delta
        else:
            self.pointer += delta
            self.tape.ensure(self.pointer)

    def _write(self) -> None:
        try:
            self.output_stream.write(bytes((self.cells[self.pointer],)))
            self.output_stream.flush()
        except (OSError, TypeError, ValueError) as e:
            raise output_error(e) from e

    def _read(self) -> None:
        try:
            data = self.input_stream.read(1)
            if data:
                self.cells[self.pointer] = data[0]
            # EOF: cell stays unchanged
        except (OSError, TypeError, ValueError) as e:
            raise input_error(e) from e


class Interpreter:
    """
    Tree-walking interpreter.

    Every call to `run` gets a fresh tape and a pointer at 0. The first error
    (PointerUnderflow, InputError, OutputError) aborts the run; cells already
    written and bytes already output stay as they are.

    Streams are binary: `input_stream.read(1)` returns b'' at end of input,
    each output byte is written and flushed before the next op runs. A text
    stream fails the run with InputError/OutputError like any other stream
    failure.
    """

    def __init__(self, tape_size: int = DEFAULT_TAPE_SIZE):
        self.tape_size = tape_size
        # snapshot of the most recent run, for the host
        self.last_tape: Optional[Tape] = None
        self.last_pointer = 0

    def run(
        self,
        program: Sequence[Op],
        input_stream: Optional[BinaryIO] = None,
        output_stream: Optional[BinaryIO] = None,
    ) -> None:
        if input_stream is None:
            input_stream = sys.stdin.buffer
        if output_stream is None:
            output_stream = sys.stdout.buffer

        execution = _Execution(Tape(self.tape_size), input_stream, output_stream)
        try:
            execution.execute(program)
        finally:
            self.last_tape = execution.tape
            self.last_pointer = execution.pointer
