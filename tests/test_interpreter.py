#!/usr/bin/env python3
"""
Interpreter tests: tape growth, wraparound, I/O and runtime errors.
"""

import io

import pytest

from bfrun.errors import InputError, OutputError, PointerUnderflow
from bfrun.interpreter import Interpreter
from bfrun.lexer import tokenize
from bfrun.ops import CellDelta, ClearCell, Input, Loop, Output, PointerMove, wrap_cell_delta
from bfrun.optimizer import optimize
from bfrun.parser import parse
from bfrun.tape import DEFAULT_TAPE_SIZE, Tape


def execute(program, input_data=b"", interpreter=None):
    """Run a program (AST or source) in-process and return (output, interpreter)."""
    if isinstance(program, str):
        program = parse(tokenize(program))
    interpreter = interpreter or Interpreter()
    out = io.BytesIO()
    interpreter.run(program, input_stream=io.BytesIO(input_data), output_stream=out)
    return out.getvalue(), interpreter


class FailingReader:
    def read(self, size=-1):
        raise OSError("device not ready")


class FailingWriter:
    def write(self, data):
        raise OSError("broken pipe")

    def flush(self):
        pass


class FlushCountingWriter(io.BytesIO):
    def __init__(self):
        super().__init__()
        self.flushes = []

    def flush(self):
        self.flushes.append(self.getvalue())
        super().flush()


def test_wraparound_up():
    _, interp = execute((CellDelta(-1), CellDelta(1)))
    assert interp.last_tape[0] == 0

    _, interp = execute("+" * 255 + ">" + "+" * 255 + "+")
    assert interp.last_tape[0] == 255
    assert interp.last_tape[1] == 0


def test_wraparound_down():
    output, interp = execute((CellDelta(-1), Output()))
    assert output == b"\xff"
    assert interp.last_tape[0] == 255


def test_pointer_underflow():
    with pytest.raises(PointerUnderflow) as exc_info:
        execute("<")
    assert exc_info.value.position == 0
    assert exc_info.value.attempted_move == 1


def test_pointer_underflow_reports_pointer_and_move():
    with pytest.raises(PointerUnderflow) as exc_info:
        execute((PointerMove(2), PointerMove(-3)))
    assert exc_info.value.position == 2
    assert exc_info.value.attempted_move == 3
    assert "move left 3 steps" in str(exc_info.value)


@pytest.mark.parametrize("source, position, attempted_move", [
    ("<>", 0, 1),
    ("><<>>", 1, 2),
    ("+>.<<<>>.", 1, 3),
])
def test_underflow_inside_a_mixed_move_run(source, position, attempted_move):
    with pytest.raises(PointerUnderflow) as exc_info:
        execute(source)
    assert exc_info.value.position == position
    assert exc_info.value.attempted_move == attempted_move


def test_mixed_move_run_underflows_with_optimizer_too():
    with pytest.raises(PointerUnderflow) as exc_info:
        execute(optimize(parse(tokenize("<>"))))
    assert exc_info.value.position == 0
    assert exc_info.value.attempted_move == 1


def test_moving_back_to_zero_is_fine():
    _, interp = execute(">>><<<+")
    assert interp.last_pointer == 0
    assert interp.last_tape[0] == 1


def test_error_keeps_earlier_effects():
    interp = Interpreter()
    out = io.BytesIO()
    with pytest.raises(PointerUnderflow):
        interp.run(parse(tokenize("+.+<.")), input_stream=io.BytesIO(), output_stream=out)
    assert out.getvalue() == b"\x01"
    assert interp.last_tape[0] == 2


def test_tape_grows_past_initial_length():
    steps = DEFAULT_TAPE_SIZE + 5
    output, interp = execute((PointerMove(steps), Output(), CellDelta(1)))
    assert output == b"\x00"
    assert interp.last_pointer == steps
    assert len(interp.last_tape) == steps + 1
    assert interp.last_tape[steps] == 1


def test_tape_grows_one_move_at_a_time():
    interp = Interpreter(tape_size=1)
    output, interp = execute(">+" * 50 + ".", interpreter=interp)
    assert output == b"\x01"
    assert len(interp.last_tape) == 51
    assert all(interp.last_tape[i] == 1 for i in range(1, 51))


def test_eof_leaves_cell_unchanged():
    output, _ = execute("+++,.", input_data=b"")
    assert output == b"\x03"


def test_input_is_read_byte_by_byte():
    output, _ = execute(",.,.,.", input_data=b"AB")
    assert output == b"ABB"


def test_input_error():
    with pytest.raises(InputError) as exc_info:
        Interpreter().run((Input(),), input_stream=FailingReader(), output_stream=io.BytesIO())
    assert isinstance(exc_info.value.cause, OSError)
    assert exc_info.value.__cause__ is exc_info.value.cause


def test_output_error():
    with pytest.raises(OutputError) as exc_info:
        Interpreter().run((Output(),), input_stream=io.BytesIO(), output_stream=FailingWriter())
    assert isinstance(exc_info.value.cause, OSError)


def test_output_to_closed_stream():
    closed = io.BytesIO()
    closed.close()
    with pytest.raises(OutputError):
        Interpreter().run((Output(),), input_stream=io.BytesIO(), output_stream=closed)


def test_text_input_stream_is_an_input_error():
    with pytest.raises(InputError) as exc_info:
        Interpreter().run((Input(),), input_stream=io.StringIO("A"), output_stream=io.BytesIO())
    assert isinstance(exc_info.value.cause, TypeError)


def test_text_output_stream_is_an_output_error():
    with pytest.raises(OutputError) as exc_info:
        Interpreter().run((Output(),), input_stream=io.BytesIO(), output_stream=io.StringIO())
    assert isinstance(exc_info.value.cause, TypeError)


def test_output_is_flushed_per_byte():
    out = FlushCountingWriter()
    Interpreter().run(parse(tokenize("+.+.+.")), input_stream=io.BytesIO(), output_stream=out)
    assert out.flushes == [b"\x01", b"\x01\x02", b"\x01\x02\x03"]


def test_loops():
    output, _ = execute("++[>+++<-]>.")
    assert output == b"\x06"


def test_loop_skipped_when_cell_is_zero():
    output, _ = execute("[.]+.")
    assert output == b"\x01"


def test_clear_cell():
    _, interp = execute((CellDelta(5), ClearCell()))
    assert interp.last_tape[0] == 0
    _, interp = execute((ClearCell(),))
    assert interp.last_tape[0] == 0


@pytest.mark.parametrize("start", [0, 1, 2, 127, 128, 200, 255])
@pytest.mark.parametrize("step", [1, -1])
def test_clear_loop_matches_clear_cell(start, step):
    setup = (CellDelta(wrap_cell_delta(start)),) if start else ()
    _, looped = execute(setup + (Loop((CellDelta(step),)),))
    _, cleared = execute(setup + (ClearCell(),))
    assert looped.last_tape[0] == cleared.last_tape[0] == 0


def test_each_run_gets_a_fresh_tape():
    interp = Interpreter()
    execute("+>+", interpreter=interp)
    first = interp.last_tape
    execute("+", interpreter=interp)
    assert interp.last_tape is not first
    assert interp.last_tape[0] == 1
    assert interp.last_tape[1] == 0
    assert interp.last_pointer == 0


def test_unknown_op_is_rejected():
    with pytest.raises(TypeError):
        execute(("not an op",))


def test_tape_size_must_be_positive():
    with pytest.raises(ValueError):
        Tape(0)


def test_tape_ensure_never_shrinks():
    tape = Tape(4)
    tape.ensure(2)
    assert len(tape) == 4
    tape.ensure(9)
    assert len(tape) == 10
    assert tape.cells == bytearray(10)
