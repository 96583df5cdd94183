from __future__ import annotations

import argparse
import logging
import sys
import time

from pathlib import Path
from typing import List, Optional

from .api import load_source, parse_source
from .debug import format_op_stats, format_tape_summary, op_stats, render_tree
from .errors import BFError, InterpreterError
from .interpreter import Interpreter
from .ops import Program
from .optimizer import Optimizer
from .tape import DEFAULT_TAPE_SIZE

logger = logging.getLogger("bfrun")


def _dump(program: Program, path: str) -> None:
    Path(path).write_text(render_tree(program), encoding="utf-8")
    logger.info("wrote %s", path)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bfrun",
        description="Brainfuck interpreter with a peephole optimizer.",
    )
    parser.add_argument("file", help="Brainfuck program to run")
    parser.add_argument("--no-optimize", action="store_true", help="Run the parsed program as is")
    parser.add_argument("--input", metavar="PATH", help="Read program input from PATH instead of stdin")
    parser.add_argument("--tape-size", type=int, default=DEFAULT_TAPE_SIZE,
                        help=f"Initial tape length (default {DEFAULT_TAPE_SIZE})")
    parser.add_argument("--dump-ast", metavar="PATH", help="Write the parsed program to PATH")
    parser.add_argument("--dump-optimized", metavar="PATH", help="Write the optimized program to PATH")
    parser.add_argument("--stats", action="store_true", help="Print operation counts to stderr")
    parser.add_argument("--dump-tape", action="store_true", help="Print non-zero tape cells to stderr after the run")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log timings and optimizer details")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.tape_size < 1:
        print(f"Error: --tape-size must be at least 1, got {args.tape_size}", file=sys.stderr)
        return 1

    try:
        source = load_source(args.file)

        start = time.perf_counter()
        program = parse_source(source)
        logger.info("parsing took %.2f ms", (time.perf_counter() - start) * 1000)
    except BFError as e:
        print(e, file=sys.stderr)
        return 1

    if args.dump_ast:
        _dump(program, args.dump_ast)

    if not args.no_optimize:
        start = time.perf_counter()
        program = Optimizer().optimize(program)
        logger.info("optimization took %.2f ms", (time.perf_counter() - start) * 1000)
        if args.dump_optimized:
            _dump(program, args.dump_optimized)

    if args.stats:
        print(format_op_stats(op_stats(program)), file=sys.stderr)

    interpreter = Interpreter(tape_size=args.tape_size)
    status = 0
    start = time.perf_counter()
    try:
        if args.input:
            with open(args.input, "rb") as input_stream:
                interpreter.run(program, input_stream=input_stream)
        else:
            interpreter.run(program)
    except InterpreterError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        status = 2
    except OSError as e:
        print(f"Couldn't open input file: {e}", file=sys.stderr)
        return 1
    logger.info("execution took %.2f ms", (time.perf_counter() - start) * 1000)

    if args.dump_tape and interpreter.last_tape is not None:
        print(format_tape_summary(interpreter.last_tape.cells, interpreter.last_pointer), file=sys.stderr)

    return status


if __name__ == "__main__":
    raise SystemExit(main())
