#!/usr/bin/env python3
"""
Times each stage of the pipeline (lex, parse, optimize, run) on the sample
programs in examples/, with and without the optimizer.

Usage:
  python bench_pipeline.py            Run all samples
  python bench_pipeline.py --runs 10  More repetitions per stage
"""

import argparse
import io
import statistics
import time

from pathlib import Path

from bfrun import Interpreter, Lexer, Optimizer, Parser

EXAMPLES_DIR = Path(__file__).parent / "examples"

# program inputs, by file name
SAMPLE_INPUT = {
    "cat.bf": b"The quick brown fox jumps over the lazy dog\n" * 20,
    "reverse.bf": b"stressed desserts",
}


def bench(name, fn, runs=5, warmup=1):
    """Run fn() multiple times, report statistics."""
    for _ in range(warmup):
        fn()

    times = []
    for _ in range(runs):
        t0 = time.perf_counter()
        fn()
        t1 = time.perf_counter()
        times.append((t1 - t0) * 1000)  # ms

    return {
        "name": name,
        "mean_ms": statistics.mean(times),
        "stdev_ms": statistics.stdev(times) if len(times) > 1 else 0,
        "min_ms": min(times),
        "max_ms": max(times),
    }


def fmt_bench(b):
    return (f"  {b['name']:40s}  "
            f"{b['mean_ms']:8.2f} ms  "
            f"(±{b['stdev_ms']:.2f}, "
            f"min={b['min_ms']:.2f}, "
            f"max={b['max_ms']:.2f})")


def bench_program(path, runs):
    source = path.read_text(encoding="utf-8")
    data = SAMPLE_INPUT.get(path.name, b"")
    tokens = Lexer(source).tokenize()
    program = Parser(tokens).parse()
    optimizer = Optimizer()
    optimized = optimizer.optimize(program)

    def execute(ops):
        Interpreter().run(ops, input_stream=io.BytesIO(data), output_stream=io.BytesIO())

    return [
        bench(f"{path.name}: lex", lambda: Lexer(source).tokenize(), runs),
        bench(f"{path.name}: parse", lambda: Parser(tokens).parse(), runs),
        bench(f"{path.name}: optimize", lambda: optimizer.optimize(program), runs),
        bench(f"{path.name}: run (parsed)", lambda: execute(program), runs),
        bench(f"{path.name}: run (optimized)", lambda: execute(optimized), runs),
    ]


def main():
    parser = argparse.ArgumentParser(description="Benchmark the bfrun pipeline")
    parser.add_argument("--runs", type=int, default=5, help="Repetitions per stage (default 5)")
    args = parser.parse_args()

    for path in sorted(EXAMPLES_DIR.glob("*.bf")):
        print(path.name)
        for result in bench_program(path, args.runs):
            print(fmt_bench(result))


if __name__ == "__main__":
    main()
