import logging

from .api import RunOptions, RunResult, parse_source, prepare, run_bytes, run_file, run_string
from .errors import (
    BFError,
    InputError,
    InterpreterError,
    OutputError,
    ParseError,
    PointerUnderflow,
    ProgramLoadError,
    SourceError,
    UnmatchedLoopEnd,
    UnmatchedLoopStart,
)
from .interpreter import Interpreter
from .lexer import Lexer, tokenize
from .ops import CellDelta, ClearCell, Input, Loop, Output, PointerMove
from .optimizer import Optimizer, optimize
from .parser import Parser, parse
from .rules import CellAdjustmentRule, ClearLoopRule, OptimizationRule, PointerAdjustmentRule
from .tokens import Token

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'Token',
    'Lexer',
    'tokenize',
    'Parser',
    'parse',
    'PointerMove',
    'CellDelta',
    'Output',
    'Input',
    'Loop',
    'ClearCell',
    'Optimizer',
    'optimize',
    'OptimizationRule',
    'PointerAdjustmentRule',
    'CellAdjustmentRule',
    'ClearLoopRule',
    'Interpreter',
    'BFError',
    'ParseError',
    'UnmatchedLoopStart',
    'UnmatchedLoopEnd',
    'InterpreterError',
    'PointerUnderflow',
    'InputError',
    'OutputError',
    'SourceError',
    'ProgramLoadError',
    'RunOptions',
    'RunResult',
    'parse_source',
    'prepare',
    'run_string',
    'run_file',
    'run_bytes',
]
