from __future__ import annotations

import logging

from typing import Iterable, List, Optional, Sequence, Tuple

from .ops import Loop, Op, Program
from .rules import OptimizationRule, default_rules

logger = logging.getLogger(__name__)


class Optimizer:
    """
    Peephole optimizer over the AST.

    One pass walks a sequence left to right; at each position the rules are
    tried in order and the first match wins. When nothing matches a Loop, its
    body is optimized on its own and rewrapped, so loop bodies never merge with
    the surrounding sequence. Passes repeat until the program stops changing.

    The optimizer only ever builds new trees and keeps no per-call state.
    Rules are registered during setup; each `optimize` call reads the rule
    tuple once, so a call never sees a half-registered rule set. Share an
    instance between threads only once setup is done.
    """

    def __init__(self, rules: Optional[Iterable[OptimizationRule]] = None):
        self._rules: Tuple[OptimizationRule, ...] = default_rules() if rules is None else tuple(rules)

    @classmethod
    def empty(cls) -> "Optimizer":
        return cls(rules=())

    @property
    def rules(self) -> Tuple[OptimizationRule, ...]:
        return self._rules

    def register_rule(self, rule: OptimizationRule) -> None:
        """Append a rule. Setup only: calls already running keep their rules."""
        self._rules = self._rules + (rule,)

    def optimize(self, program: Sequence[Op]) -> Program:
        rules = self._rules
        current: Program = tuple(program)
        passes = 0
        while True:
            passes += 1
            rewritten = self._optimize_ops(current, rules)
            if rewritten == current:
                break
            current = rewritten
        logger.debug("optimizer reached a fixpoint after %d pass(es)", passes)
        return current

    def _optimize_ops(self, ops: Program, rules: Tuple[OptimizationRule, ...]) -> Program:
        result: List[Op] = []
        i = 0
        while i < len(ops):
            for rule in rules:
                match = rule.apply(ops, i)
                if match is not None:
                    replacement, consumed = match
                    result.extend(replacement)
                    i += max(1, consumed)
                    break
            else:
                op = ops[i]
                if isinstance(op, Loop):
                    result.append(Loop(self._optimize_ops(op.body, rules)))
                else:
                    result.append(op)
                i += 1
        return tuple(result)


def optimize(program: Sequence[Op]) -> Program:
    return Optimizer().optimize(program)
