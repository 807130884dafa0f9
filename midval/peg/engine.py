# midval/peg/engine.py
from __future__ import annotations
import logging
from typing import Dict, Tuple, List, NamedTuple, Optional, Union

from ..config import ParserConfig, DEFAULT_CONFIG
from .ast import (
    Literal, CharClass, Any, Ref, And, Not, Repeat, Seq, Choice,
    PegGrammar, Node
)
from .cursor import Cursor, Snapshot
from .errors import Diagnostic, ErrorCollector, GrammarError, NestingTooDeepError
from .tree import ParseNode, make_node

logger = logging.getLogger(__name__)

# Packrat engine:
# - Memoize rule applications (rule_name, pos, atomic) -> (flag, ok, end, nodes)
# - Left recursion is not supported: re-entering a rule at the same key while
#   it is still running raises GrammarError.
# - Between the items of a Seq and between the iterations of a repetition the
#   trivia rules (WHITESPACE, COMMENT by default) are skipped, unless the
#   surrounding rule is atomic. The trivia rules themselves are always atomic.
# - A silent rule drops its own node (its children pass up to the caller)
#   and nothing inside it is tracked for diagnostics.
# - Atomic context is inherited by every rule called from an atomic rule.


class Success(NamedTuple):
    node: ParseNode
    end: int


class Failure(NamedTuple):
    reached: int


MatchResult = Union[Success, Failure]

_RUNNING, _DONE = 1, 2


class Packrat:
    def __init__(self, g: PegGrammar, config: ParserConfig = DEFAULT_CONFIG):
        self.g = g
        self.config = config
        # memo: (rule_name, pos, atomic) -> (flag, ok, end_snapshot, nodes)
        self.memo: Dict[Tuple[str, int, bool],
                        Tuple[int, bool, Optional[Snapshot], Tuple[ParseNode, ...]]] = {}
        self.errors = ErrorCollector()
        self.cursor = Cursor("")
        self.depth = 0
        self._deepest = 0
        self._quiet = 0  # > 0 while inside a lookahead predicate
        self._trivia = tuple(
            name for name in (config.whitespace_rule, config.comment_rule)
            if name in g.rules
        )

    # ---- Public entrypoints for one rule ----
    def parse(self, rule_name: str, text: str, pos: int = 0) -> Tuple[bool, int]:
        res = self.match(rule_name, text, pos)
        if isinstance(res, Success):
            return True, res.end
        return False, pos

    def match(self, rule_name: str, text: str, pos: int = 0) -> MatchResult:
        # all state is per invocation
        self.memo.clear()
        self.errors = ErrorCollector()
        self.depth = 0
        self._deepest = 0
        self._quiet = 0
        self.cursor = Cursor(text)
        if pos:
            self.cursor.advance(pos)
        rule = self.g.require_rule(rule_name)
        logger.debug("match %s on %d chars from offset %d", rule_name, len(text), pos)

        try:
            ok, nodes = self._apply_rule(rule_name, False)
        except RecursionError:
            raise NestingTooDeepError(self._deepest, self.cursor.offset,
                                      stack_exhausted=True) from None

        end = self.cursor.offset
        logger.debug("match %s %s at %d (memo entries: %d)",
                     rule_name, "succeeded" if ok else "failed", end, len(self.memo))
        if not ok:
            return Failure(max(self.errors.pos, pos))
        if rule.silent:
            return Success(make_node(rule_name, text, pos, end, nodes), end)
        return Success(nodes[0], end)

    def diagnostic(self, rule_name: str) -> Diagnostic:
        """Furthest-failure report of the last `match` call."""
        return self.errors.diagnostic(self.cursor, fallback=rule_name)

    # ---- Rule application with memoization ----
    def _apply_rule(self, name: str, atomic: bool) -> Tuple[bool, List[ParseNode]]:
        cur = self.cursor
        start = cur.mark()
        key = (name, start.offset, atomic)
        rule = self.g.require_rule(name)
        track = not atomic and not rule.silent and not self._quiet

        m = self.memo.get(key)
        if m is not None:
            flag, ok, end, nodes = m
            if flag == _RUNNING:
                raise GrammarError(
                    f"PEG: left recursion in rule '{name}' at offset {start.offset}")
            if ok:
                cur.restore(end)  # type: ignore[arg-type]
                return True, list(nodes)
            if track:
                self.errors.rule_failed(name, start.offset, self.errors.checkpoint())
            return False, []

        # mark in-progress
        self.memo[key] = (_RUNNING, False, None, ())
        self.depth += 1
        self._deepest = max(self._deepest, self.depth)
        if self.depth > self.config.max_depth:
            raise NestingTooDeepError(self.config.max_depth, start.offset)
        checkpoint = self.errors.checkpoint()
        if rule.silent:
            self._quiet += 1
        try:
            ok, inner = self._eval(rule.expr,
                                   atomic or rule.atomic or name in self._trivia)
        finally:
            self.depth -= 1
            if rule.silent:
                self._quiet -= 1

        out: List[ParseNode] = []
        if ok:
            if rule.silent:
                out = inner
            elif not atomic:
                out = [make_node(name, cur.text, start.offset, cur.offset, inner,
                                 leaf=rule.atomic)]
        else:
            cur.restore(start)
            if track:
                self.errors.rule_failed(name, start.offset, checkpoint)

        # store result
        if self.config.memoize:
            self.memo[key] = (_DONE, ok, cur.mark(), tuple(out))
        else:
            del self.memo[key]
        return ok, out

    def _skip(self) -> None:
        """Implicit whitespace/comment skipping between two items."""
        cur = self.cursor
        while True:
            before = cur.offset
            for name in self._trivia:
                self._apply_rule(name, True)
            if cur.offset == before:
                return

    # ---- Evaluator for expressions ----
    def _eval(self, node: Node, atomic: bool) -> Tuple[bool, List[ParseNode]]:
        cur = self.cursor

        if isinstance(node, Literal):
            if cur.startswith(node.text):
                cur.advance(len(node.text))
                return True, []
            if not atomic and not self._quiet:
                self.errors.record(cur.offset, f'"{node.text}"')
            return False, []

        if isinstance(node, Any):
            if not cur.at_end():
                cur.advance(1)
                return True, []
            return False, []

        if isinstance(node, CharClass):
            c = cur.peek()
            if c is not None and node.matches(c):
                cur.advance(1)
                return True, []
            return False, []

        if isinstance(node, Ref):
            return self._apply_rule(node.name, atomic)

        if isinstance(node, (And, Not)):
            snap = cur.mark()
            self._quiet += 1
            try:
                ok, _ = self._eval(node.node, atomic)
            finally:
                self._quiet -= 1
            cur.restore(snap)
            if isinstance(node, Not):
                ok = not ok
            return ok, []

        if isinstance(node, Repeat):
            if node.kind == "?":
                snap = cur.mark()
                ok, nodes = self._eval(node.node, atomic)
                if ok:
                    return True, nodes
                cur.restore(snap)
                return True, []
            if node.kind not in ("*", "+"):
                raise AssertionError(f"unknown repeat kind {node.kind!r}")
            out: List[ParseNode] = []
            count = 0
            if node.kind == "+":
                ok, nodes = self._eval(node.node, atomic)
                if not ok:
                    return False, []
                out.extend(nodes)
                count = 1
            while True:
                snap = cur.mark()
                if count and not atomic:
                    self._skip()
                ok, nodes = self._eval(node.node, atomic)
                if not ok or cur.offset == snap.offset:
                    cur.restore(snap)
                    break
                out.extend(nodes)
                count += 1
            return True, out

        if isinstance(node, Seq):
            snap = cur.mark()
            out = []
            for i, it in enumerate(node.items):
                if i and not atomic:
                    self._skip()
                ok, nodes = self._eval(it, atomic)
                if not ok:
                    cur.restore(snap)
                    return False, []
                out.extend(nodes)
            return True, out

        if isinstance(node, Choice):
            for it in node.alts:
                ok, nodes = self._eval(it, atomic)
                if ok:
                    return True, nodes
            return False, []

        raise AssertionError(f"unknown node: {node!r}")
