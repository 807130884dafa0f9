# midval/peg/errors.py
"""Failure reporting for the PEG engine.

- `Diagnostic`     : furthest-failure record (offset, line, column, expected names)
- `ErrorCollector` : invocation-scoped side channel fed by the matcher while it
                     backtracks; the only place local failures survive
- exceptions       : `ParseError` is an ordinary, recoverable syntax error.
                     `InternalEngineError` and its subclasses are programmer
                     errors (bad grammar, runaway nesting) and are never turned
                     into a `ParseError`.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple, Optional

from .cursor import Cursor


def _line_bounds(src: str, pos: int) -> Tuple[int, int]:
    """Return the [start, end) range of the line containing `pos`."""
    start = src.rfind("\n", 0, pos)
    start = 0 if start < 0 else start + 1
    end = src.find("\n", pos)
    end = len(src) if end < 0 else end
    return start, end


def caret_snippet(src: str, pos: int) -> str:
    """Render the line holding absolute offset `pos` with a caret under it."""
    start, end = _line_bounds(src, pos)
    line = src[start:end]
    col = (pos - start) + 1
    caret = " " * (col - 1) + "^"
    return f"{line}\n{caret}"


@dataclass(frozen=True)
class Diagnostic:
    offset: int
    line: int
    column: int
    expected: Tuple[str, ...]

    @property
    def message(self) -> str:
        names = ", ".join(self.expected) if self.expected else "end of input"
        return f"expected one of {{{names}}} at line {self.line}, column {self.column}"

    def snippet(self, text: str) -> str:
        return caret_snippet(text, self.offset)

    def __str__(self) -> str:
        return self.message


class ErrorCollector:
    """Tracks the furthest failure position and the names tried there.

    Two kinds of records arrive from the engine:

    - `record(pos, name)` for a single terminal attempt (a keyword literal)
    - `rule_failed(name, pos, checkpoint)` when a whole rule application
      fails. If the rule's own sub-attempts were recorded at the rule's start
      offset, they are replaced by the rule name: a rule that made no progress
      at all is reported as itself rather than as the list of everything it
      tried underneath.
    """

    def __init__(self) -> None:
        self.pos = -1
        self.names: List[str] = []

    def checkpoint(self) -> Tuple[int, int]:
        return self.pos, len(self.names)

    def record(self, pos: int, name: str) -> None:
        if pos > self.pos:
            self.pos = pos
            self.names = [name]
        elif pos == self.pos and name not in self.names:
            self.names.append(name)

    def rule_failed(self, name: str, pos: int, checkpoint: Tuple[int, int]) -> None:
        if pos < self.pos:
            # something inside (or before) got further; keep that
            return
        if pos > self.pos:
            self.pos = pos
            self.names = [name]
            return
        prev_pos, prev_len = checkpoint
        if prev_pos == pos:
            del self.names[prev_len:]
        else:
            # the furthest point moved to `pos` while this rule ran
            self.names = []
        if name not in self.names:
            self.names.append(name)

    def diagnostic(self, cursor: Cursor, fallback: str) -> Diagnostic:
        """Freeze the current record. `fallback` names the root rule when nothing
        was tracked at all (e.g. the root itself is silent)."""
        pos = self.pos if self.pos >= 0 else 0
        names = tuple(self.names) if self.names else (fallback,)
        line, col = cursor.line_col(pos)
        return Diagnostic(offset=pos, line=line, column=col, expected=names)


class InternalEngineError(RuntimeError):
    """Fatal engine condition. Indicates a bug in the grammar or its use."""


class GrammarError(InternalEngineError):
    """Rule table inconsistency: dangling reference, duplicate rule,
    malformed grammar text or left recursion."""


class NestingTooDeepError(InternalEngineError):
    """`depth` is the configured ceiling, or the depth reached when the
    Python stack ran out first (`stack_exhausted`)."""

    def __init__(self, depth: int, offset: int, stack_exhausted: bool = False) -> None:
        self.depth = depth
        self.offset = offset
        self.stack_exhausted = stack_exhausted
        if stack_exhausted:
            msg = (f"nesting too deep: the Python stack ran out after {depth} "
                   f"nested rule applications, below the configured ceiling, "
                   f"at offset {offset}")
        else:
            msg = (f"nesting too deep: more than {depth} nested rule "
                   f"applications at offset {offset}")
        super().__init__(msg)


class ParseError(SyntaxError):
    """The input does not belong to the language.

    Carries the furthest-failure `Diagnostic` and fills the usual
    `SyntaxError` attributes (`filename`, `lineno`, `offset`, `text`)."""

    def __init__(self, diagnostic: Diagnostic, source: str = "",
                 filename: Optional[str] = "<input>") -> None:
        self.diagnostic = diagnostic
        start, end = _line_bounds(source, diagnostic.offset) if source else (0, 0)
        line_text = source[start:end]
        msg = diagnostic.message
        if source:
            msg += "\n" + diagnostic.snippet(source)
        super().__init__(msg, (filename, diagnostic.line, diagnostic.column, line_text))

    @property
    def expected(self) -> Tuple[str, ...]:
        return self.diagnostic.expected
