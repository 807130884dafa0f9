# midval/peg/cursor.py
"""Input cursor over the source text.

The matcher never copies the text; it moves a single `Cursor` and rolls it
back through `mark()`/`restore()` pairs. A `Snapshot` is a plain immutable
triple, so both operations are O(1).
"""

from __future__ import annotations
from bisect import bisect_right
from typing import List, NamedTuple, Optional, Tuple


class Snapshot(NamedTuple):
    offset: int
    line: int
    column: int


class Cursor:
    __slots__ = ("text", "offset", "line", "column", "_line_starts")

    def __init__(self, text: str):
        self.text = text
        self.offset = 0
        self.line = 1
        self.column = 1
        self._line_starts: Optional[List[int]] = None

    def __repr__(self) -> str:
        return f"Cursor(offset={self.offset}, line={self.line}, column={self.column})"

    def at_end(self) -> bool:
        return self.offset >= len(self.text)

    def peek(self, k: int = 0) -> Optional[str]:
        j = self.offset + k
        if j >= len(self.text):
            return None
        return self.text[j]

    def startswith(self, lit: str) -> bool:
        return self.text.startswith(lit, self.offset)

    def advance(self, n: int = 1) -> None:
        end = min(self.offset + n, len(self.text))
        chunk = self.text[self.offset:end]
        newlines = chunk.count("\n")
        if newlines:
            self.line += newlines
            self.column = end - chunk.rfind("\n") - self.offset
        else:
            self.column += end - self.offset
        self.offset = end

    def mark(self) -> Snapshot:
        return Snapshot(self.offset, self.line, self.column)

    def restore(self, snap: Snapshot) -> None:
        self.offset, self.line, self.column = snap

    # ---- offset -> (line, column), for positions the cursor is not at ----

    def line_col(self, offset: int) -> Tuple[int, int]:
        if self._line_starts is None:
            starts = [0]
            i = self.text.find("\n")
            while i >= 0:
                starts.append(i + 1)
                i = self.text.find("\n", i + 1)
            self._line_starts = starts
        idx = bisect_right(self._line_starts, offset) - 1
        return idx + 1, offset - self._line_starts[idx] + 1
