# midval/peg/tree.py
"""Concrete parse tree produced by the packrat engine.

- one `ParseNode` per successful application of a non-silent rule
- a silent rule contributes no node; whatever its body produced is
  spliced into the parent's children
- an atomic rule yields a childless leaf; its `text` is the raw match
- nodes store spans only; every node of one parse shares the same `source`
  string and `text` is sliced from it on demand
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class ParseNode:
    rule: str
    start: int
    end: int
    children: Tuple["ParseNode", ...] = ()
    source: str = field(default="", repr=False)

    @property
    def text(self) -> str:
        return self.source[self.start:self.end]

    @property
    def span(self) -> Tuple[int, int]:
        return self.start, self.end

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def child(self, rule: str) -> Optional["ParseNode"]:
        """First direct child produced by `rule`, or None."""
        for c in self.children:
            if c.rule == rule:
                return c
        return None

    def children_of(self, rule: str) -> List["ParseNode"]:
        return [c for c in self.children if c.rule == rule]

    def walk(self) -> Iterator["ParseNode"]:
        yield self
        for c in self.children:
            yield from c.walk()

    def pretty(self, indent: int = 0) -> str:
        pad = "  " * indent
        if self.is_leaf:
            return f"{pad}{self.rule} {self.start}..{self.end} {self.text!r}"
        lines = [f"{pad}{self.rule} {self.start}..{self.end}"]
        lines.extend(c.pretty(indent + 1) for c in self.children)
        return "\n".join(lines)


def make_node(rule: str, text: str, start: int, end: int,
              children: List[ParseNode], leaf: bool = False) -> ParseNode:
    """Build the node for one rule application over `text[start:end]`."""
    return ParseNode(
        rule=rule,
        start=start,
        end=end,
        children=() if leaf else tuple(children),
        source=text,
    )
