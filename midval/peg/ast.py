# midval/peg/ast.py
from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping, Tuple, Union

from .errors import GrammarError

# ---- PEG rule table node definitions ----

@dataclass(frozen=True)
class Literal:
    text: str  # unescaped text

@dataclass(frozen=True)
class CharClass:
    negated: bool
    # ranges are inclusive (lo..hi). singles is a tuple of single characters
    ranges: Tuple[Tuple[int, int], ...] = ()
    singles: Tuple[str, ...] = ()

    def matches(self, ch: str) -> bool:
        cp = ord(ch)
        ok = any(lo <= cp <= hi for (lo, hi) in self.ranges) or ch in self.singles
        return (not ok) if self.negated else ok

@dataclass(frozen=True)
class Any:
    pass

@dataclass(frozen=True)
class Ref:
    name: str

@dataclass(frozen=True)
class And:
    node: "Node"  # positive lookahead (&)

@dataclass(frozen=True)
class Not:
    node: "Node"  # negative lookahead (!)

@dataclass(frozen=True)
class Repeat:
    node: "Node"
    kind: str  # '?', '*', '+'

@dataclass(frozen=True)
class Seq:
    items: Tuple["Node", ...]

@dataclass(frozen=True)
class Choice:
    alts: Tuple["Node", ...]

Node = Union[Literal, CharClass, Any, Ref, And, Not, Repeat, Seq, Choice]


class Modifier:
    NONE   = "none"
    SILENT = "silent"   # consumes input, contributes no node
    ATOMIC = "atomic"   # no implicit skipping inside, one leaf node

    ALL = (NONE, SILENT, ATOMIC)


@dataclass(frozen=True)
class RuleDef:
    name: str
    expr: Node
    modifier: str = Modifier.NONE

    @property
    def silent(self) -> bool:
        return self.modifier == Modifier.SILENT

    @property
    def atomic(self) -> bool:
        return self.modifier == Modifier.ATOMIC


def iter_nodes(node: Node) -> Iterator[Node]:
    """Depth-first walk over an expression tree."""
    yield node
    if isinstance(node, (And, Not, Repeat)):
        yield from iter_nodes(node.node)
    elif isinstance(node, Seq):
        for it in node.items:
            yield from iter_nodes(it)
    elif isinstance(node, Choice):
        for it in node.alts:
            yield from iter_nodes(it)


@dataclass(frozen=True, eq=False)
class PegGrammar:
    """Immutable rule table: name -> RuleDef, the start rule and the
    declaration order. Shared by every parse of a `PegProgram`."""
    rules: Mapping[str, RuleDef]
    start: str
    order: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))
        object.__setattr__(self, "order", tuple(self.order or self.rules))

    def require_rule(self, name: str) -> RuleDef:
        try:
            return self.rules[name]
        except KeyError:
            raise GrammarError(f"PEG: undefined rule '{name}'") from None

    def validate(self) -> None:
        """Reject dangling references up front instead of mid-parse."""
        self.require_rule(self.start)
        for rule in self.rules.values():
            for node in iter_nodes(rule.expr):
                if isinstance(node, Ref) and node.name not in self.rules:
                    raise GrammarError(
                        f"PEG: rule '{rule.name}' refers to undefined rule '{node.name}'")
