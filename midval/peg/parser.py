# midval/peg/parser.py
"""Reader for the PEG notation the grammars are written in.

    grammar   := rule+
    rule      := ("%silent" | "%atomic")? NAME "<-" choice
    choice    := sequence ("/" sequence)*
    sequence  := prefixed+                  ends before the next rule head
    prefixed  := ("&" | "!")? suffixed
    suffixed  := primary ("?" | "*" | "+")?  the suffix is glued to its primary
    primary   := NAME | literal | class | "." | "(" choice ")"

    literal   := '...' | "..."               no raw newline inside
    class     := "[" "^"? (char | char "-" char)+ "]"   blanks are members
    escapes   := \\n \\r \\t \\\\ \\' \\" \\[ \\] \\^ \\-

Layout between tokens: blanks, newlines, `#` and `//` line comments.
"""

from __future__ import annotations
from typing import Container, Dict, List, Tuple

from .ast import (
    Literal, CharClass, Any, Ref, And, Not, Repeat, Seq, Choice,
    RuleDef, PegGrammar, Node, Modifier,
)
from .cursor import Cursor
from .errors import GrammarError

_ESCAPES = {
    "n": "\n", "r": "\r", "t": "\t",
    "\\": "\\", "'": "'", '"': '"', "[": "[", "]": "]", "^": "^", "-": "-",
}
_MODIFIERS = (Modifier.SILENT, Modifier.ATOMIC)
_ITEM_START = "&!(.'\"["


def _name_start(ch) -> bool:
    return ch is not None and (ch.isalpha() or ch == "_")


def _name_char(ch) -> bool:
    return ch is not None and (ch.isalnum() or ch == "_")


class GrammarReader:
    """One pass over grammar text. Positions come from the shared `Cursor`,
    so every `GrammarError` names the line and column it was raised at."""

    def __init__(self, src: str):
        self.cur = Cursor(src)

    def error(self, msg: str) -> GrammarError:
        return GrammarError(
            f"PEG grammar error at {self.cur.line}:{self.cur.column}: {msg}")

    # ---- layout and small tokens ----

    def layout(self) -> None:
        cur = self.cur
        while not cur.at_end():
            ch = cur.peek()
            if ch in " \t\r\n":
                cur.advance()
            elif ch == "#" or cur.startswith("//"):
                eol = cur.text.find("\n", cur.offset)
                cur.advance((len(cur.text) if eol < 0 else eol) - cur.offset)
            else:
                return

    def expect(self, token: str) -> None:
        self.layout()
        if not self.cur.startswith(token):
            raise self.error(f"expected {token!r}")
        self.cur.advance(len(token))

    def name(self) -> str:
        self.layout()
        cur = self.cur
        if not _name_start(cur.peek()):
            raise self.error("expected a rule name")
        n = 1
        while _name_char(cur.peek(n)):
            n += 1
        start = cur.offset
        cur.advance(n)
        return cur.text[start:cur.offset]

    def at_rule_head(self) -> bool:
        """`NAME <-` starts here; the cursor does not move."""
        cur = self.cur
        snap = cur.mark()
        try:
            self.name()
            self.layout()
            return cur.startswith("<-")
        finally:
            cur.restore(snap)

    # ---- rules ----

    def grammar(self) -> PegGrammar:
        rules: Dict[str, RuleDef] = {}
        self.layout()
        while not self.cur.at_end():
            rule = self.rule(rules)
            rules[rule.name] = rule
            self.layout()
        if not rules:
            raise self.error("empty PEG grammar")
        order = tuple(rules)
        return PegGrammar(rules=rules, start=order[0], order=order)

    def rule(self, seen: Container[str]) -> RuleDef:
        modifier = Modifier.NONE
        if self.cur.peek() == "%":
            self.cur.advance()
            modifier = self.name()
            if modifier not in _MODIFIERS:
                raise self.error(f"unknown rule modifier '%{modifier}'")
        name = self.name()
        if name in seen:
            raise self.error(f"duplicate rule '{name}'")
        self.expect("<-")
        return RuleDef(name, self.choice(), modifier)

    # ---- expressions ----

    def choice(self) -> Node:
        alts = [self.sequence()]
        while True:
            self.layout()
            if self.cur.peek() != "/":
                break
            self.cur.advance()
            alts.append(self.sequence())
        return alts[0] if len(alts) == 1 else Choice(tuple(alts))

    def sequence(self) -> Node:
        items: List[Node] = []
        while True:
            self.layout()
            ch = self.cur.peek()
            if _name_start(ch):
                if self.at_rule_head():
                    break
            elif ch is None or ch not in _ITEM_START:
                break
            items.append(self.prefixed())
        if not items:
            raise self.error("empty sequence")
        return items[0] if len(items) == 1 else Seq(tuple(items))

    def prefixed(self) -> Node:
        ch = self.cur.peek()
        if ch == "&":
            self.cur.advance()
            return And(self.suffixed())
        if ch == "!":
            self.cur.advance()
            return Not(self.suffixed())
        return self.suffixed()

    def suffixed(self) -> Node:
        node = self.primary()
        ch = self.cur.peek()
        if ch is not None and ch in "?*+":
            self.cur.advance()
            return Repeat(node, ch)
        return node

    def primary(self) -> Node:
        self.layout()
        cur = self.cur
        ch = cur.peek()
        if ch == "(":
            cur.advance()
            node = self.choice()
            self.expect(")")
            return node
        if ch == ".":
            cur.advance()
            return Any()
        if ch == "'" or ch == '"':
            return self.literal()
        if ch == "[":
            return self.char_class()
        return Ref(self.name())

    # ---- terminals ----

    def escape(self) -> str:
        ch = self.cur.peek()
        if ch is None:
            raise self.error("unterminated escape")
        if ch not in _ESCAPES:
            raise self.error(f"unknown escape '\\{ch}'")
        self.cur.advance()
        return _ESCAPES[ch]

    def literal(self) -> Literal:
        cur = self.cur
        quote = cur.peek()
        cur.advance()
        chars: List[str] = []
        while True:
            ch = cur.peek()
            if ch is None or ch == "\n":
                raise self.error("unterminated string")
            cur.advance()
            if ch == quote:
                break
            chars.append(self.escape() if ch == "\\" else ch)
        if not chars:
            raise self.error("empty literal")
        return Literal("".join(chars))

    def class_char(self) -> str:
        ch = self.cur.peek()
        if ch is None:
            raise self.error("unterminated char class")
        self.cur.advance()
        return self.escape() if ch == "\\" else ch

    def char_class(self) -> CharClass:
        cur = self.cur
        cur.advance()  # [
        negated = cur.peek() == "^"
        if negated:
            cur.advance()
        ranges: List[Tuple[int, int]] = []
        singles: List[str] = []
        while True:
            ch = cur.peek()
            if ch is None:
                raise self.error("unterminated char class")
            if ch == "]":
                cur.advance()
                break
            lo = self.class_char()
            # "-" right before "]" is a member, not a range
            if cur.peek() == "-" and cur.peek(1) not in ("]", None):
                cur.advance()
                hi = self.class_char()
                if lo > hi:
                    raise self.error(f"reversed range {lo!r}-{hi!r}")
                ranges.append((ord(lo), ord(hi)))
            else:
                singles.append(lo)
        if not ranges and not singles:
            raise self.error("empty char class")
        return CharClass(negated=negated, ranges=tuple(ranges), singles=tuple(singles))


def parse_peg_grammar(src: str) -> PegGrammar:
    """Read PEG notation into a `PegGrammar` (the rule table)."""
    return GrammarReader(src).grammar()
