# midval/peg/runtime.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Tuple

from ..config import ParserConfig, DEFAULT_CONFIG
from .ast import PegGrammar
from .parser import parse_peg_grammar
from .engine import Packrat, MatchResult, Success
from .errors import ParseError
from .tree import ParseNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PegProgram:
    """Compiled PEG program. Immutable; safe to share between parses."""
    grammar: PegGrammar

    @classmethod
    def from_source(cls, src: str) -> "PegProgram":
        g = parse_peg_grammar(src)
        g.validate()
        logger.debug("compiled PEG grammar: %d rules, start=%s", len(g.rules), g.start)
        return cls(g)


class PegRunner:
    """Execute a PEG program on input text.

    Every call builds its own `Packrat` (cursor, memo, error collector), so a
    runner can be used for any number of inputs, from any number of threads.
    """
    def __init__(self, program: PegProgram, config: ParserConfig = DEFAULT_CONFIG):
        self.program = program
        self.config = config

    def run(self, rule_name: str, text: str, pos: int = 0) -> Tuple[bool, int]:
        engine = Packrat(self.program.grammar, self.config)
        return engine.parse(rule_name, text, pos)

    def match(self, rule_name: str, text: str, pos: int = 0) -> MatchResult:
        engine = Packrat(self.program.grammar, self.config)
        return engine.match(rule_name, text, pos)

    def parse(self, text: str, rule_name: str = "") -> ParseNode:
        """Match `rule_name` (default: grammar start) at the start of `text`.
        Whether the whole input must be consumed is up to the grammar (`EOI`).

        Raises `ParseError` carrying the furthest-failure diagnostic."""
        rule_name = rule_name or self.program.grammar.start
        engine = Packrat(self.program.grammar, self.config)
        res = engine.match(rule_name, text)
        if isinstance(res, Success):
            return res.node
        raise ParseError(engine.diagnostic(rule_name), text, self.config.filename)
