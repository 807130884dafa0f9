# midval/api.py
from __future__ import annotations
import logging
from typing import Optional

from .ast import Program
from .config import ParserConfig, DEFAULT_CONFIG
from .grammar import mid_valyrian_program
from .mapper import map_program
from .peg import PegRunner, ParseNode

logger = logging.getLogger(__name__)


def parse_tree(text: str, config: Optional[ParserConfig] = None) -> ParseNode:
    """Parse Mid Valyrian source into its concrete parse tree.

    Raises `ParseError` when the text is not a program; engine faults
    (`GrammarError`, `NestingTooDeepError`) propagate unchanged.
    """
    cfg = config or DEFAULT_CONFIG
    runner = PegRunner(mid_valyrian_program(), cfg)
    return runner.parse(text, cfg.start_rule)


def parse_program(text: str, config: Optional[ParserConfig] = None) -> Program:
    """Parse Mid Valyrian source into a `Program`.

    >>> parse_program('speak "hi"').statements[0]
    Output(expr=StringLiteral(value='hi'))
    """
    tree = parse_tree(text, config)
    program = map_program(tree)
    logger.debug("mapped %d top-level statements", len(program.statements))
    return program
