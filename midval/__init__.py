# midval/__init__.py
"""midval – Mid Valyrian front end.

Source text -> packrat PEG engine (`midval.peg`) -> parse tree ->
typed syntax tree (`midval.ast`). Evaluation is left to the caller.
"""

import logging

from .api import parse_program, parse_tree
from .config import ParserConfig
from .mapper import MappingError, map_program
from .peg import (
    Diagnostic, ParseError, ParseNode,
    InternalEngineError, GrammarError, NestingTooDeepError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "parse_program",
    "parse_tree",
    "map_program",
    "ParserConfig",
    "Diagnostic",
    "ParseNode",
    "ParseError",
    "InternalEngineError",
    "GrammarError",
    "NestingTooDeepError",
    "MappingError",
]
