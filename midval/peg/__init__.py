# midval/peg/__init__.py
"""PEG engine used by midval.

This package provides:
- rule table nodes for a small PEG subset, with silent/atomic rule modifiers
- a PEG grammar-notation reader (text -> rule table)
- a Packrat (memoizing) engine with implicit whitespace/comment skipping,
  parse tree building and furthest-failure diagnostics
- a compiled-program / runner facade

Nothing in here knows about the Mid Valyrian language itself.
"""

from .ast import (
    Literal, CharClass, Any, Seq, Choice, Repeat, And, Not, Ref,
    Modifier, RuleDef, PegGrammar,
)
from .cursor import Cursor, Snapshot
from .engine import Packrat, Success, Failure, MatchResult
from .errors import (
    Diagnostic, ErrorCollector, ParseError,
    InternalEngineError, GrammarError, NestingTooDeepError,
)
from .parser import parse_peg_grammar
from .runtime import PegProgram, PegRunner
from .tree import ParseNode
