# midval/config.py
"""Parser settings.

Immutable; one instance can be shared by any number of parses.
"""

from __future__ import annotations
import os
from dataclasses import dataclass, replace


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ParserConfig:
    """
    Attributes:
        max_depth: Ceiling on nested rule applications. Exceeding it raises
            `NestingTooDeepError` instead of exhausting the Python stack.
        memoize: Packrat memo on/off. Results are identical either way; off
            is only useful for measuring or debugging the engine.
        whitespace_rule: Rule skipped implicitly between tokens.
        comment_rule: Second rule skipped implicitly between tokens.
        start_rule: Root rule used by `parse_program` / `parse_tree`.
        filename: Name reported in `ParseError`.
    """
    max_depth: int = 200
    memoize: bool = True
    whitespace_rule: str = "WHITESPACE"
    comment_rule: str = "COMMENT"
    start_rule: str = "program"
    filename: str = "<input>"

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")

    @classmethod
    def from_env(cls, **overrides) -> "ParserConfig":
        """Defaults, then MIDVAL_MAX_DEPTH / MIDVAL_MEMOIZE, then `overrides`."""
        cfg = cls()
        if "MIDVAL_MAX_DEPTH" in os.environ:
            cfg = replace(cfg, max_depth=int(os.environ["MIDVAL_MAX_DEPTH"]))
        if "MIDVAL_MEMOIZE" in os.environ:
            cfg = replace(cfg, memoize=_env_bool(os.environ["MIDVAL_MEMOIZE"]))
        return replace(cfg, **overrides) if overrides else cfg


DEFAULT_CONFIG = ParserConfig()
