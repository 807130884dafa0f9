# midval/ast.py
"""Mid Valyrian syntax tree.

A plain ownership tree of frozen dataclasses, produced by `midval.mapper`
and consumed by whatever evaluates the program.

- Statement : MainBlock, FunctionDecl, Conditional, CountedLoop,
              ConditionalLoop, Return, VarDecl, Assignment, CallStatement, Output
- Expression: Binary, Unary, Call, StringLiteral, FloatLiteral, IntLiteral,
              BoolLiteral, CharLiteral, InputRequest, Identifier
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class DataType(str, Enum):
    SCROLL = "scroll"   # string
    BLADE  = "blade"    # integer
    WINE   = "wine"     # float
    VOW    = "vow"      # boolean
    SIGIL  = "sigil"    # char
    VOID   = "void"     # no value

    @classmethod
    def from_str(cls, s: str) -> Optional["DataType"]:
        try:
            return cls(s)
        except ValueError:
            return None


class BinaryOperator(str, Enum):
    ADD       = "+"
    SUBTRACT  = "-"
    MULTIPLY  = "*"
    DIVIDE    = "/"
    GREATER   = ">"
    LESS      = "<"
    EQUAL     = "=="
    NOT_EQUAL = "!="

    @classmethod
    def from_str(cls, s: str) -> Optional["BinaryOperator"]:
        try:
            return cls(s)
        except ValueError:
            return None


class UnaryOperator(str, Enum):
    MINUS = "-"
    NOT   = "!"

    @classmethod
    def from_str(cls, s: str) -> Optional["UnaryOperator"]:
        try:
            return cls(s)
        except ValueError:
            return None


# ---- expressions ----

@dataclass(frozen=True)
class Binary:
    op: BinaryOperator
    left: "Expression"
    right: "Expression"

@dataclass(frozen=True)
class Unary:
    op: UnaryOperator
    operand: "Expression"

@dataclass(frozen=True)
class Call:
    name: str
    args: Tuple["Expression", ...] = ()

@dataclass(frozen=True)
class StringLiteral:
    value: str  # decoded: escapes already resolved

@dataclass(frozen=True)
class FloatLiteral:
    value: float

@dataclass(frozen=True)
class IntLiteral:
    value: int

@dataclass(frozen=True)
class BoolLiteral:
    value: bool

@dataclass(frozen=True)
class CharLiteral:
    value: str

@dataclass(frozen=True)
class InputRequest:
    name: str

@dataclass(frozen=True)
class Identifier:
    name: str

Expression = Union[Binary, Unary, Call, StringLiteral, FloatLiteral, IntLiteral,
                   BoolLiteral, CharLiteral, InputRequest, Identifier]


# ---- statements ----

Block = Tuple["Statement", ...]

@dataclass(frozen=True)
class MainBlock:
    body: Block

@dataclass(frozen=True)
class FunctionDecl:
    name: str
    params: Tuple[str, ...]
    body: Block

@dataclass(frozen=True)
class Conditional:
    cond: Expression
    then_block: Block
    else_block: Optional[Block] = None

@dataclass(frozen=True)
class CountedLoop:
    count: int
    body: Block

@dataclass(frozen=True)
class ConditionalLoop:
    cond: Expression
    body: Block

@dataclass(frozen=True)
class Return:
    expr: Optional[Expression] = None

@dataclass(frozen=True)
class VarDecl:
    name: str
    type_name: DataType
    init: Expression

@dataclass(frozen=True)
class Assignment:
    name: str
    expr: Expression

@dataclass(frozen=True)
class CallStatement:
    call: Call

@dataclass(frozen=True)
class Output:
    expr: Expression

Statement = Union[MainBlock, FunctionDecl, Conditional, CountedLoop, ConditionalLoop,
                  Return, VarDecl, Assignment, CallStatement, Output]


@dataclass(frozen=True)
class Program:
    statements: Tuple[Statement, ...] = ()
