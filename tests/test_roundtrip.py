"""Mapped programs written back as source parse to the same syntax tree."""

import string

from hypothesis import given, settings, strategies as st

from midval import parse_program
from midval.ast import (
    Program, MainBlock, FunctionDecl, Conditional, CountedLoop, ConditionalLoop,
    Return, VarDecl, Assignment, CallStatement, Output,
    Binary, Unary, Call, StringLiteral, FloatLiteral, IntLiteral, BoolLiteral,
    CharLiteral, InputRequest, Identifier,
    DataType, BinaryOperator, UnaryOperator,
)

# ---- source writer ----

def write_expr(e) -> str:
    if isinstance(e, Binary):
        return f"{write_operand(e.left, left=True)} {e.op.value} {write_operand(e.right)}"
    if isinstance(e, Unary):
        return e.op.value + write_operand(e.operand)
    if isinstance(e, Call):
        if not e.args:
            return f"{e.name} beckons"
        return f"{e.name} beckons " + ", ".join(write_operand(a, left=True) for a in e.args)
    if isinstance(e, StringLiteral):
        return '"' + e.value.replace('"', '\\"').replace("\n", "\\n") + '"'
    if isinstance(e, FloatLiteral):
        return f"{e.value:.6f}"
    if isinstance(e, IntLiteral):
        return str(e.value)
    if isinstance(e, BoolLiteral):
        return "aye" if e.value else "nay"
    if isinstance(e, CharLiteral):
        return f"'{e.value}'"
    if isinstance(e, InputRequest):
        return f"raven asks for {e.name}"
    if isinstance(e, Identifier):
        return e.name
    raise TypeError(e)


def write_operand(e, left=False) -> str:
    # calls take every comma and operator to their right, so they are wrapped
    if isinstance(e, Call) or (isinstance(e, Binary) and not left):
        return f"({write_expr(e)})"
    return write_expr(e)


def write_block(stmts, depth) -> str:
    return "".join(write_stmt(s, depth) for s in stmts)


def write_stmt(s, depth=0) -> str:
    pad = "  " * depth
    if isinstance(s, MainBlock):
        return f"{pad}valar morghulis:\n" + write_block(s.body, depth + 1)
    if isinstance(s, FunctionDecl):
        return (f"{pad}we declare {s.name} with {', '.join(s.params)} ->\n"
                f"{pad}council says:\n" + write_block(s.body, depth + 1))
    if isinstance(s, Conditional):
        out = f"{pad}should {write_expr(s.cond)}:\n" + write_block(s.then_block, depth + 1)
        if s.else_block is not None:
            out += f"{pad}else:\n" + write_block(s.else_block, depth + 1)
        return out
    if isinstance(s, CountedLoop):
        return f"{pad}the realm marches {s.count} times:\n" + write_block(s.body, depth + 1)
    if isinstance(s, ConditionalLoop):
        return f"{pad}while {write_expr(s.cond)}:\n" + write_block(s.body, depth + 1)
    if isinstance(s, Return):
        tail = "" if s.expr is None else " " + write_expr(s.expr)
        return f"{pad}a lannister pays{tail}\n"
    if isinstance(s, VarDecl):
        return f"{pad}{s.name} is sworn as {s.type_name.value} with {write_expr(s.init)}\n"
    if isinstance(s, Assignment):
        return f"{pad}{s.name} becomes {write_expr(s.expr)}\n"
    if isinstance(s, CallStatement):
        return f"{pad}{write_expr(s.call)}\n"
    if isinstance(s, Output):
        return f"{pad}speak {write_expr(s.expr)}\n"
    raise TypeError(s)


# ---- strategies ----

# the "_" keeps generated names clear of every keyword
names = st.from_regex(r"[a-z]{1,4}_[a-z0-9]{0,3}", fullmatch=True)

TEXT = string.ascii_letters + string.digits + " .,:;!?'\"/-+*\n"
CHARS = string.ascii_letters + string.digits + " .,:;!?\"/-+*"

literals = st.one_of(
    st.integers(min_value=0, max_value=10**9).map(IntLiteral),
    st.builds(lambda a, b: FloatLiteral(float(f"{a}.{b:06d}")),
              st.integers(0, 10**6), st.integers(0, 999_999)),
    st.booleans().map(BoolLiteral),
    st.sampled_from(CHARS).map(CharLiteral),
    st.text(TEXT, max_size=8).map(StringLiteral),
    names.map(Identifier),
    names.map(InputRequest),
    names.map(Call),
)

expressions = st.recursive(
    literals,
    lambda inner: st.one_of(
        st.builds(Binary, st.sampled_from(list(BinaryOperator)), inner, inner),
        st.builds(Unary, st.sampled_from(list(UnaryOperator)), inner),
        st.builds(Call, names, st.lists(inner, min_size=1, max_size=3).map(tuple)),
    ),
    max_leaves=8,
)

simple_statements = st.one_of(
    st.builds(Return, st.none() | expressions),
    st.builds(VarDecl, names, st.sampled_from(list(DataType)), expressions),
    st.builds(Assignment, names, expressions),
    st.builds(lambda n, a: CallStatement(Call(n, tuple(a))), names,
              st.lists(expressions, max_size=3)),
    st.builds(Output, expressions),
)


def compound(block):
    """A block has no closing token, so a compound statement only ever
    comes last in the block that holds it."""
    simple_body = st.lists(simple_statements, min_size=1, max_size=3).map(tuple)
    return st.one_of(
        st.builds(MainBlock, block),
        st.builds(FunctionDecl, names, st.lists(names, max_size=3).map(tuple), block),
        st.builds(Conditional, expressions, block, st.none()),
        st.builds(Conditional, expressions, simple_body, block),
        st.builds(CountedLoop, st.integers(0, 1000), block),
        st.builds(ConditionalLoop, expressions, block),
    )


def blocks(depth):
    simple = st.lists(simple_statements, min_size=1, max_size=3)
    if depth == 0:
        return simple.map(tuple)
    nested = st.tuples(
        st.lists(simple_statements, max_size=2), compound(blocks(depth - 1)),
    ).map(lambda p: tuple(p[0]) + (p[1],))
    return st.one_of(simple.map(tuple), nested)


programs = st.one_of(st.just(()), blocks(2)).map(Program)


@settings(max_examples=200, deadline=None)
@given(programs)
def test_written_program_parses_back_to_itself(program):
    source = "".join(write_stmt(s) for s in program.statements)
    assert parse_program(source) == program


@settings(max_examples=200, deadline=None)
@given(expressions)
def test_expression_round_trip(expr):
    source = f"speak {write_expr(expr)}"
    assert parse_program(source).statements == (Output(expr),)
