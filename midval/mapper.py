# midval/mapper.py
"""Parse tree -> syntax tree.

Runs only on a successful parse, so the tree shape is guaranteed by the
grammar; a shape the mapper does not know is a bug and raises `MappingError`.
"""

from __future__ import annotations
from typing import Callable, Dict, List, Optional

from .ast import (
    Program, Statement, Expression, Block,
    MainBlock, FunctionDecl, Conditional, CountedLoop, ConditionalLoop,
    Return, VarDecl, Assignment, CallStatement, Output,
    Binary, Unary, Call, StringLiteral, FloatLiteral, IntLiteral,
    BoolLiteral, CharLiteral, InputRequest, Identifier,
    DataType, BinaryOperator, UnaryOperator,
)
from .peg.errors import InternalEngineError
from .peg.tree import ParseNode


class MappingError(InternalEngineError):
    """Parse tree shape unknown to the mapper."""


def _fail(node: ParseNode, what: str) -> MappingError:
    return MappingError(f"cannot map {what}: rule '{node.rule}' at {node.start}..{node.end}")


def _expect(node: ParseNode, rule: str) -> ParseNode:
    c = node.child(rule)
    if c is None:
        raise _fail(node, f"missing '{rule}'")
    return c


def decode_string(raw: str) -> str:
    """Decode a string literal's span text: strip the quotes, resolve \\" and \\n."""
    body = raw[1:-1]
    out: List[str] = []
    i = 0
    while i < len(body):
        c = body[i]
        if c == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            out.append("\n" if nxt == "n" else nxt)
            i += 2
            continue
        out.append(c)
        i += 1
    return "".join(out)


# ---- statements ----

def map_program(tree: ParseNode) -> Program:
    if tree.rule != "program":
        raise _fail(tree, "program")
    return Program(statements=tuple(map_statement(s) for s in tree.children_of("statement")))


def map_block(node: ParseNode) -> Block:
    return tuple(map_statement(s) for s in node.children_of("statement"))


def map_statement(node: ParseNode) -> Statement:
    if node.rule == "statement":
        if len(node.children) != 1:
            raise _fail(node, "statement")
        node = node.children[0]
    fn = _STATEMENTS.get(node.rule)
    if fn is None:
        raise _fail(node, "statement")
    return fn(node)


def _main_block(node: ParseNode) -> Statement:
    return MainBlock(body=map_block(_expect(node, "block")))


def _function_declaration(node: ParseNode) -> Statement:
    name = _expect(node, "identifier").text
    params = tuple(p.text for p in _expect(node, "parameter_list").children_of("identifier"))
    return FunctionDecl(name=name, params=params, body=map_block(_expect(node, "block")))


def _conditional(node: ParseNode) -> Statement:
    blocks = node.children_of("block")
    else_block: Optional[Block] = None
    if node.child("ELSE") is not None:
        if len(blocks) != 2:
            raise _fail(node, "else branch")
        else_block = map_block(blocks[1])
    return Conditional(
        cond=map_expression(_expect(node, "expression")),
        then_block=map_block(blocks[0]),
        else_block=else_block,
    )


def _counted_loop(node: ParseNode) -> Statement:
    count = int(_expect(node, "loop_count").text)
    return CountedLoop(count=count, body=map_block(_expect(node, "block")))


def _conditional_loop(node: ParseNode) -> Statement:
    return ConditionalLoop(
        cond=map_expression(_expect(node, "expression")),
        body=map_block(_expect(node, "block")),
    )


def _return_statement(node: ParseNode) -> Statement:
    expr = node.child("expression")
    return Return(expr=map_expression(expr) if expr is not None else None)


def _variable_declaration(node: ParseNode) -> Statement:
    type_text = _expect(node, "type_name").text
    data_type = DataType.from_str(type_text)
    if data_type is None:
        raise _fail(node, f"type {type_text!r}")
    return VarDecl(
        name=_expect(node, "identifier").text,
        type_name=data_type,
        init=map_expression(_expect(node, "expression")),
    )


def _assignment(node: ParseNode) -> Statement:
    return Assignment(
        name=_expect(node, "identifier").text,
        expr=map_expression(_expect(node, "expression")),
    )


def _call_statement(node: ParseNode) -> Statement:
    return CallStatement(call=_function_call(_expect(node, "function_call")))


def _output_statement(node: ParseNode) -> Statement:
    return Output(expr=map_expression(_expect(node, "expression")))


_STATEMENTS: Dict[str, Callable[[ParseNode], Statement]] = {
    "main_block": _main_block,
    "function_declaration": _function_declaration,
    "conditional": _conditional,
    "counted_loop": _counted_loop,
    "conditional_loop": _conditional_loop,
    "return_statement": _return_statement,
    "variable_declaration": _variable_declaration,
    "assignment": _assignment,
    "call_statement": _call_statement,
    "output_statement": _output_statement,
}


# ---- expressions ----

def map_expression(node: ParseNode) -> Expression:
    fn = _EXPRESSIONS.get(node.rule)
    if fn is None:
        raise _fail(node, "expression")
    return fn(node)


def _single(node: ParseNode) -> Expression:
    if len(node.children) != 1:
        raise _fail(node, "expression")
    return map_expression(node.children[0])


def _binary_expr(node: ParseNode) -> Expression:
    # unary (op unary)*, folded left to right: no precedence on purpose
    parts = node.children
    if not parts or len(parts) % 2 == 0:
        raise _fail(node, "operator chain")
    left = map_expression(parts[0])
    for i in range(1, len(parts), 2):
        op = BinaryOperator.from_str(parts[i].text.strip())
        if op is None:
            raise _fail(parts[i], "binary operator")
        left = Binary(op=op, left=left, right=map_expression(parts[i + 1]))
    return left


def _unary_expr(node: ParseNode) -> Expression:
    *ops, primary = node.children
    expr = map_expression(primary)
    for op_node in reversed(ops):
        op = UnaryOperator.from_str(op_node.text.strip())
        if op is None:
            raise _fail(op_node, "unary operator")
        expr = Unary(op=op, operand=expr)
    return expr


def _function_call(node: ParseNode) -> Call:
    args = tuple(map_expression(a) for a in _expect(node, "arguments").children_of("expression"))
    return Call(name=_expect(node, "identifier").text, args=args)


def _boolean(node: ParseNode) -> Expression:
    return BoolLiteral(node.text == "aye")


_EXPRESSIONS: Dict[str, Callable[[ParseNode], Expression]] = {
    "expression": _single,
    "primary": _single,
    "binary_expr": _binary_expr,
    "unary_expr": _unary_expr,
    "function_call": _function_call,
    "string_literal": lambda n: StringLiteral(decode_string(n.text)),
    "float_literal": lambda n: FloatLiteral(float(n.text)),
    "integer_literal": lambda n: IntLiteral(int(n.text)),
    "boolean_literal": _boolean,
    "char_literal": lambda n: CharLiteral(n.text[1:-1]),
    "input_request": lambda n: InputRequest(_expect(n, "identifier").text),
    "identifier": lambda n: Identifier(n.text),
}
