# midval/grammar.py
"""Mid Valyrian grammar, in the PEG notation read by `midval.peg.parser`.

Conventions
-----------
- `%silent`  : control rules (WHITESPACE, line_end, COMMENT); no node and
               never named in diagnostics. WHITESPACE and COMMENT are
               matched atomically because they are the skipped rules
- `%atomic`  : token rules; no implicit skipping inside, one leaf node
- WHITESPACE and COMMENT are skipped implicitly between the items of every
  other rule. Newlines are *not* whitespace; only line_end consumes them.
- Expressions are deliberately flat: `binary_expr` is a plain chain of
  operands and operators, folded left to right by the mapper.
- A block has no closing token. It ends at the first line that is not a
  statement, comment or blank line.
"""

from __future__ import annotations
from functools import lru_cache

from .peg import PegProgram

MID_VALYRIAN_GRAMMAR = r"""
program              <- (line_end / COMMENT)* statement* (line_end / COMMENT)* EOI

statement            <- main_block
                      / function_declaration
                      / conditional
                      / counted_loop
                      / conditional_loop
                      / return_statement
                      / variable_declaration
                      / assignment
                      / call_statement
                      / output_statement

block                <- (statement / COMMENT / line_end)+

main_block           <- "valar" "morghulis" ":" block
function_declaration <- "we" "declare" identifier "with" parameter_list "->" line_end*
                        "council" "says" ":" block
parameter_list       <- (identifier ("," identifier)*)?
conditional          <- "should" expression ":" block (ELSE ":" block)?
counted_loop         <- "the" "realm" "marches" loop_count "times" ":" block
conditional_loop     <- "while" expression ":" block

# simple statements own the rest of their line and any blank/comment lines after it
return_statement     <- "a" "lannister" "pays" expression? (line_end / COMMENT)*
variable_declaration <- identifier "is" "sworn" "as" type_name "with" expression (line_end / COMMENT)*
assignment           <- identifier "becomes" expression (line_end / COMMENT)*
call_statement       <- function_call (line_end / COMMENT)*
output_statement     <- "speak" expression (line_end / COMMENT)*

function_call        <- identifier "beckons" arguments
arguments            <- (expression ("," expression)*)?
type_name            <- "scroll" / "blade" / "wine" / "vow" / "sigil" / "void"

expression           <- binary_expr
binary_expr          <- unary_expr (binary_op unary_expr)*
binary_op            <- "==" / "!=" / "+" / "-" / "*" / "/" / ">" / "<"
unary_expr           <- unary_op* primary
unary_op             <- "-" / "!"

# order matters: float before integer, identifier last
primary              <- "(" expression ")"
                      / function_call
                      / string_literal
                      / float_literal
                      / integer_literal
                      / boolean_literal
                      / char_literal
                      / input_request
                      / identifier

input_request        <- "raven" "asks" "for" identifier

%atomic loop_count      <- "+"? [0-9]+
%atomic integer_literal <- [+-]? [0-9]+
%atomic float_literal   <- [+-]? [0-9]+ "." [0-9]+
%atomic boolean_literal <- ("aye" / "nay") ![A-Za-z0-9_]
%atomic string_literal  <- '"' ('\\"' / '\\n' / [^"\\])* '"'
%atomic char_literal    <- "'" . "'"
%atomic identifier      <- [A-Za-z] [A-Za-z0-9_]*

%silent WHITESPACE   <- [ \t\r]
%silent line_end     <- "\n" WHITESPACE*
%silent COMMENT      <- "//" [^\n]* line_end?

# reserved; only `conditional` refers to it
ELSE                 <- "else"
EOI                  <- !.
"""


@lru_cache(maxsize=None)
def mid_valyrian_program() -> PegProgram:
    """The compiled grammar. Built once per process, then shared."""
    return PegProgram.from_source(MID_VALYRIAN_GRAMMAR)
