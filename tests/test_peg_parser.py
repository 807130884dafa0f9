import dataclasses

import pytest

from midval.peg import (
    parse_peg_grammar, PegProgram,
    Literal, CharClass, Any, Ref, Not, And, Repeat, Seq, Choice,
    Modifier, GrammarError,
)


def test_rules_keep_order_and_first_rule_is_start():
    g = parse_peg_grammar(r"""
        # a comment line
        start <- word+
        %atomic word <- [a-z]+
        %silent WHITESPACE <- [ \t]   // trailing comment
    """)
    assert g.start == "start"
    assert g.order == ("start", "word", "WHITESPACE")
    assert g.rules["word"].modifier == Modifier.ATOMIC
    assert g.rules["word"].atomic and not g.rules["word"].silent
    assert g.rules["WHITESPACE"].silent
    assert g.rules["start"].modifier == Modifier.NONE


def test_sequence_choice_and_prefixes():
    g = parse_peg_grammar('a <- "x" b / !c .')
    assert g.rules["a"].expr == Choice((
        Seq((Literal("x"), Ref("b"))),
        Seq((Not(Ref("c")), Any())),
    ))


def test_suffixes_and_grouping():
    g = parse_peg_grammar('a <- "x"* "y"? &(z "w")+')
    assert g.rules["a"].expr == Seq((
        Repeat(Literal("x"), "*"),
        Repeat(Literal("y"), "?"),
        And(Repeat(Seq((Ref("z"), Literal("w"))), "+")),
    ))


def test_rule_body_may_span_lines():
    g = parse_peg_grammar("""
        a <- "x"
             / "y"
        b <- a
    """)
    assert g.rules["a"].expr == Choice((Literal("x"), Literal("y")))
    assert g.rules["b"].expr == Ref("a")


def test_char_classes():
    g = parse_peg_grammar(r"""
        ws    <- [ \t]
        sign  <- [+-]
        lower <- [a-z_]
        body  <- [^"\\]
    """)
    assert g.rules["ws"].expr == CharClass(False, (), (" ", "\t"))
    assert g.rules["sign"].expr == CharClass(False, (), ("+", "-"))
    assert g.rules["lower"].expr == CharClass(False, ((ord("a"), ord("z")),), ("_",))
    body = g.rules["body"].expr
    assert body.negated
    assert not body.matches('"') and not body.matches("\\")
    assert body.matches("a")


def test_literal_escapes():
    g = parse_peg_grammar(r"""a <- "A\tB\n" b <- '\'' """)
    assert g.rules["a"].expr == Literal("A\tB\n")
    assert g.rules["b"].expr == Literal("'")


@pytest.mark.parametrize("src, message", [
    ("", "empty PEG grammar"),
    ('a <- "x"\na <- "y"', "duplicate rule 'a'"),
    ('%loud a <- "x"', "unknown rule modifier"),
    ('a <- "x', "unterminated string"),
    ('a <- ""', "empty literal"),
    ("a <- []", "empty char class"),
    ("a <- [ab", "unterminated char class"),
    (r'a <- "\q"', "unknown escape"),
    ("a <- ", "empty sequence"),
    ('a "x"', "expected '<-'"),
    (r'a <- "\x41"', "unknown escape"),
    ("a <- [z-a]", "reversed range"),
    ('a <- "x\ny"', "unterminated string"),
    ("a <- b <- c", "empty sequence"),
])
def test_malformed_grammar_text(src, message):
    with pytest.raises(GrammarError, match=message):
        parse_peg_grammar(src)


def test_errors_carry_line_and_column():
    with pytest.raises(GrammarError, match=r"at 2:8"):
        parse_peg_grammar('a <- "x"\n' r'b <- "\q"')


def test_dangling_reference_rejected_at_compile_time():
    with pytest.raises(GrammarError, match="undefined rule 'missing'"):
        PegProgram.from_source('a <- "x" missing')


def test_grammar_error_is_not_a_syntax_error():
    assert not issubclass(GrammarError, SyntaxError)


def test_duplicate_rule_reports_its_line():
    with pytest.raises(GrammarError, match=r"at 3:3: duplicate rule 'a'"):
        parse_peg_grammar('a <- "x"\nb <- a\n a <- "y"')


def test_rule_table_is_immutable():
    g = PegProgram.from_source('a <- "x" b\nb <- "y"').grammar
    with pytest.raises(dataclasses.FrozenInstanceError):
        g.start = "b"
    with pytest.raises(TypeError):
        g.rules["c"] = g.rules["a"]
    assert g.order == ("a", "b")
