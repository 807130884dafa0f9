from midval.peg.cursor import Cursor


def test_peek_and_advance_track_line_and_column():
    c = Cursor("ab\ncd")
    assert c.peek() == "a"
    assert c.peek(3) == "c"
    c.advance(2)
    assert (c.offset, c.line, c.column) == (2, 1, 3)
    c.advance(1)
    assert (c.offset, c.line, c.column) == (3, 2, 1)
    c.advance(10)
    assert c.at_end()
    assert c.peek() is None
    assert (c.offset, c.line, c.column) == (5, 2, 3)


def test_startswith_is_anchored_at_offset():
    c = Cursor("valar morghulis")
    assert c.startswith("valar")
    assert not c.startswith("morghulis")
    c.advance(6)
    assert c.startswith("morghulis")


def test_restore_returns_to_snapshot():
    c = Cursor("one\ntwo\nthree")
    c.advance(2)
    snap = c.mark()
    c.advance(7)
    assert c.line == 3
    c.restore(snap)
    assert c.mark() == snap
    assert (c.offset, c.line, c.column) == (2, 1, 3)


def test_line_col_agrees_with_incremental_position():
    text = "a\n\nbc\n d\n"
    for i in range(len(text) + 1):
        c = Cursor(text)
        c.advance(i)
        assert c.line_col(i) == (c.line, c.column), i


def test_advance_across_several_newlines_at_once():
    c = Cursor("a\n\nbc\n")
    c.advance(4)
    assert (c.line, c.column) == (3, 2)
