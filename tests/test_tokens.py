"""Tests for the Haumea tokenizer."""

import pytest

from haumea.errors import LexError
from haumea.tokens import (
    TK_EOF,
    TK_FLOAT,
    TK_IDENT,
    TK_INT,
    TK_KEYWORD,
    TK_OP,
    tokenize,
)


def _kinds(source: str) -> list[tuple[str, str]]:
    return [(t.type, t.value) for t in tokenize(source)]


def test_empty_source_is_just_eof():
    assert _kinds("") == [(TK_EOF, "")]


def test_keywords_identifiers_and_literals():
    assert _kinds("to f with (a_1, b) return 12 + 3.5") == [
        (TK_KEYWORD, "to"),
        (TK_IDENT, "f"),
        (TK_KEYWORD, "with"),
        (TK_OP, "("),
        (TK_IDENT, "a_1"),
        (TK_OP, ","),
        (TK_IDENT, "b"),
        (TK_OP, ")"),
        (TK_KEYWORD, "return"),
        (TK_INT, "12"),
        (TK_OP, "+"),
        (TK_FLOAT, "3.5"),
        (TK_EOF, ""),
    ]


def test_every_keyword_is_recognized():
    words = "to with return if then else do end set by change and or not"
    kinds = _kinds(words)
    assert all(kind == TK_KEYWORD for kind, _ in kinds[:-1])
    assert len(kinds) == 15


def test_keyword_prefix_is_an_identifier():
    assert _kinds("toto ends _do do1") == [
        (TK_IDENT, "toto"),
        (TK_IDENT, "ends"),
        (TK_IDENT, "_do"),
        (TK_IDENT, "do1"),
        (TK_EOF, ""),
    ]


def test_minus_is_never_part_of_a_literal():
    assert _kinds("-1--2") == [
        (TK_OP, "-"),
        (TK_INT, "1"),
        (TK_OP, "-"),
        (TK_OP, "-"),
        (TK_INT, "2"),
        (TK_EOF, ""),
    ]


def test_positions_are_one_indexed():
    toks = list(tokenize("to f\n  return x"))
    assert [(t.value, t.line, t.col) for t in toks] == [
        ("to", 1, 1),
        ("f", 1, 4),
        ("return", 2, 3),
        ("x", 2, 10),
        ("", 2, 11),
    ]


def test_tokenize_is_lazy():
    stream = tokenize("to f return 1 @")
    assert next(stream).value == "to"
    assert next(stream).value == "f"
    # The bad character is only reached when consumed
    with pytest.raises(LexError):
        list(stream)


def test_tokenize_restarts_from_scratch():
    source = "set x to 1"
    assert _kinds(source) == _kinds(source)


def test_unknown_character_reports_char_and_position():
    with pytest.raises(LexError) as exc:
        list(tokenize("to f\n  return 1 # 2"))
    assert exc.value.char == "#"
    assert exc.value.line == 2
    assert exc.value.col == 12
    assert "line 2 col 12" in str(exc.value)


def test_trailing_dot_is_not_a_float():
    with pytest.raises(LexError) as exc:
        list(tokenize("1."))
    assert exc.value.char == "."


def test_float_literal_out_of_range():
    with pytest.raises(LexError, match="out of range"):
        list(tokenize("9" * 400 + ".0"))
