"""Haumea tokenizer — lexes source into a lazy token stream."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

from .errors import LexError

# Token type constants
TK_INT = "INT"
TK_FLOAT = "FLOAT"
TK_IDENT = "IDENT"
TK_KEYWORD = "KEYWORD"
TK_OP = "OP"
TK_EOF = "EOF"

KEYWORDS: set[str] = {
    "and",
    "by",
    "change",
    "do",
    "else",
    "end",
    "if",
    "not",
    "or",
    "return",
    "set",
    "then",
    "to",
    "with",
}

OPS: set[str] = {"+", "-", "*", "/", "(", ")", ","}


@dataclass(frozen=True)
class Token:
    """A token with type, value, and position."""

    type: str
    value: str
    line: int
    col: int

    def describe(self) -> str:
        """Human-readable form used in parse errors."""
        if self.type == TK_EOF:
            return "end of input"
        return "'" + self.value + "'"


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_alpha(c: str) -> bool:
    return (c >= "a" and c <= "z") or (c >= "A" and c <= "Z") or c == "_"


def _is_alnum(c: str) -> bool:
    return _is_alpha(c) or _is_digit(c)


def tokenize(source: str) -> Iterator[Token]:
    """Tokenize Haumea source lazily; the last token is always TK_EOF.

    Each call starts over from the beginning of ``source``.
    """
    pos = 0
    line = 1
    col = 1
    length = len(source)

    while pos < length:
        c = source[pos]

        # Newlines
        if c == "\n":
            pos += 1
            line += 1
            col = 1
            continue

        # Whitespace
        if c == " " or c == "\t" or c == "\r":
            pos += 1
            col += 1
            continue

        start_pos = pos
        start_col = col

        # Number: int or float
        if _is_digit(c):
            while pos < length and _is_digit(source[pos]):
                pos += 1
                col += 1
            is_float = False
            if (
                pos + 1 < length
                and source[pos] == "."
                and _is_digit(source[pos + 1])
            ):
                is_float = True
                pos += 1
                col += 1
                while pos < length and _is_digit(source[pos]):
                    pos += 1
                    col += 1
            raw = source[start_pos:pos]
            if is_float:
                if math.isinf(float(raw)):
                    raise LexError("float literal out of range", raw, line, start_col)
                yield Token(TK_FLOAT, raw, line, start_col)
            else:
                yield Token(TK_INT, raw, line, start_col)
            continue

        # Identifier or keyword
        if _is_alpha(c):
            while pos < length and _is_alnum(source[pos]):
                pos += 1
                col += 1
            word = source[start_pos:pos]
            if word in KEYWORDS:
                yield Token(TK_KEYWORD, word, line, start_col)
            else:
                yield Token(TK_IDENT, word, line, start_col)
            continue

        if c in OPS:
            yield Token(TK_OP, c, line, col)
            pos += 1
            col += 1
            continue

        raise LexError("unexpected character: " + repr(c), c, line, col)

    yield Token(TK_EOF, "", line, col)
