"""Tests for the pretty-printer and the parse/print round trip."""

import random

import pytest

from haumea import emit, parse
from haumea.ast import BinaryOp, IntLit, Pos, UnaryOp, Var
from haumea.emit import expr_to_source

P = Pos(0, 0)

PROGRAMS = [
    "",
    "to main return 1",
    "to f with () return 0",
    "to add with (a, b) do return a + b end",
    "to f do end",
    "to f if x then return 1 else return 2",
    "to f if a then if b then return 1 else return 2",
    "to f if a then do if b then return 1 end else return 2",
    "to f if a then return 1 else if b then return 2 else return 3",
    "to f do set x to 5 change x by -1 g(x, 2.50, (x)) g() return x end",
    "to f return a - (b - c)",
    "to f return (a - b) - c",
    "to f return a / (b * c) / d",
    "to f return -(a + b) * not (c or d)",
    "to f return not not - -x",
    "to f return - (-1)",
    "to f return a or b and c",
    "to f return (a or b) and c",
    """
    to fact with (n) do
        set acc to 1
        do
            if n then do
                change acc by 0
                fact(n - 1)
            end
        end
        return acc
    end

    to main do
        fact(5)
        return 0
    end
    """,
]


@pytest.mark.parametrize("source", PROGRAMS)
def test_round_trip(source: str):
    program = parse(source)
    printed = emit(program)
    assert parse(printed) == program
    # Printing is stable once normalized
    assert emit(parse(printed)) == printed


def test_layout():
    source = "to f with (a, b) do if a then set x to 1 else do change x by b end return x end"
    assert emit(parse(source)) == (
        "to f with (a, b) do\n"
        "    if a then\n"
        "        set x to 1\n"
        "    else\n"
        "        do\n"
        "            change x by b\n"
        "        end\n"
        "    return x\n"
        "end\n"
    )


def test_functions_are_separated_by_blank_lines():
    assert emit(parse("to a return 1 to b return 2")) == (
        "to a\n    return 1\n\nto b\n    return 2\n"
    )


def test_else_if_chain_is_flat():
    text = emit(parse("to f if a then return 1 else if b then return 2"))
    assert "else if b then" in text


def test_minimal_parentheses():
    a, b, c = Var(P, "a"), Var(P, "b"), Var(P, "c")
    assert expr_to_source(BinaryOp(P, "-", BinaryOp(P, "-", a, b), c)) == "a - b - c"
    assert expr_to_source(BinaryOp(P, "-", a, BinaryOp(P, "-", b, c))) == "a - (b - c)"
    assert expr_to_source(BinaryOp(P, "+", a, BinaryOp(P, "*", b, c))) == "a + b * c"
    assert expr_to_source(BinaryOp(P, "*", BinaryOp(P, "+", a, b), c)) == "(a + b) * c"
    assert expr_to_source(UnaryOp(P, "-", IntLit(P, 1, "1"))) == "-1"
    assert expr_to_source(UnaryOp(P, "-", UnaryOp(P, "-", a))) == "- -a"
    assert expr_to_source(UnaryOp(P, "not", BinaryOp(P, "and", a, b))) == "not (a and b)"


def _random_expr(rng: random.Random, depth: int):
    if depth == 0 or rng.random() < 0.25:
        choice = rng.randrange(3)
        if choice == 0:
            n = rng.randrange(1000)
            return IntLit(P, n, str(n))
        if choice == 1:
            return parse(f"to f return {rng.randrange(100)}.{rng.randrange(100)}").decls[0].body.value
        return Var(P, rng.choice(["a", "b", "c", "x_1"]))
    if rng.random() < 0.2:
        return UnaryOp(P, rng.choice(["-", "not"]), _random_expr(rng, depth - 1))
    op = rng.choice(["+", "-", "or", "*", "/", "and"])
    return BinaryOp(P, op, _random_expr(rng, depth - 1), _random_expr(rng, depth - 1))


def test_random_expressions_round_trip():
    rng = random.Random(2024)
    for _ in range(200):
        expr = _random_expr(rng, 5)
        program = parse("to f return " + expr_to_source(expr))
        assert program.decls[0].body.value == expr
