"""Haumea parser — recursive descent, one method per grammar production."""

from __future__ import annotations

from typing import Iterable, Iterator

from .ast import (
    BinaryOp,
    CallStmt,
    ChangeStmt,
    DoStmt,
    Expr,
    FloatLit,
    FnDecl,
    IfStmt,
    IntLit,
    Pos,
    Program,
    ReturnStmt,
    SetStmt,
    Stmt,
    UnaryOp,
    Var,
)
from .errors import ParseError
from .tokens import (
    TK_EOF,
    TK_FLOAT,
    TK_IDENT,
    TK_INT,
    TK_KEYWORD,
    TK_OP,
    Token,
    tokenize,
)

ADD_OPS: set[str] = {"+", "-", "or"}
MUL_OPS: set[str] = {"*", "/", "and"}
UNARY_OPS: set[str] = {"-", "not"}


class Parser:
    """Recursive descent parser for Haumea.

    Works on any token iterable, including the lazy stream from
    ``tokenize``; only the current token is ever inspected.
    """

    def __init__(self, tokens: Iterable[Token]):
        self._tokens: Iterator[Token] = iter(tokens)
        self._current: Token = self._pull()

    # ── Helpers ──────────────────────────────────────────────

    def _pull(self) -> Token:
        tok = next(self._tokens, None)
        if tok is None:
            raise ParseError("end of input", "end of token stream", 0, 0)
        return tok

    def current(self) -> Token:
        return self._current

    def advance(self) -> Token:
        tok = self._current
        if tok.type != TK_EOF:
            self._current = self._pull()
        return tok

    def at(self, value: str) -> bool:
        tok = self._current
        return tok.value == value and (tok.type == TK_KEYWORD or tok.type == TK_OP)

    def at_type(self, type_: str) -> bool:
        return self._current.type == type_

    def expect(self, value: str) -> Token:
        if not self.at(value):
            raise self.error("'" + value + "'")
        return self.advance()

    def expect_ident(self) -> Token:
        if not self.at_type(TK_IDENT):
            raise self.error("identifier")
        return self.advance()

    def error(self, expected: str) -> ParseError:
        tok = self._current
        return ParseError(expected, tok.describe(), tok.line, tok.col)

    def _pos(self) -> Pos:
        tok = self._current
        return Pos(tok.line, tok.col)

    # ── Top Level ────────────────────────────────────────────

    def parse_program(self) -> Program:
        decls: list[FnDecl] = []
        while not self.at_type(TK_EOF):
            decls.append(self.parse_fn_decl())
        return Program(tuple(decls))

    def parse_fn_decl(self) -> FnDecl:
        """Function = 'to' Ident ( 'with' Signature )? Statement"""
        pos = self._pos()
        if not self.at("to"):
            raise self.error("function declaration ('to')")
        self.advance()
        name_tok = self.expect_ident()
        params: tuple[str, ...] = ()
        if self.at("with"):
            self.advance()
            params = self.parse_signature()
        body = self.parse_stmt()
        return FnDecl(pos, name_tok.value, params, body)

    def parse_signature(self) -> tuple[str, ...]:
        """Signature = '(' ( Ident ( ',' Ident )* )? ')'"""
        self.expect("(")
        params: list[str] = []
        if self.at(")"):
            self.advance()
            return ()
        params.append(self.expect_ident().value)
        while self.at(","):
            self.advance()
            params.append(self.expect_ident().value)
        self.expect(")")
        return tuple(params)

    # ── Statements ───────────────────────────────────────────

    def parse_stmt(self) -> Stmt:
        tok = self.current()
        if tok.type == TK_IDENT:
            return self.parse_call_stmt()
        if tok.type == TK_KEYWORD:
            if tok.value == "return":
                return self.parse_return_stmt()
            if tok.value == "if":
                return self.parse_if_stmt()
            if tok.value == "do":
                return self.parse_do_stmt()
            if tok.value == "set":
                return self.parse_set_stmt()
            if tok.value == "change":
                return self.parse_change_stmt()
        raise self.error("statement")

    def parse_return_stmt(self) -> ReturnStmt:
        pos = self._pos()
        self.expect("return")
        value = self.parse_expr()
        return ReturnStmt(pos, value)

    def parse_if_stmt(self) -> IfStmt:
        pos = self._pos()
        self.expect("if")
        cond = self.parse_expr()
        self.expect("then")
        then_body = self.parse_stmt()
        else_body: Stmt | None = None
        # Greedy: a trailing 'else' belongs to the innermost open 'if'.
        if self.at("else"):
            self.advance()
            else_body = self.parse_stmt()
        return IfStmt(pos, cond, then_body, else_body)

    def parse_do_stmt(self) -> DoStmt:
        pos = self._pos()
        self.expect("do")
        body: list[Stmt] = []
        while not self.at("end"):
            if self.at_type(TK_EOF):
                raise self.error("'end'")
            body.append(self.parse_stmt())
        self.advance()
        return DoStmt(pos, tuple(body))

    def parse_call_stmt(self) -> CallStmt:
        """Call = Ident '(' ( Expr ( ',' Expr )* )? ')'"""
        pos = self._pos()
        name_tok = self.expect_ident()
        if not self.at("("):
            raise self.error("'(' after '" + name_tok.value + "' to form a call")
        self.advance()
        args: list[Expr] = []
        if self.at(")"):
            self.advance()
            return CallStmt(pos, name_tok.value, ())
        args.append(self.parse_expr())
        while self.at(","):
            self.advance()
            args.append(self.parse_expr())
        self.expect(")")
        return CallStmt(pos, name_tok.value, tuple(args))

    def parse_set_stmt(self) -> SetStmt:
        pos = self._pos()
        self.expect("set")
        name_tok = self.expect_ident()
        self.expect("to")
        value = self.parse_expr()
        return SetStmt(pos, name_tok.value, value)

    def parse_change_stmt(self) -> ChangeStmt:
        pos = self._pos()
        self.expect("change")
        name_tok = self.expect_ident()
        self.expect("by")
        delta = self.parse_expr()
        return ChangeStmt(pos, name_tok.value, delta)

    # ── Expressions ──────────────────────────────────────────

    def parse_expr(self) -> Expr:
        """Expression = Term ( ( '+' | '-' | 'or' ) Term )*"""
        left = self.parse_term()
        while self._at_one_of(ADD_OPS):
            op = self.advance().value
            right = self.parse_term()
            left = BinaryOp(left.pos, op, left, right)
        return left

    def parse_term(self) -> Expr:
        """Term = SFactor ( ( '*' | '/' | 'and' ) SFactor )*"""
        left = self.parse_sfactor()
        while self._at_one_of(MUL_OPS):
            op = self.advance().value
            right = self.parse_sfactor()
            left = BinaryOp(left.pos, op, left, right)
        return left

    def parse_sfactor(self) -> Expr:
        """SFactor = ( '-' | 'not' ) SFactor | Factor"""
        if self._at_one_of(UNARY_OPS):
            pos = self._pos()
            op = self.advance().value
            operand = self.parse_sfactor()
            return UnaryOp(pos, op, operand)
        return self.parse_factor()

    def parse_factor(self) -> Expr:
        """Factor = IntLit | FloatLit | Ident | '(' Expression ')'"""
        tok = self.current()
        pos = self._pos()
        if tok.type == TK_INT:
            self.advance()
            return IntLit(pos, int(tok.value), tok.value)
        if tok.type == TK_FLOAT:
            self.advance()
            return FloatLit(pos, float(tok.value), tok.value)
        if tok.type == TK_IDENT:
            self.advance()
            if self.at("("):
                paren = self.current()
                raise ParseError(
                    "end of expression (function calls are not allowed inside expressions)",
                    paren.describe(),
                    paren.line,
                    paren.col,
                )
            return Var(pos, tok.value)
        if self.at("("):
            self.advance()
            inner = self.parse_expr()
            self.expect(")")
            return inner
        raise self.error("expression")

    def _at_one_of(self, ops: set[str]) -> bool:
        tok = self._current
        return (tok.type == TK_OP or tok.type == TK_KEYWORD) and tok.value in ops


def parse(source: str) -> Program:
    """Parse Haumea source code into a Program AST."""
    parser = Parser(tokenize(source))
    try:
        return parser.parse_program()
    except RecursionError:
        tok = parser.current()
        raise ParseError(
            "shallower nesting (input is nested too deeply)",
            tok.describe(),
            tok.line,
            tok.col,
        ) from None
