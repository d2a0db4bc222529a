"""
Kaleidoscope Language Parser

Turns the token stream produced by `kscope_lexer.Lexer` into AST nodes from
`kscope_ast`, using recursive descent for the overall grammar and precedence
climbing for chains of binary operators.

Grammar
-------
    primary    ::= NUMBER | IDENTIFIER ('(' (expr (',' expr)*)? ')')? | '(' expr ')'
    expr       ::= primary binopRHS
    binopRHS   ::= (OP primary)*
    prototype  ::= IDENTIFIER '(' IDENTIFIER* ')'
    definition ::= 'def' prototype expr
    extern     ::= 'extern' prototype
    toplevel   ::= expr

Parser Behavior
---------------
- Tokens are pulled from the lexer one at a time; the parser only ever holds the
  current token.
- Operators of equal precedence associate left to right; `*` binds tighter than
  `+`/`-`, which bind tighter than `<`.
- Every public `parse_*` method returns a `ParseResult`. A failure anywhere inside a
  construct aborts the whole construct and nothing partially built is returned.
- After a failure the parser stays usable: the caller may `advance()` past the bad
  token and keep parsing (see `kscope_repl.main_loop`).

Entry Points
------------
- `parse_definition()`, `parse_extern()`, `parse_top_level_expression()`: top-level constructs.
- `parse_expression()`, `parse_primary()`, `parse_binop_rhs()`, `parse_prototype()`: sub-rules.
- `parse_program()`: every construct in the input, with one-token error recovery.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Protocol, TypeVar, Union, cast

from kscope.kscope_ast import (
    BinaryExpr,
    CallExpr,
    ExprAST,
    FunctionAST,
    NumberExpr,
    PrototypeAST,
    VariableExpr,
)
from kscope.kscope_constants import (
    DEF,
    EOF,
    EXTERN,
    IDENT,
    NUMBER,
    STATEMENT_SEPARATOR,
)
from kscope.kscope_errors import UnexpectedToken
from kscope.kscope_lexer import CharacterStream, Lexer, Token
from kscope.kscope_precedence import OperatorPrecedence

logger = logging.getLogger(__name__)

T = TypeVar("T")
TopLevel = Union[FunctionAST, PrototypeAST]


class TokenSource(Protocol):
    """Anything that hands out tokens one at a time, like `Lexer`."""

    def next_token(self) -> Token: ...  # pragma: no cover


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """Outcome of a parse: either a node or the error that prevented it.

    Attributes:
        node (T | None): The parsed node on success.
        error (UnexpectedToken | None): The failure on error.
    """

    node: T | None = None
    error: UnexpectedToken | None = None

    @classmethod
    def success(cls, node: T) -> ParseResult[T]:
        return cls(node=node)

    @classmethod
    def failure(cls, error: UnexpectedToken) -> ParseResult[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Returns the node, or raises the carried error."""
        if self.error is not None:
            raise self.error
        return cast(T, self.node)

    def __bool__(self) -> bool:
        return self.ok


class Parser:
    """
    Kaleidoscope Parser Class

    Attributes
    ----------
    lexer : TokenSource
        Where tokens come from.
    precedence : OperatorPrecedence
        This parser's operator table, installed at construction.

    Methods
    -------
    current() -> Token
        The token under the cursor (reads the first token on first use).
    advance() -> Token
        Move the cursor one token forward and return the new current token.
    parse_definition() / parse_extern() / parse_top_level_expression() -> ParseResult
        Parse one top-level construct.
    parse_program() -> list[ParseResult]
        Parse everything up to EOF, recovering from errors.
    """

    def __init__(self, lexer: TokenSource) -> None:
        self.lexer = lexer
        self.precedence = OperatorPrecedence()
        self.precedence.install()
        self._current: Token | None = None

    @classmethod
    def from_source(cls, source: str) -> Parser:
        return cls(Lexer(CharacterStream.from_string(source)))

    # Cursor

    def current(self) -> Token:
        if self._current is None:
            self._current = self.lexer.next_token()
        return self._current

    def advance(self) -> Token:
        self._current = self.lexer.next_token()
        return self._current

    def _expect_char(self, char: str, message: str) -> Token:
        tok = self.current()
        if not tok.is_char(char):
            raise UnexpectedToken(message, tok)
        self.advance()
        return tok

    def _attempt(self, rule: Callable[[], T]) -> ParseResult[T]:
        try:
            return ParseResult.success(rule())
        except UnexpectedToken as e:
            logger.debug("parse failed at %d:%d: %s", e.line, e.col, e)
            return ParseResult.failure(e)
        except RecursionError:
            error = UnexpectedToken("expression nested too deeply", self.current())
            logger.debug("parse failed at %d:%d: %s", error.line, error.col, error)
            return ParseResult.failure(error)

    # Public entry points

    def parse_primary(self) -> ParseResult[ExprAST]:
        return self._attempt(self._parse_primary)

    def parse_expression(self) -> ParseResult[ExprAST]:
        return self._attempt(self._parse_expression)

    def parse_binop_rhs(self, min_prec: int, lhs: ExprAST) -> ParseResult[ExprAST]:
        return self._attempt(lambda: self._parse_binop_rhs(min_prec, lhs))

    def parse_prototype(self) -> ParseResult[PrototypeAST]:
        return self._attempt(self._parse_prototype)

    def parse_definition(self) -> ParseResult[FunctionAST]:
        return self._attempt(self._parse_definition)

    def parse_extern(self) -> ParseResult[PrototypeAST]:
        return self._attempt(self._parse_extern)

    def parse_top_level_expression(self) -> ParseResult[FunctionAST]:
        return self._attempt(self._parse_top_level_expression)

    def parse_top_level(self) -> ParseResult[TopLevel] | None:
        """Dispatches on the current token and parses one top-level construct.

        Returns None at EOF. Top-level `;` separators are skipped.
        """
        while self.current().is_char(STATEMENT_SEPARATOR):
            self.advance()
        tok = self.current()
        if tok.type == EOF:
            return None
        result: ParseResult[TopLevel]
        if tok.type == DEF:
            result = self.parse_definition()  # type: ignore[assignment]
        elif tok.type == EXTERN:
            result = self.parse_extern()  # type: ignore[assignment]
        else:
            result = self.parse_top_level_expression()  # type: ignore[assignment]
        return result

    def parse_program(self) -> list[ParseResult[TopLevel]]:
        """Parses every construct up to EOF.

        A failed construct is recorded and exactly one token is skipped before
        parsing resumes.
        """
        results: list[ParseResult[TopLevel]] = []
        while True:
            result = self.parse_top_level()
            if result is None:
                return results
            results.append(result)
            if not result.ok:
                self.skip_token()

    def skip_token(self) -> Token:
        """Error recovery: drop the current token."""
        logger.debug("recovery: skipping %r", self.current())
        return self.advance()

    # Expressions

    def _parse_number(self) -> ExprAST:
        """numberexpr ::= number"""
        tok = self.current()
        self.advance()
        return NumberExpr(tok.value, line=tok.line, col=tok.col)

    def _parse_paren(self) -> ExprAST:
        """parenexpr ::= '(' expression ')'"""
        self.advance()
        expr = self._parse_expression()
        self._expect_char(")", "expected ')'")
        return expr

    def _parse_identifier(self) -> ExprAST:
        """
        identifierexpr
            ::= identifier
            ::= identifier '(' expression* ')'
        """
        tok = self.current()
        name = tok.value
        self.advance()

        if not self.current().is_char("("):
            return VariableExpr(name, line=tok.line, col=tok.col)

        self.advance()
        args: list[ExprAST] = []
        if not self.current().is_char(")"):
            while True:
                args.append(self._parse_expression())
                if self.current().is_char(")"):
                    break
                if not self.current().is_char(","):
                    raise UnexpectedToken(
                        "Expected ')' or ',' in argument list", self.current()
                    )
                self.advance()

        self.advance()
        return CallExpr(name, tuple(args), line=tok.line, col=tok.col)

    def _parse_primary(self) -> ExprAST:
        tok = self.current()
        if tok.type == IDENT:
            return self._parse_identifier()
        if tok.type == NUMBER:
            return self._parse_number()
        if tok.is_char("("):
            return self._parse_paren()
        raise UnexpectedToken("Unknown token when expecting an expression.", tok)

    def _parse_expression(self) -> ExprAST:
        """expression ::= primary binoprhs"""
        lhs = self._parse_primary()
        return self._parse_binop_rhs(0, lhs)

    def _parse_binop_rhs(self, min_prec: int, lhs: ExprAST) -> ExprAST:
        """binoprhs ::= (op primary)*

        Folds operators binding at least as tightly as `min_prec` into `lhs`.
        """
        while True:
            tok_prec = self.precedence.precedence_of(self.current())
            if tok_prec < min_prec:
                return lhs

            op_tok = self.current()
            self.advance()

            rhs = self._parse_primary()

            # A tighter operator after rhs takes rhs as its own lhs first.
            next_prec = self.precedence.precedence_of(self.current())
            if tok_prec < next_prec:
                rhs = self._parse_binop_rhs(tok_prec + 1, rhs)

            lhs = BinaryExpr(op_tok.value, lhs, rhs, line=op_tok.line, col=op_tok.col)

    # Top-level constructs

    def _parse_prototype(self) -> PrototypeAST:
        """prototype ::= id '(' id* ')'"""
        name_tok = self.current()
        if name_tok.type != IDENT:
            raise UnexpectedToken("Expected function name in prototype", name_tok)
        self.advance()

        if not self.current().is_char("("):
            raise UnexpectedToken("Expected '(' in prototype", self.current())

        params: list[str] = []
        while self.advance().type == IDENT:
            params.append(self.current().value)
        if not self.current().is_char(")"):
            raise UnexpectedToken("Expected ')' in prototype", self.current())
        self.advance()

        return PrototypeAST(
            name_tok.value, tuple(params), line=name_tok.line, col=name_tok.col
        )

    def _parse_definition(self) -> FunctionAST:
        """definition ::= 'def' prototype expression"""
        def_tok = self.current()
        self.advance()
        proto = self._parse_prototype()
        body = self._parse_expression()
        logger.debug("parsed definition of %r", proto.name)
        return FunctionAST(proto, body, line=def_tok.line, col=def_tok.col)

    def _parse_extern(self) -> PrototypeAST:
        """external ::= 'extern' prototype"""
        self.advance()
        proto = self._parse_prototype()
        logger.debug("parsed extern %r", proto.name)
        return proto

    def _parse_top_level_expression(self) -> FunctionAST:
        """toplevelexpr ::= expression"""
        body = self._parse_expression()
        logger.debug("parsed top-level expression")
        return FunctionAST.anonymous(body)


__all__ = ["ParseResult", "Parser", "TokenSource", "TopLevel"]
