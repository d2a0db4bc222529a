import pytest

from kscope.kscope_ast import ExprAST
from kscope.kscope_parser import Parser


def parse_expr(source: str) -> ExprAST:
    return Parser.from_source(source).parse_expression().unwrap()


@pytest.fixture  # type: ignore[misc]
def expr() -> object:
    """Parses a single expression and returns its AST, raising on failure."""
    return parse_expr
