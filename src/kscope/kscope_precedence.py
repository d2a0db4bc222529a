"""
Binary operator precedence table.

`OperatorPrecedence` maps an operator character to a positive rank (higher binds
tighter). A table is filled once by `install()`; further calls are no-ops and the
table is read-only afterwards. Each Parser owns and installs its own instance.

Example:
    >>> table = OperatorPrecedence()
    >>> table.install()
    >>> table.precedence_of(Token("CHAR", "*"))
    40
"""

from types import MappingProxyType
from typing import Mapping

from kscope.kscope_constants import BINOP_PRECEDENCE, CHAR
from kscope.kscope_errors import PrecedenceTableUninstalled
from kscope.kscope_lexer import Token

NOT_AN_OPERATOR = -1


class OperatorPrecedence:
    """Lazily installed, then immutable, operator precedence table.

    Attributes:
        source (Mapping[str, int]): The operator ranks copied in by `install()`.
    """

    def __init__(self, source: Mapping[str, int] = BINOP_PRECEDENCE) -> None:
        self.source = source
        self._table: Mapping[str, int] = MappingProxyType({})
        self._installed = False

    @property
    def installed(self) -> bool:
        return self._installed

    def install(self) -> None:
        """Populates the table. Calling it again has no effect."""
        if self.installed:
            return
        self._table = MappingProxyType(dict(self.source))
        self._installed = True

    def precedence_of(self, token: Token) -> int:
        """Returns the precedence of `token` as a binary operator.

        Args:
            token (Token): The token under the parser's cursor.

        Returns:
            int: The operator's rank, or -1 for anything that is not a known operator
            (keywords, identifiers, numbers, EOF, unknown symbols, non-positive ranks).

        Raises:
            PrecedenceTableUninstalled: If a symbol is looked up before `install()`.
        """
        if token.type != CHAR:
            return NOT_AN_OPERATOR
        if not self.installed:
            raise PrecedenceTableUninstalled()
        prec = self._table.get(token.value, 0)
        if prec <= 0:
            return NOT_AN_OPERATOR
        return prec

    def __contains__(self, op: object) -> bool:
        return op in self._table

    def __repr__(self) -> str:
        return f"OperatorPrecedence({dict(self._table)!r})"


__all__ = ["NOT_AN_OPERATOR", "OperatorPrecedence"]
