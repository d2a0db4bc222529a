"""
Exception types raised or carried by the Kaleidoscope front-end.

Classes:
    - UnexpectedToken: A token was found where the grammar does not allow it.
    - PrecedenceTableUninstalled: The operator table was queried before `install()`.
"""

from typing import Any


class UnexpectedToken(SyntaxError):
    """Raised (and carried inside a failed ParseResult) on a grammar violation.

    Attributes:
        token (Token | None): The offending token, when known.
        line (int): Line of the offending token (0 if unknown).
        col (int): Column of the offending token (0 if unknown).

    Example:
        raise UnexpectedToken("Expected ')' in prototype", tok)
    """

    def __init__(self, message: str, token: Any = None):
        super().__init__(message)
        self.message = message
        self.token = token
        self.line: int = getattr(token, "line", 0)
        self.col: int = getattr(token, "col", 0)

    def __str__(self) -> str:
        return self.message


class PrecedenceTableUninstalled(RuntimeError):
    """Raised when an operator precedence is requested before the table is installed."""

    def __init__(self, message: str = "Binary operators are not installed yet."):
        super().__init__(message)


__all__ = ["PrecedenceTableUninstalled", "UnexpectedToken"]
