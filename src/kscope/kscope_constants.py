"""
Shared token names, keywords and operator table for the Kaleidoscope front-end.

Token kinds are plain strings, compared by the lexer, parser and driver:

    EOF     end of input
    DEF     the ``def`` keyword
    EXTERN  the ``extern`` keyword
    IDENT   identifier, payload is the identifier text
    NUMBER  numeric literal, payload is a ``float``
    CHAR    any other single character, payload is the character itself
"""

import string

EOF = "EOF"
DEF = "DEF"
EXTERN = "EXTERN"
IDENT = "IDENT"
NUMBER = "NUMBER"
CHAR = "CHAR"

KEYWORDS: dict[str, str] = {
    "def": DEF,
    "extern": EXTERN,
}

# 1 is the lowest precedence.
BINOP_PRECEDENCE: dict[str, int] = {
    "<": 10,
    "+": 20,
    "-": 20,
    "*": 40,
}

# Input is treated as single-byte text, so only ASCII classes count.
IDENT_START = frozenset(string.ascii_letters)
IDENT_CHARS = frozenset(string.ascii_letters + string.digits)
NUMBER_CHARS = frozenset(string.digits + ".")
WHITESPACE = frozenset(" \t\n\r\v\f")
COMMENT_START = "#"
LINE_ENDS = frozenset("\n\r")

STATEMENT_SEPARATOR = ";"

__all__ = [
    "BINOP_PRECEDENCE",
    "CHAR",
    "COMMENT_START",
    "DEF",
    "EOF",
    "EXTERN",
    "IDENT",
    "IDENT_CHARS",
    "IDENT_START",
    "KEYWORDS",
    "LINE_ENDS",
    "NUMBER",
    "NUMBER_CHARS",
    "STATEMENT_SEPARATOR",
    "WHITESPACE",
]
