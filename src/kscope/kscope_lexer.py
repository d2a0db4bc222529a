"""
Lexical analyzer for the Kaleidoscope expression language.

This module turns a character stream into tokens, one token per call:

Classes:
    CharacterStream: Sequential single-character reader with line/column tracking.
    Token: A single token with kind, payload and source location.
    Lexer: Produces the next Token from a CharacterStream on demand.

Features:
    - Skips whitespace and `#` line comments (comments are invisible to the parser)
    - Maximal-munch identifiers `[a-zA-Z][a-zA-Z0-9]*`; `def` and `extern` are keywords
    - Numbers `[0-9.]+`, converted leniently: "1.2.3" reads as 1.2
    - Any other character is returned as a CHAR token

The lexer holds exactly one pending character between calls and never looks further
ahead, so it can sit directly on an interactive stream such as `sys.stdin`.

Example:
    >>> lexer = Lexer(CharacterStream.from_string("def foo(x) x+1"))
    >>> lexer.next_token()
    Token(DEF, def)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
"""

import io
import logging
import re
from typing import Any, TextIO

from kscope.kscope_constants import (
    CHAR,
    COMMENT_START,
    EOF,
    IDENT,
    IDENT_CHARS,
    IDENT_START,
    KEYWORDS,
    LINE_ENDS,
    NUMBER,
    NUMBER_CHARS,
    WHITESPACE,
)

logger = logging.getLogger(__name__)

_NUMBER_PREFIX = re.compile(r"[0-9]*(?:\.[0-9]*)?")


class CharacterStream:
    """
    Reads characters one at a time from a text stream, tracking line and column.

    The stream never seeks backward: every character is delivered exactly once,
    which keeps it usable on pipes and terminals.

    Attributes:
        source (TextIO): The underlying text stream.
        position (int): Number of characters consumed so far.
        line (int): Line number of the next unread character (1-indexed).
        column (int): Column number of the next unread character (1-indexed).
    """

    def __init__(self, source: TextIO, line: int = 1, column: int = 1):
        self.source = source
        self.position = 0
        self.line = line
        self.column = column
        self._exhausted = False

    @classmethod
    def from_string(cls, text: str) -> "CharacterStream":
        """Builds a stream over an in-memory string."""
        return cls(io.StringIO(text))

    def next(self) -> str:
        """
        Consumes and returns the next character.

        Returns:
            str: The next character, or an empty string once input is exhausted.
        """
        if self._exhausted:
            return ""
        char = self.source.read(1)
        if char == "":
            self._exhausted = True
            return ""
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def end_of_file(self) -> bool:
        """Returns True once a read has hit the end of the source."""
        return self._exhausted


class Token:
    """Represents a single lexical token.

    Attributes:
        type (str): Token kind ('EOF', 'DEF', 'EXTERN', 'IDENT', 'NUMBER', 'CHAR').
        value (str | float): Identifier text, numeric value, keyword text or the character.
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
    """

    def __init__(self, type_: str, value: Any = "", line: int = 0, col: int = 0):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col

    def is_char(self, char: str) -> bool:
        """Returns True if this is the single-character symbol `char`."""
        return self.type == CHAR and self.value == char

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))


def parse_number(text: str) -> float:
    """Converts number text the way C's strtod does on `[0-9.]+` input.

    Only the longest valid prefix is used, so "1.2.3" yields 1.2. Text with no
    leading digits at all ("." or "..") yields 0.0.

    Args:
        text (str): Characters accumulated by the lexer.

    Returns:
        float: The converted value.
    """
    match = _NUMBER_PREFIX.match(text)
    prefix = match.group(0) if match else ""
    if not any(ch.isdigit() for ch in prefix):
        return 0.0
    return float(prefix)


class Lexer:
    """Lexical analyzer for Kaleidoscope.

    Each call to `next_token()` scans just enough characters to produce one token.
    The character that ended the previous token is kept as `last_char` and is the
    first one examined on the next call.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        last_char (str): Pending lookahead character ("" at end of input).
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream
        self.last_char = " "
        self._line = stream.line
        self._col = stream.column

    def advance(self) -> str:
        """Reads the next character into `last_char` and returns it."""
        self._line, self._col = self.stream.line, self.stream.column
        self.last_char = self.stream.next()
        return self.last_char

    def skip_whitespace(self) -> None:
        while self.last_char in WHITESPACE:
            self.advance()

    def skip_comment(self) -> None:
        """Discards characters up to (not including) the end of the line."""
        while self.last_char != "" and self.last_char not in LINE_ENDS:
            self.advance()

    def next_token(self) -> Token:
        """Consumes input and returns the next Token.

        Returns:
            Token: The next token. At end of input an EOF token is returned on every call.
        """
        while True:
            self.skip_whitespace()
            if self.last_char != COMMENT_START:
                break
            self.skip_comment()

        line, col = self._line, self._col
        ch = self.last_char

        # 1. Identifier or keyword
        if ch in IDENT_START:
            ident = ch
            while self.advance() in IDENT_CHARS:
                ident += self.last_char
            tok = Token(KEYWORDS.get(ident, IDENT), ident, line, col)

        # 2. Number
        elif ch in NUMBER_CHARS:
            text = ch
            while self.advance() in NUMBER_CHARS:
                text += self.last_char
            tok = Token(NUMBER, parse_number(text), line, col)

        # 3. End of input, not consumed
        elif ch == "":
            tok = Token(EOF, "", line, col)

        # 4. Anything else is returned as itself
        else:
            self.advance()
            tok = Token(CHAR, ch, line, col)

        logger.debug("token %r at %d:%d", tok, line, col)
        return tok


def tokenize(source: str) -> list[Token]:
    """Tokenizes a whole string, returning every token up to and including EOF."""
    lexer = Lexer(CharacterStream.from_string(source))
    tokens: list[Token] = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.type == EOF:
            return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "parse_number", "tokenize"]
