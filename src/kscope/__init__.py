"""Kaleidoscope language front-end: tokenizer and precedence-climbing parser."""

__version__ = "0.1.0"
