"""
Interactive driver for the Kaleidoscope front-end.

Reads source from a stream (stdin by default), parses one top-level construct at a
time and reports each outcome on the diagnostic stream:

    ready> def foo(a b) a+b
    Parsed a function definition.
    ready> foo(1, 2
    Error: Expected ')' or ',' in argument list

On failure exactly one token is skipped before the next attempt.
"""

import logging
import sys
from typing import TextIO

from kscope.kscope_ast import PrototypeAST
from kscope.kscope_constants import DEF, EOF, EXTERN, STATEMENT_SEPARATOR
from kscope.kscope_lexer import CharacterStream, Lexer
from kscope.kscope_parser import ParseResult, Parser, TopLevel

logger = logging.getLogger(__name__)

PROMPT = "ready> "


def describe(node: TopLevel) -> str:
    """Returns the driver's success message for a parsed construct."""
    if isinstance(node, PrototypeAST):
        return "Parsed an extern"
    if node.prototype.is_anonymous:
        return "Parsed a top-level expr"
    return "Parsed a function definition."


def report(result: ParseResult[TopLevel], parser: Parser, out: TextIO) -> TopLevel | None:
    """Prints the outcome of one parse; on failure skips one token for recovery."""
    if result.ok:
        node = result.unwrap()
        print(describe(node), file=out)
        return node
    print(f"Error: {result.error}", file=out)
    parser.skip_token()
    return None


def handle_definition(parser: Parser, out: TextIO) -> TopLevel | None:
    return report(parser.parse_definition(), parser, out)  # type: ignore[arg-type]


def handle_extern(parser: Parser, out: TextIO) -> TopLevel | None:
    return report(parser.parse_extern(), parser, out)  # type: ignore[arg-type]


def handle_top_level_expression(parser: Parser, out: TextIO) -> TopLevel | None:
    # Evaluate a top-level expression into an anonymous function.
    return report(parser.parse_top_level_expression(), parser, out)  # type: ignore[arg-type]


def main_loop(
    parser: Parser,
    out: TextIO | None = None,
    prompt: str = PROMPT,
    parsed: list[TopLevel] | None = None,
) -> list[TopLevel]:
    """Runs the read-parse-report loop until EOF.

    Args:
        parser: Parser positioned at the start of input.
        out: Where prompts and diagnostics go.
        prompt: Printed before each construct.
        parsed: List to collect constructs into; a fresh one is made if omitted.

    Returns:
        The successfully parsed constructs, in source order.
    """
    out = out if out is not None else sys.stderr
    parsed = parsed if parsed is not None else []
    # Same dispatch as Parser.parse_top_level, kept inline so that every
    # skipped `;` gets its own prompt.
    while True:
        print(prompt, end="", file=out, flush=True)
        tok = parser.current()
        node: TopLevel | None
        if tok.type == EOF:
            return parsed
        if tok.is_char(STATEMENT_SEPARATOR):
            # ignore top-level semicolons.
            parser.advance()
            continue
        if tok.type == DEF:
            node = handle_definition(parser, out)
        elif tok.type == EXTERN:
            node = handle_extern(parser, out)
        else:
            node = handle_top_level_expression(parser, out)
        if node is not None:
            parsed.append(node)


def start_repl(stream: TextIO | None = None, out: TextIO | None = None) -> list[TopLevel]:
    """Starts the driver on `stream` (stdin by default)."""
    stream = stream if stream is not None else sys.stdin
    out = out if out is not None else sys.stderr
    parser = Parser(Lexer(CharacterStream(stream)))
    parsed: list[TopLevel] = []
    try:
        main_loop(parser, out, parsed=parsed)
    except KeyboardInterrupt:
        print("\nExiting Kaleidoscope REPL.", file=out)
    finally:
        logger.debug("driver stopped")
    return parsed


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
