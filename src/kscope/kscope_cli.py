"""
Kaleidoscope CLI Entrypoint.

Parses Kaleidoscope source from a `.ks` file or an inline string, reporting each
top-level construct the way the interactive driver does, or starts the REPL.

Example usage:
    kscope examples/fib.ks
    kscope -s "def add(a b) a+b; add(1, 2)" --dump
    kscope --repl --verbose

Functions:
    run_kscope(source: str, is_string: bool = False, dump: bool = False) -> int:
        Parses all of `source`, prints diagnostics and optionally the AST as JSON.

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments and dispatches to `run_kscope` or the REPL.
"""

import argparse
import json
import logging
import sys

from kscope.kscope_lexer import CharacterStream, Lexer
from kscope.kscope_parser import Parser
from kscope.kscope_repl import describe, start_repl

SOURCE_SUFFIX = ".ks"


def run_kscope(source: str, is_string: bool = False, dump: bool = False) -> int:
    """
    Parse a Kaleidoscope program and report on it.

    Args:
        source (str): Source text, or path to a `.ks` file.
        is_string (bool): If True, `source` is the program text itself.
        dump (bool): If True, print every parsed construct as a JSON line on stdout.

    Returns:
        int: 0 if every construct parsed, 1 otherwise.

    Raises:
        ValueError: If `is_string` is False and the path does not end with '.ks'.
    """
    if not is_string and not source.endswith(SOURCE_SUFFIX):
        raise ValueError(f"Only {SOURCE_SUFFIX} files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    parser = Parser(Lexer(CharacterStream.from_string(source)))
    results = parser.parse_program()

    failed = 0
    for result in results:
        if result.ok:
            print(describe(result.unwrap()), file=sys.stderr)
        else:
            failed += 1
            print(f"Error: {result.error}", file=sys.stderr)

    if dump:
        for result in results:
            if not result.ok:
                continue
            node = result.unwrap()
            try:
                print(json.dumps(node.to_dict()))
            except RecursionError:
                failed += 1
                print(
                    f"Error: AST too deep to dump (line {node.line}, col {node.col})",
                    file=sys.stderr,
                )

    return 1 if failed else 0


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the `kscope` command.

    Supported flags:
        - `-s`, `--string`: Interpret source as program text instead of a file path.
        - `--dump`: Print parsed constructs as JSON.
        - `--repl`: Launch the interactive driver on stdin.
        - `--verbose`: Enable debug logging.

    With no source argument the interactive driver is started.
    """
    parser = argparse.ArgumentParser(
        prog="kscope", description="Parse Kaleidoscope source into an AST."
    )
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--dump", action="store_true", help="Print each parsed construct as JSON"
    )
    parser.add_argument(
        "--repl", action="store_true", help="Launch the interactive driver on stdin"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )

    if args.repl or args.source is None:
        start_repl()
        return 0
    return run_kscope(source=args.source, is_string=args.string, dump=args.dump)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    sys.exit(main())
