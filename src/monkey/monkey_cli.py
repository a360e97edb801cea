"""
Monkey CLI Entrypoint.

Command-line interface for parsing Monkey source code.

Features:
    - Read source from `.monkey` files or inline strings.
    - Print the rendered program, the token stream, or the tree as JSON.
    - Report parser diagnostics on stderr with a non-zero exit status.
    - Launch an interactive REPL with a greeting for the current user.

Example usage:
    monkey program.monkey
    monkey -s "let x = 1 + 2;"
    monkey -s "-a * b" --tokens
    monkey program.monkey --json
    monkey --repl --verbose

Functions:
    run_monkey(source: str, is_string: bool = False, tokens: bool = False,
               as_json: bool = False) -> int:
        Runs the lex → parse → print pipeline and returns an exit status.

    greet() -> None:
        Prints the REPL banner.

    main() -> None:
        Parses CLI arguments and invokes the appropriate action.
"""

import argparse
import getpass
import json
import sys

from monkey.monkey_lexer import Lexer, tokenize
from monkey.monkey_parser import Parser


def run_monkey(
    source: str,
    is_string: bool = False,
    tokens: bool = False,
    as_json: bool = False,
) -> int:
    """
    Run the Monkey front end on a file or string and print the result.

    Args:
        source (str): The Monkey source code or path to a `.monkey` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        tokens (bool): If True, prints one token per line instead of parsing.
        as_json (bool): If True, prints the tree as JSON instead of rendered source.

    Returns:
        int: 0 on success, 1 if the parser reported diagnostics.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.monkey'.
    """
    if not is_string and not source.endswith(".monkey"):
        raise ValueError("Only .monkey files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    if tokens:
        for tok in tokenize(source):
            print(f"{tok.position:>5}  {tok.kind.name:<9} {tok.text}")
        return 0

    parser = Parser(Lexer(source))
    program = parser.parse_program()
    diagnostics = parser.diagnostics()
    if diagnostics:
        for msg in diagnostics:
            print(f"error: {msg}", file=sys.stderr)
        return 1

    if as_json:
        print(json.dumps(program.to_dict(), indent=2))
    else:
        print(program.render())
    return 0


def greet() -> None:
    print(f"Hello {getpass.getuser()}! This is the Monkey programming language!")
    print("Feel free to type in commands")


def main() -> None:
    """
    Entry point for the Monkey CLI.

    - Launches the REPL if no arguments are passed or `--repl` is specified.
    - Otherwise parses the given file or string and exits with the pipeline's status.
    """
    parser = argparse.ArgumentParser(prog="monkey")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print the token stream instead of the tree"
    )
    parser.add_argument(
        "--json", dest="as_json", action="store_true", help="Print the tree as JSON"
    )
    parser.add_argument(
        "--repl", action="store_true", help="Launch interactive REPL"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Verbose REPL mode (if --repl)"
    )

    args = parser.parse_args()

    if args.repl or args.source is None:
        from monkey.monkey_repl import start_repl

        greet()
        start_repl(verbose=args.verbose)
        return

    sys.exit(
        run_monkey(
            source=args.source,
            is_string=args.string,
            tokens=args.tokens,
            as_json=args.as_json,
        )
    )


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
