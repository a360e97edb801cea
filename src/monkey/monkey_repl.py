"""
Interactive read-parse-print loop for the Monkey language.

Each entry is lexed and parsed on its own; the REPL prints the diagnostics if
there are any, otherwise the rendered program. Nothing is evaluated.

Commands:
    exit / quit     Leave the REPL.
    verbose-mode    Toggle printing of the token stream before the tree.

Entries with unbalanced `{` continue on a `... ` prompt until the braces close.
"""

from monkey.monkey_lexer import Lexer, tokenize
from monkey.monkey_parser import Parser

PROMPT = ">>> "
CONTINUATION_PROMPT = "... "


def print_diagnostics(diagnostics: list[str]) -> None:
    print("[error] >>>")
    for msg in diagnostics:
        print(f"\t{msg}")


def handle_source(src: str, verbose: bool = False) -> bool:
    """Parses one REPL entry and prints the outcome.

    Args:
        src (str): The entry text.
        verbose (bool): Also print the token stream.

    Returns:
        bool: True if the entry parsed without diagnostics.
    """
    if verbose:
        print(f"[tokens] >>> {tokenize(src)}")

    parser = Parser(Lexer(src))
    program = parser.parse_program()
    diagnostics = parser.diagnostics()
    if diagnostics:
        print_diagnostics(diagnostics)
        return False

    rendered = program.render()
    if rendered:
        print(rendered)
    return True


def read_entry() -> str | None:
    """Reads lines until braces balance. Returns None on `exit` / `quit`."""
    src_lines: list[str] = []
    brace_count = 0
    while True:
        prompt = PROMPT if not src_lines else CONTINUATION_PROMPT
        line = input(prompt)
        if line.strip() in ("exit", "quit") and not src_lines:
            return None
        src_lines.append(line)
        brace_count += line.count("{") - line.count("}")
        if brace_count <= 0:
            break
    return "\n".join(src_lines).strip()


def start_repl(verbose: bool = False) -> None:
    print("Monkey REPL. Type 'exit' or 'quit' to leave.")

    while True:
        try:
            src = read_entry()
            if src is None:
                print("Exiting Monkey REPL.")
                return
            if not src:
                continue
            if src.lower() == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue
            handle_source(src, verbose=verbose)
        except (KeyboardInterrupt, EOFError):
            print("\nExiting Monkey REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
