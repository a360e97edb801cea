"""
Lexical analyzer for the Monkey programming language.

Converts raw source text into a stream of tokens, one token per call to
``Lexer.next_token()``.

Classes:
    Lexer: Cursor over the input text with one character of lookahead.

Features:
    - Skips whitespace (space, tab, newline, carriage return)
    - Recognizes single-character operators and delimiters
    - Recognizes two-character operators (`==`, `!=`) via lookahead
    - Greedy identifiers/keywords and integer literals
    - Unknown characters become ILLEGAL tokens; the lexer never raises

Example:
    >>> lexer = Lexer("let x = 5;")
    >>> lexer.next_token()
    Token(LET, let)

Exports:
    - Lexer
    - new_scanner
    - tokenize
"""

import string

from monkey.monkey_token import Token, TokenKind, lookup_ident

# Sentinel for "beyond end of input"; never a real character.
EOF_CHAR = ""

_LETTERS = frozenset(string.ascii_letters + "_")
_DIGITS = frozenset(string.digits)
_WHITESPACE = frozenset(" \t\n\r")

single_char_tokens: dict[str, TokenKind] = {
    "=": TokenKind.ASSIGN,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "!": TokenKind.BANG,
    "*": TokenKind.ASTERISK,
    "/": TokenKind.SLASH,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
}

# First character -> (second character, combined kind)
two_char_tokens: dict[str, tuple[str, TokenKind]] = {
    "=": ("=", TokenKind.EQ),
    "!": ("=", TokenKind.NOT_EQ),
}


def is_letter(ch: str) -> bool:
    return ch in _LETTERS


def is_digit(ch: str) -> bool:
    return ch in _DIGITS


class Lexer:
    """Lexical analyzer for the Monkey language.

    Attributes:
        input (str): The source text being scanned.
        position (int): Index of the current character.
        read_position (int): Index of the next character to read.
        ch (str): The current character, or EOF_CHAR past the end of input.
    """

    def __init__(self, source: str) -> None:
        """Initializes the Lexer and loads the first character.

        Args:
            source (str): The input source code.
        """
        self.input = source
        self.position = 0
        self.read_position = 0
        self.ch = EOF_CHAR
        self.read_char()

    def read_char(self) -> None:
        """Advances the cursor by one character.

        Once the end of input is reached the cursor stays put, so repeated
        calls never move past ``len(input)``.
        """
        if self.read_position >= len(self.input):
            self.ch = EOF_CHAR
            self.position = len(self.input)
            self.read_position = self.position + 1
            return
        self.ch = self.input[self.read_position]
        self.position = self.read_position
        self.read_position += 1

    def peek_char(self) -> str:
        """Returns the next character without consuming it.

        Returns:
            str: The upcoming character, or EOF_CHAR if out of bounds.
        """
        if self.read_position >= len(self.input):
            return EOF_CHAR
        return self.input[self.read_position]

    def skip_whitespace(self) -> None:
        while self.ch != EOF_CHAR and self.ch in _WHITESPACE:
            self.read_char()

    def read_identifier(self) -> str:
        start = self.position
        while is_letter(self.ch):
            self.read_char()
        return self.input[start : self.position]

    def read_number(self) -> str:
        start = self.position
        while is_digit(self.ch):
            self.read_char()
        return self.input[start : self.position]

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the input.

        Returns:
            Token: The next token. At end of input this is always an EOF token.
        """
        self.skip_whitespace()
        start = self.position

        if self.ch == EOF_CHAR:
            return Token(TokenKind.EOF, "", start)

        # 1. Identifier or keyword
        if is_letter(self.ch):
            word = self.read_identifier()
            return Token(lookup_ident(word), word, start)

        # 2. Integer
        if is_digit(self.ch):
            return Token(TokenKind.INT, self.read_number(), start)

        # 3. Two-character operators
        pair = two_char_tokens.get(self.ch)
        if pair is not None and self.peek_char() == pair[0]:
            first = self.ch
            self.read_char()
            self.read_char()
            return Token(pair[1], first + pair[0], start)

        # 4. Single-character operators and delimiters, or ILLEGAL
        ch = self.ch
        kind = single_char_tokens.get(ch, TokenKind.ILLEGAL)
        self.read_char()
        return Token(kind, ch, start)


def new_scanner(source: str) -> Lexer:
    return Lexer(source)


def tokenize(source: str) -> list[Token]:
    """Scans ``source`` to completion.

    Returns:
        list[Token]: Every token in order, ending with a single EOF token.
    """
    lexer = Lexer(source)
    tokens = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.kind == TokenKind.EOF:
            break
    return tokens


__all__ = ["Lexer", "new_scanner", "tokenize"]
