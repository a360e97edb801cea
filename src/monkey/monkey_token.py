"""
Token model for the Monkey programming language.

Classes:
    TokenKind: Closed enumeration of every token category the lexer can produce.
    Token: Immutable value pairing a TokenKind with its literal source text.

Functions:
    lookup_ident(text): Classifies a scanned word as a keyword or an identifier.

The enum values double as the display names used in parser diagnostics, e.g.
``expected next token to be =, got IDENT instead``.
"""

from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # Identifiers + literals
    IDENT = "IDENT"
    INT = "INT"

    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    LT = "<"
    GT = ">"
    EQ = "=="
    NOT_EQ = "!="

    # Delimiters
    COMMA = ","
    SEMICOLON = ";"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"

    # Keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    TRUE = "TRUE"
    FALSE = "FALSE"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"

    def __str__(self) -> str:
        return self.value


keywords: dict[str, TokenKind] = {
    "function": TokenKind.FUNCTION,
    "let": TokenKind.LET,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "return": TokenKind.RETURN,
}


def lookup_ident(text: str) -> TokenKind:
    """Returns the keyword kind for ``text``, or IDENT when it is not reserved."""
    return keywords.get(text, TokenKind.IDENT)


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical token in the Monkey language.

    Attributes:
        kind (TokenKind): The token category.
        text (str): The literal source text (empty for EOF).
        position (int): 0-based offset of the first character in the input.
    """

    kind: TokenKind
    text: str
    position: int = 0

    def __repr__(self) -> str:
        """Returns a concise summary of the token's kind and text.

        Returns:
            str: e.g. ``Token(IDENT, foobar)``.
        """
        return f"Token({self.kind.name}, {self.text})"


__all__ = ["Token", "TokenKind", "keywords", "lookup_ident"]
