"""
Monkey Language Parser

Parses the Monkey token stream into an abstract syntax tree rooted at `Program`.

Statements are parsed by recursive descent; expressions by precedence climbing
("Pratt" parsing): every operator has a binding strength, and
`parse_expression(precedence)` keeps folding infix operators into the left-hand
side for as long as the upcoming operator binds tighter than `precedence`.

Supported Constructs
--------------------
- Statements:
    * `let <ident> = <expr>;`
    * `return [<expr>];`
    * bare expression statements with an optional trailing `;`
- Expressions:
    * identifiers, integer literals, `true` / `false`
    * prefix `!` and `-`
    * infix `+ - * / < > == !=`
    * grouping with `( ... )`
    * `if (<cond>) { ... } else { ... }`
    * `function(<params>) { ... }` and calls `<expr>(<args>)`

Parser Behavior
---------------
- Pulls tokens on demand from the lexer, holding exactly two: `cur_token` and
  `peek_token`.
- Never raises on malformed source. Problems are appended to an ordered list of
  human-readable diagnostics and parsing continues with the next statement.
- `parse_program()` always returns a `Program`, possibly with no statements.

Entry Points
------------
- `Parser(lexer).parse_program()`: Parse a full program.
- `Parser.diagnostics()`: Diagnostics accumulated so far.
- `parse(source)`: Convenience wrapper returning `(program, diagnostics)`.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Protocol

from monkey.monkey_ast import (
    BlockStatement,
    Boolean,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
)
from monkey.monkey_lexer import Lexer
from monkey.monkey_token import Token, TokenKind

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# Deepest chain of nested expressions (prefix operators, groups, if/function
# bodies, call arguments) before the statement is abandoned.
MAX_NESTING = 100


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2  # ==
    LESSGREATER = 3  # > or <
    SUM = 4  # +
    PRODUCT = 5  # *
    PREFIX = 6  # -X or !X
    CALL = 7  # myFunction(X)


precedences: dict[TokenKind, Precedence] = {
    TokenKind.EQ: Precedence.EQUALS,
    TokenKind.NOT_EQ: Precedence.EQUALS,
    TokenKind.LT: Precedence.LESSGREATER,
    TokenKind.GT: Precedence.LESSGREATER,
    TokenKind.PLUS: Precedence.SUM,
    TokenKind.MINUS: Precedence.SUM,
    TokenKind.ASTERISK: Precedence.PRODUCT,
    TokenKind.SLASH: Precedence.PRODUCT,
    TokenKind.LPAREN: Precedence.CALL,
}


def precedence_of(kind: TokenKind) -> Precedence:
    """Returns the binding strength of ``kind`` as an infix operator."""
    return precedences.get(kind, Precedence.LOWEST)


class TokenSource(Protocol):  # pragma: no cover
    """Anything the parser can pull tokens from, normally a `Lexer`."""

    def next_token(self) -> Token: ...


class Parser:
    """
    Monkey Parser Class

    Attributes
    ----------
    lexer : TokenSource
        Token supplier, pulled one token at a time.
    cur_token : Token
        The token under examination.
    peek_token : Token
        The token after `cur_token`.
    errors : list[str]
        Accumulated diagnostics, in the order they were found.
    depth : int
        Number of `parse_expression` calls currently on the stack.
    """

    def __init__(self, lexer: TokenSource) -> None:
        self.lexer = lexer
        self.errors: list[str] = []
        self.depth = 0

        # Prime the two-token window.
        self.cur_token = lexer.next_token()
        self.peek_token = lexer.next_token()

    def diagnostics(self) -> list[str]:
        return list(self.errors)

    # ------------------------------------------------------------------
    # Token window
    # ------------------------------------------------------------------

    def next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, kind: TokenKind) -> bool:
        return self.cur_token.kind == kind

    def peek_token_is(self, kind: TokenKind) -> bool:
        return self.peek_token.kind == kind

    def expect_peek(self, kind: TokenKind) -> bool:
        """Advances if the next token is ``kind``; otherwise records a diagnostic.

        Returns:
            bool: True if the token was present and consumed.
        """
        if self.peek_token_is(kind):
            self.next_token()
            return True
        self.peek_error(kind)
        return False

    def peek_precedence(self) -> Precedence:
        return precedence_of(self.peek_token.kind)

    def cur_precedence(self) -> Precedence:
        return precedence_of(self.cur_token.kind)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def peek_error(self, kind: TokenKind) -> None:
        self.errors.append(
            f"expected next token to be {kind}, got {self.peek_token.kind} instead"
        )

    def no_prefix_parse_fn_error(self, kind: TokenKind) -> None:
        self.errors.append(f"no prefix parse function for {kind} found")

    def skip_to_terminator(self) -> None:
        """Drops tokens until the current one is `;` or EOF."""
        while not self.cur_token_is(TokenKind.SEMICOLON) and not self.cur_token_is(
            TokenKind.EOF
        ):
            self.next_token()

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def parse_program(self) -> Program:
        """Parse every statement up to EOF into a `Program`."""
        statements: list[Statement] = []
        while not self.cur_token_is(TokenKind.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()
        return Program(tuple(statements))

    def parse_statement(self) -> Statement | None:
        match self.cur_token.kind:
            case TokenKind.LET:
                return self.parse_let_statement()
            case TokenKind.RETURN:
                return self.parse_return_statement()
            case _:
                return self.parse_expression_statement()

    def parse_let_statement(self) -> LetStatement | None:
        """Parse `let <ident> = <expr>;`, skipping to `;` on failure."""
        let_tok = self.cur_token

        if not self.expect_peek(TokenKind.IDENT):
            self.skip_to_terminator()
            return None
        name = Identifier(self.cur_token, self.cur_token.text)

        if not self.expect_peek(TokenKind.ASSIGN):
            self.skip_to_terminator()
            return None

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None or not self.expect_peek(TokenKind.SEMICOLON):
            self.skip_to_terminator()
            return None

        return LetStatement(let_tok, name, value)

    def parse_return_statement(self) -> ReturnStatement | None:
        """Parse `return [<expr>];`, skipping to `;` on failure."""
        return_tok = self.cur_token

        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()
            return ReturnStatement(return_tok, None)

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None or not self.expect_peek(TokenKind.SEMICOLON):
            self.skip_to_terminator()
            return None

        return ReturnStatement(return_tok, value)

    def parse_expression_statement(self) -> ExpressionStatement | None:
        first_tok = self.cur_token
        expression = self.parse_expression(Precedence.LOWEST)

        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()

        if expression is None:
            return None
        return ExpressionStatement(first_tok, expression)

    def parse_block_statement(self) -> BlockStatement:
        """Parse statements between `{` (current token) and `}` or EOF."""
        brace_tok = self.cur_token
        statements: list[Statement] = []
        self.next_token()

        while not self.cur_token_is(TokenKind.RBRACE) and not self.cur_token_is(
            TokenKind.EOF
        ):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()

        return BlockStatement(brace_tok, tuple(statements))

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expression(self, precedence: Precedence) -> Expression | None:
        """Parse an expression whose operators all bind tighter than ``precedence``.

        Past MAX_NESTING levels a diagnostic is recorded and the rest of the
        statement is skipped.
        """
        if self.depth >= MAX_NESTING:
            self.errors.append("expression nested too deeply")
            self.skip_to_terminator()
            return None

        self.depth += 1
        try:
            left = self.parse_prefix()
            if left is None:
                return None

            while (
                not self.peek_token_is(TokenKind.SEMICOLON)
                and precedence < self.peek_precedence()
            ):
                self.next_token()
                left = self.parse_infix(left)
                if left is None:
                    return None

            return left
        finally:
            self.depth -= 1

    def parse_prefix(self) -> Expression | None:
        match self.cur_token.kind:
            case TokenKind.IDENT:
                return self.parse_identifier()
            case TokenKind.INT:
                return self.parse_integer_literal()
            case TokenKind.TRUE | TokenKind.FALSE:
                return self.parse_boolean()
            case TokenKind.BANG | TokenKind.MINUS:
                return self.parse_prefix_expression()
            case TokenKind.LPAREN:
                return self.parse_grouped_expression()
            case TokenKind.IF:
                return self.parse_if_expression()
            case TokenKind.FUNCTION:
                return self.parse_function_literal()
            case _:
                self.no_prefix_parse_fn_error(self.cur_token.kind)
                return None

    def parse_infix(self, left: Expression) -> Expression | None:
        # Only kinds in `precedences` get here; all but `(` are binary operators.
        if self.cur_token_is(TokenKind.LPAREN):
            return self.parse_call_expression(left)
        return self.parse_infix_expression(left)

    def parse_identifier(self) -> Identifier:
        return Identifier(self.cur_token, self.cur_token.text)

    def parse_integer_literal(self) -> IntegerLiteral | None:
        tok = self.cur_token
        try:
            value = int(tok.text, 10)
        except ValueError:
            value = None
        if value is None or not INT64_MIN <= value <= INT64_MAX:
            self.errors.append(f'could not parse "{tok.text}" as integer')
            return None
        return IntegerLiteral(tok, value)

    def parse_boolean(self) -> Boolean:
        return Boolean(self.cur_token, self.cur_token_is(TokenKind.TRUE))

    def parse_prefix_expression(self) -> PrefixExpression | None:
        op_tok = self.cur_token
        self.next_token()
        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return PrefixExpression(op_tok, op_tok.text, right)

    def parse_infix_expression(self, left: Expression) -> InfixExpression | None:
        op_tok = self.cur_token
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(op_tok, left, op_tok.text, right)

    def parse_grouped_expression(self) -> Expression | None:
        self.next_token()
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None or not self.expect_peek(TokenKind.RPAREN):
            return None
        return expression

    def parse_if_expression(self) -> IfExpression | None:
        """Parse `if (<cond>) { ... }` with an optional `else { ... }`."""
        if_tok = self.cur_token

        if not self.expect_peek(TokenKind.LPAREN):
            return None
        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None or not self.expect_peek(TokenKind.RPAREN):
            return None

        if not self.expect_peek(TokenKind.LBRACE):
            return None
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_token_is(TokenKind.ELSE):
            self.next_token()
            if not self.expect_peek(TokenKind.LBRACE):
                return None
            alternative = self.parse_block_statement()

        return IfExpression(if_tok, condition, consequence, alternative)

    def parse_function_literal(self) -> FunctionLiteral | None:
        fn_tok = self.cur_token

        if not self.expect_peek(TokenKind.LPAREN):
            return None
        parameters = self.parse_function_parameters()
        if parameters is None:
            return None

        if not self.expect_peek(TokenKind.LBRACE):
            return None
        body = self.parse_block_statement()

        return FunctionLiteral(fn_tok, parameters, body)

    def parse_function_parameters(self) -> tuple[Identifier, ...] | None:
        """Parse `<ident>, <ident>, ... )` after the opening `(`."""
        if self.peek_token_is(TokenKind.RPAREN):
            self.next_token()
            return ()

        if not self.expect_peek(TokenKind.IDENT):
            return None
        params = [self.parse_identifier()]

        while self.peek_token_is(TokenKind.COMMA):
            self.next_token()
            if not self.expect_peek(TokenKind.IDENT):
                return None
            params.append(self.parse_identifier())

        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return tuple(params)

    def parse_call_expression(self, function: Expression) -> CallExpression | None:
        paren_tok = self.cur_token
        arguments = self.parse_expression_list(TokenKind.RPAREN)
        if arguments is None:
            return None
        return CallExpression(paren_tok, function, arguments)

    def parse_expression_list(self, end: TokenKind) -> tuple[Expression, ...] | None:
        if self.peek_token_is(end):
            self.next_token()
            return ()

        self.next_token()
        first = self.parse_expression(Precedence.LOWEST)
        if first is None:
            return None
        items = [first]

        while self.peek_token_is(TokenKind.COMMA):
            self.next_token()
            self.next_token()
            item = self.parse_expression(Precedence.LOWEST)
            if item is None:
                return None
            items.append(item)

        if not self.expect_peek(end):
            return None
        return tuple(items)


def new_parser(lexer: TokenSource) -> Parser:
    return Parser(lexer)


def parse(source: str) -> tuple[Program, list[str]]:
    """Lex and parse ``source`` in one step.

    Returns:
        tuple[Program, list[str]]: The tree and its diagnostics (empty on success).
    """
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.diagnostics()


__all__ = [
    "Parser",
    "Precedence",
    "TokenSource",
    "new_parser",
    "parse",
    "precedence_of",
    "precedences",
]
