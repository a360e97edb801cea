"""
Defines the abstract syntax tree (AST) node structure for the Monkey programming language.

Classes:
    Node:
        Base of every AST node. Exposes `token_literal()`, `render()` and `to_dict()`.

    Statement, Expression:
        Marker bases for the two capability sets. Statements produce no value,
        expressions do.

    Program, LetStatement, ReturnStatement, ExpressionStatement, BlockStatement:
        Statement-level nodes. `Program` is the single root of every tree.

    Identifier, IntegerLiteral, Boolean, PrefixExpression, InfixExpression,
    IfExpression, FunctionLiteral, CallExpression:
        Expression-level nodes.

    NodeDict:
        TypedDict representation used when serializing nodes to plain dictionaries,
        suitable for JSON output or debugging.

Every node is a frozen dataclass built once, bottom-up, with all of its children.
`render()` returns canonical source text: prefix and infix expressions are fully
parenthesized, so rendering a tree and parsing the result yields a tree that
renders identically.

Example:
    >>> five = IntegerLiteral(Token(TokenKind.INT, "5"), 5)
    >>> ExpressionStatement(five.token, PrefixExpression(Token(TokenKind.BANG, "!"), "!", five)).render()
    '(!5)'
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, TypedDict

from monkey.monkey_token import Token


class NodeDict(TypedDict, total=False):
    """
    TypedDict representation of a Node used for serialization.

    Fields:
        kind (str): The node class name (e.g., "LetStatement", "InfixExpression").
        token (str): Literal text of the node's originating token.
        value (Any): Leaf value (identifier name, integer, boolean) or bound expression.
        operator (str): Operator symbol for prefix/infix expressions.
        name, left, right, condition, function, body, ...: Nested child nodes.
        statements (list[NodeDict]): Child statements of programs and blocks.
    """

    kind: str
    token: str
    value: Any
    operator: str
    name: "NodeDict"
    left: "NodeDict"
    right: "NodeDict"
    return_value: "NodeDict | None"
    expression: "NodeDict"
    condition: "NodeDict"
    consequence: "NodeDict"
    alternative: "NodeDict | None"
    parameters: list["NodeDict"]
    body: "NodeDict"
    function: "NodeDict"
    arguments: list["NodeDict"]
    statements: list["NodeDict"]


class Node(ABC):
    """Base class for all Monkey AST nodes."""

    @abstractmethod
    def token_literal(self) -> str:
        """Returns the literal text of the token this node started at."""

    @abstractmethod
    def render(self) -> str:
        """Returns the canonical source text for this node."""

    @abstractmethod
    def to_dict(self) -> NodeDict:
        """Converts the node (and all descendants) into a nested dictionary."""

    def __str__(self) -> str:
        return self.render()


class Statement(Node):
    pass


class Expression(Node):
    pass


def join_statements(statements: tuple[Statement, ...]) -> str:
    """Concatenates rendered statements.

    An expression statement followed by another statement gets a `;` so the
    boundary survives re-parsing.
    """
    parts = []
    for i, stmt in enumerate(statements):
        text = stmt.render()
        if isinstance(stmt, ExpressionStatement) and i < len(statements) - 1:
            text += ";"
        parts.append(text)
    return "".join(parts)


def render_chain(node: "InfixExpression | CallExpression") -> str:
    """Renders an infix/call chain by walking its left spine in a loop.

    Left-associative chains such as `a + b + c + ...` or `f()()()` nest on the
    left, so their depth grows with the source length.
    """
    spine: list[InfixExpression | CallExpression] = []
    base: Expression = node
    while isinstance(base, (InfixExpression, CallExpression)):
        spine.append(base)
        base = base.left if isinstance(base, InfixExpression) else base.function

    text = base.render()
    for link in reversed(spine):
        if isinstance(link, InfixExpression):
            text = f"({text} {link.operator} {link.right.render()})"
        else:
            args = ", ".join(a.render() for a in link.arguments)
            text = f"{text}({args})"
    return text


@dataclass(frozen=True, slots=True)
class Program(Node):
    """Root node: the ordered top-level statements of one parse unit."""

    statements: tuple[Statement, ...] = ()

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def render(self) -> str:
        return join_statements(self.statements)

    def to_dict(self) -> NodeDict:
        return {
            "kind": "Program",
            "statements": [s.to_dict() for s in self.statements],
        }


@dataclass(frozen=True, slots=True)
class Identifier(Expression):
    token: Token
    value: str

    def token_literal(self) -> str:
        return self.token.text

    def render(self) -> str:
        return self.value

    def to_dict(self) -> NodeDict:
        return {"kind": "Identifier", "token": self.token.text, "value": self.value}


@dataclass(frozen=True, slots=True)
class LetStatement(Statement):
    """`let <name> = <value>;`"""

    token: Token
    name: Identifier
    value: Expression

    def token_literal(self) -> str:
        return self.token.text

    def render(self) -> str:
        return f"{self.token_literal()} {self.name.render()} = {self.value.render()};"

    def to_dict(self) -> NodeDict:
        return {
            "kind": "LetStatement",
            "token": self.token.text,
            "name": self.name.to_dict(),
            "value": self.value.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class ReturnStatement(Statement):
    """`return <value>;` with an optional value."""

    token: Token
    return_value: Expression | None = None

    def token_literal(self) -> str:
        return self.token.text

    def render(self) -> str:
        if self.return_value is None:
            return f"{self.token_literal()};"
        return f"{self.token_literal()} {self.return_value.render()};"

    def to_dict(self) -> NodeDict:
        return {
            "kind": "ReturnStatement",
            "token": self.token.text,
            "return_value": (
                self.return_value.to_dict() if self.return_value is not None else None
            ),
        }


@dataclass(frozen=True, slots=True)
class ExpressionStatement(Statement):
    """A bare expression used as a statement."""

    token: Token
    expression: Expression

    def token_literal(self) -> str:
        return self.token.text

    def render(self) -> str:
        return self.expression.render()

    def to_dict(self) -> NodeDict:
        return {
            "kind": "ExpressionStatement",
            "token": self.token.text,
            "expression": self.expression.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class BlockStatement(Statement):
    token: Token
    statements: tuple[Statement, ...] = ()

    def token_literal(self) -> str:
        return self.token.text

    def render(self) -> str:
        if not self.statements:
            return "{ }"
        return f"{{ {join_statements(self.statements)} }}"

    def to_dict(self) -> NodeDict:
        return {
            "kind": "BlockStatement",
            "token": self.token.text,
            "statements": [s.to_dict() for s in self.statements],
        }


@dataclass(frozen=True, slots=True)
class IntegerLiteral(Expression):
    token: Token
    value: int

    def token_literal(self) -> str:
        return self.token.text

    def render(self) -> str:
        return self.token.text

    def to_dict(self) -> NodeDict:
        return {"kind": "IntegerLiteral", "token": self.token.text, "value": self.value}


@dataclass(frozen=True, slots=True)
class Boolean(Expression):
    token: Token
    value: bool

    def token_literal(self) -> str:
        return self.token.text

    def render(self) -> str:
        return self.token.text

    def to_dict(self) -> NodeDict:
        return {"kind": "Boolean", "token": self.token.text, "value": self.value}


@dataclass(frozen=True, slots=True)
class PrefixExpression(Expression):
    """Unary operator applied to one operand, e.g. `-x` or `!ok`."""

    token: Token
    operator: str
    right: Expression

    def token_literal(self) -> str:
        return self.token.text

    def render(self) -> str:
        return f"({self.operator}{self.right.render()})"

    def to_dict(self) -> NodeDict:
        return {
            "kind": "PrefixExpression",
            "token": self.token.text,
            "operator": self.operator,
            "right": self.right.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class InfixExpression(Expression):
    """Binary operator with left and right operands."""

    token: Token
    left: Expression
    operator: str
    right: Expression

    def token_literal(self) -> str:
        return self.token.text

    def render(self) -> str:
        return render_chain(self)

    def to_dict(self) -> NodeDict:
        return {
            "kind": "InfixExpression",
            "token": self.token.text,
            "left": self.left.to_dict(),
            "operator": self.operator,
            "right": self.right.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class IfExpression(Expression):
    token: Token
    condition: Expression
    consequence: BlockStatement
    alternative: BlockStatement | None = None

    def token_literal(self) -> str:
        return self.token.text

    def render(self) -> str:
        text = f"if ({self.condition.render()}) {self.consequence.render()}"
        if self.alternative is not None:
            text += f" else {self.alternative.render()}"
        return text

    def to_dict(self) -> NodeDict:
        return {
            "kind": "IfExpression",
            "token": self.token.text,
            "condition": self.condition.to_dict(),
            "consequence": self.consequence.to_dict(),
            "alternative": (
                self.alternative.to_dict() if self.alternative is not None else None
            ),
        }


@dataclass(frozen=True, slots=True)
class FunctionLiteral(Expression):
    token: Token
    parameters: tuple[Identifier, ...]
    body: BlockStatement

    def token_literal(self) -> str:
        return self.token.text

    def render(self) -> str:
        params = ", ".join(p.render() for p in self.parameters)
        return f"{self.token_literal()}({params}) {self.body.render()}"

    def to_dict(self) -> NodeDict:
        return {
            "kind": "FunctionLiteral",
            "token": self.token.text,
            "parameters": [p.to_dict() for p in self.parameters],
            "body": self.body.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class CallExpression(Expression):
    token: Token  # the '(' token
    function: Expression
    arguments: tuple[Expression, ...] = ()

    def token_literal(self) -> str:
        return self.token.text

    def render(self) -> str:
        return render_chain(self)

    def to_dict(self) -> NodeDict:
        return {
            "kind": "CallExpression",
            "token": self.token.text,
            "function": self.function.to_dict(),
            "arguments": [a.to_dict() for a in self.arguments],
        }


__all__ = [
    "Boolean",
    "BlockStatement",
    "CallExpression",
    "Expression",
    "ExpressionStatement",
    "FunctionLiteral",
    "Identifier",
    "IfExpression",
    "InfixExpression",
    "IntegerLiteral",
    "LetStatement",
    "Node",
    "NodeDict",
    "PrefixExpression",
    "Program",
    "ReturnStatement",
    "Statement",
]
