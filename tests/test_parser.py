from collections.abc import Callable

import pytest
from hypothesis import given
from hypothesis import strategies as st

from monkey.monkey_ast import (
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
)
from monkey.monkey_lexer import new_scanner
from monkey.monkey_parser import (
    MAX_NESTING,
    Parser,
    Precedence,
    new_parser,
    parse,
    precedence_of,
)
from monkey.monkey_token import Token, TokenKind

ParseOk = Callable[[str], Program]


class ListTokens:
    """Feeds a fixed token list to the parser, then EOF forever."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = iter(tokens)

    def next_token(self) -> Token:
        return next(self.tokens, Token(TokenKind.EOF, ""))


def single_expression(program: Program) -> Expression:
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


def test_let_statements(parse_ok: ParseOk) -> None:
    program = parse_ok(
        """
        let x = 5;
        let y = 10;
        let foobar = 838383;
        """
    )
    assert len(program.statements) == 3
    for stmt, name in zip(program.statements, ["x", "y", "foobar"]):
        assert isinstance(stmt, LetStatement)
        assert stmt.token_literal() == "let"
        assert stmt.name.value == name
        assert stmt.name.token_literal() == name


@pytest.mark.parametrize(
    "source,name,rendered",
    [
        ("let x = 5;", "x", "let x = 5;"),
        ("let y = true;", "y", "let y = true;"),
        ("let foobar = y;", "foobar", "let foobar = y;"),
        ("let z = -a * b;", "z", "let z = ((-a) * b);"),
    ],
)
def test_let_statement_values(parse_ok: ParseOk, source: str, name: str, rendered: str) -> None:
    program = parse_ok(source)
    stmt = program.statements[0]
    assert isinstance(stmt, LetStatement)
    assert stmt.name.value == name
    assert program.render() == rendered


def test_return_statements(parse_ok: ParseOk) -> None:
    program = parse_ok("return 5; return 10; return 993322;")
    assert len(program.statements) == 3
    for stmt, value in zip(program.statements, [5, 10, 993322]):
        assert isinstance(stmt, ReturnStatement)
        assert stmt.token_literal() == "return"
        assert isinstance(stmt.return_value, IntegerLiteral)
        assert stmt.return_value.value == value


def test_bare_return(parse_ok: ParseOk) -> None:
    program = parse_ok("return;")
    stmt = program.statements[0]
    assert isinstance(stmt, ReturnStatement)
    assert stmt.return_value is None
    assert program.render() == "return;"


def test_identifier_expression(parse_ok: ParseOk) -> None:
    expr = single_expression(parse_ok("foobar;"))
    assert isinstance(expr, Identifier)
    assert expr.value == "foobar"
    assert expr.token_literal() == "foobar"


def test_integer_literal_expression(parse_ok: ParseOk) -> None:
    expr = single_expression(parse_ok("5;"))
    assert isinstance(expr, IntegerLiteral)
    assert expr.value == 5
    assert expr.token_literal() == "5"


@pytest.mark.parametrize("source,value", [("true;", True), ("false;", False)])
def test_boolean_expression(parse_ok: ParseOk, source: str, value: bool) -> None:
    expr = single_expression(parse_ok(source))
    assert isinstance(expr, Boolean)
    assert expr.value is value


@pytest.mark.parametrize(
    "source,operator,value,rendered",
    [
        ("!5;", "!", 5, "(!5)"),
        ("-15;", "-", 15, "(-15)"),
    ],
)
def test_prefix_expressions(parse_ok: ParseOk, source: str, operator: str, value: int, rendered: str) -> None:
    program = parse_ok(source)
    expr = single_expression(program)
    assert isinstance(expr, PrefixExpression)
    assert expr.operator == operator
    assert isinstance(expr.right, IntegerLiteral)
    assert expr.right.value == value
    assert program.render() == rendered


@pytest.mark.parametrize("operator", ["+", "-", "*", "/", ">", "<", "==", "!="])
def test_infix_expressions(parse_ok: ParseOk, operator: str) -> None:
    expr = single_expression(parse_ok(f"5 {operator} 6;"))
    assert isinstance(expr, InfixExpression)
    assert expr.operator == operator
    assert isinstance(expr.left, IntegerLiteral) and expr.left.value == 5
    assert isinstance(expr.right, IntegerLiteral) and expr.right.value == 6


def test_product_binds_tighter_than_sum(parse_ok: ParseOk) -> None:
    expr = single_expression(parse_ok("5 + 4 * 2;"))
    assert isinstance(expr, InfixExpression)
    assert expr.operator == "+"
    assert isinstance(expr.right, InfixExpression)
    assert expr.right.operator == "*"

    expr = single_expression(parse_ok("5 * 4 + 2;"))
    assert isinstance(expr, InfixExpression)
    assert expr.operator == "+"
    assert isinstance(expr.left, InfixExpression)
    assert expr.left.operator == "*"


@pytest.mark.parametrize(
    "source,expected",
    [
        ("-a*b", "((-a) * b)"),
        ("-a", "(-a)"),
        ("!-a", "(!(-a))"),
        ("-3278*vd+89*dv", "(((-3278) * vd) + (89 * dv))"),
        ("5<4!=3>4", "((5 < 4) != (3 > 4))"),
        ("5 > 4 == 3 < 4", "((5 > 4) == (3 < 4))"),
        ("a + b + c", "((a + b) + c)"),
        ("a + b - c", "((a + b) - c)"),
        ("a * b * c", "((a * b) * c)"),
        ("a * b / c", "((a * b) / c)"),
        ("a + b / c", "(a + (b / c))"),
        ("a + b * c", "(a + (b * c))"),
        ("a * b + c", "((a * b) + c)"),
        ("a + b * c + d / e - f", "(((a + (b * c)) + (d / e)) - f)"),
        ("3 + 4; -5 * 5", "(3 + 4);((-5) * 5)"),
        ("3 + 4 * 5 == 3 * 1 + 4 * 5", "((3 + (4 * 5)) == ((3 * 1) + (4 * 5)))"),
        ("true", "true"),
        ("3 > 5 == false", "((3 > 5) == false)"),
        ("!(true == true)", "(!(true == true))"),
        ("1 + (2 + 3) + 4", "((1 + (2 + 3)) + 4)"),
        ("(5 + 5) * 2", "((5 + 5) * 2)"),
        ("-(5 + 5)", "(-(5 + 5))"),
        ("a + add(b * c) + d", "((a + add((b * c))) + d)"),
        ("add(a, b, 1, 2 * 3, 4 + 5, add(6, 7 * 8))", "add(a, b, 1, (2 * 3), (4 + 5), add(6, (7 * 8)))"),
        ("add(a + b + c * d / f + g)", "add((((a + b) + ((c * d) / f)) + g))"),
    ],
)
def test_operator_precedence_parsing(parse_ok: ParseOk, source: str, expected: str) -> None:
    assert parse_ok(source).render() == expected


def test_precedence_table_is_strictly_ordered() -> None:
    assert (
        Precedence.LOWEST
        < precedence_of(TokenKind.EQ)
        < precedence_of(TokenKind.LT)
        < precedence_of(TokenKind.PLUS)
        < precedence_of(TokenKind.ASTERISK)
        < Precedence.PREFIX
        < precedence_of(TokenKind.LPAREN)
    )
    assert precedence_of(TokenKind.ASTERISK) == precedence_of(TokenKind.SLASH)
    assert precedence_of(TokenKind.SEMICOLON) == Precedence.LOWEST


def test_if_expression(parse_ok: ParseOk) -> None:
    expr = single_expression(parse_ok("if (x < y) { x }"))
    assert isinstance(expr, IfExpression)
    assert expr.condition.render() == "(x < y)"
    assert len(expr.consequence.statements) == 1
    assert expr.alternative is None


def test_if_else_expression(parse_ok: ParseOk) -> None:
    program = parse_ok("if (x < y) { x } else { let z = y; z }")
    expr = single_expression(program)
    assert isinstance(expr, IfExpression)
    assert expr.alternative is not None
    assert len(expr.alternative.statements) == 2
    assert program.render() == "if ((x < y)) { x } else { let z = y;z }"


def test_function_literal(parse_ok: ParseOk) -> None:
    expr = single_expression(parse_ok("function(x, y) { x + y; }"))
    assert isinstance(expr, FunctionLiteral)
    assert [p.value for p in expr.parameters] == ["x", "y"]
    assert expr.body.render() == "{ (x + y) }"


@pytest.mark.parametrize(
    "source,params",
    [
        ("function() {};", []),
        ("function(x) {};", ["x"]),
        ("function(x, y, z) {};", ["x", "y", "z"]),
    ],
)
def test_function_parameters(parse_ok: ParseOk, source: str, params: list[str]) -> None:
    expr = single_expression(parse_ok(source))
    assert isinstance(expr, FunctionLiteral)
    assert [p.value for p in expr.parameters] == params


def test_call_expression(parse_ok: ParseOk) -> None:
    expr = single_expression(parse_ok("add(1, 2 * 3, 4 + 5);"))
    assert isinstance(expr, CallExpression)
    assert expr.function.render() == "add"
    assert [a.render() for a in expr.arguments] == ["1", "(2 * 3)", "(4 + 5)"]


@given(st.text(alphabet=" \t\r\n"))
def test_whitespace_only_is_empty_program(source: str) -> None:
    program, diagnostics = parse(source)
    assert program.statements == ()
    assert diagnostics == []


# Diagnostics and recovery


def test_let_without_identifier_recovers() -> None:
    program, diagnostics = parse("let = 5; let y = 10;")
    assert diagnostics == ["expected next token to be IDENT, got = instead"]
    assert program.render() == "let y = 10;"


@pytest.mark.parametrize(
    "source,expected",
    [
        ("let x 5;", ["expected next token to be =, got INT instead"]),
        ("let 838383;", ["expected next token to be IDENT, got INT instead"]),
        ("let x = 5 6; x", ["expected next token to be ;, got INT instead"]),
        ("let x = 5", ["expected next token to be ;, got EOF instead"]),
        ("let x = ;", ["no prefix parse function for ; found"]),
        ("return 5", ["expected next token to be ;, got EOF instead"]),
    ],
)
def test_statement_diagnostics(source: str, expected: list[str]) -> None:
    _, diagnostics = parse(source)
    assert diagnostics == expected


def test_failed_statement_is_dropped_and_parsing_continues() -> None:
    program, diagnostics = parse("let x 5; foo; let = 1; return bar;")
    assert len(diagnostics) == 2
    assert [type(s) for s in program.statements] == [ExpressionStatement, ReturnStatement]
    assert program.render() == "foo;return bar;"


def test_missing_prefix_function() -> None:
    program, diagnostics = parse("}")
    assert diagnostics == ["no prefix parse function for } found"]
    assert program.statements == ()


def test_illegal_token_surfaces_as_missing_prefix() -> None:
    _, diagnostics = parse("a; @; b;")
    assert diagnostics == ["no prefix parse function for ILLEGAL found"]


def test_missing_operand_yields_no_node() -> None:
    program, diagnostics = parse("5 + ;")
    assert diagnostics == ["no prefix parse function for ; found"]
    assert program.statements == ()


def test_unclosed_group() -> None:
    _, diagnostics = parse("(1 + 2")
    assert diagnostics == ["expected next token to be ), got EOF instead"]


def test_integer_overflow() -> None:
    program, diagnostics = parse("9223372036854775808;")
    assert diagnostics == ['could not parse "9223372036854775808" as integer']
    assert program.statements == ()

    program, diagnostics = parse("9223372036854775807;")
    assert diagnostics == []
    expr = single_expression(program)
    assert isinstance(expr, IntegerLiteral)
    assert expr.value == 2**63 - 1


def test_non_numeric_integer_token() -> None:
    parser = Parser(ListTokens([Token(TokenKind.INT, "12a")]))
    program = parser.parse_program()
    assert parser.diagnostics() == ['could not parse "12a" as integer']
    assert program.statements == ()


def test_parser_pulls_from_token_source() -> None:
    tokens = [
        Token(TokenKind.IDENT, "a"),
        Token(TokenKind.PLUS, "+"),
        Token(TokenKind.IDENT, "b"),
    ]
    parser = Parser(ListTokens(tokens))
    assert parser.cur_token == tokens[0]
    assert parser.peek_token == tokens[1]
    assert parser.parse_program().render() == "(a + b)"


def test_unterminated_let_at_eof_terminates() -> None:
    parser = new_parser(new_scanner("let x = 1 + 2"))
    program = parser.parse_program()
    assert program.statements == ()
    assert parser.diagnostics() == ["expected next token to be ;, got EOF instead"]


def test_diagnostics_is_a_copy() -> None:
    parser = new_parser(new_scanner("let;"))
    parser.parse_program()
    diagnostics = parser.diagnostics()
    diagnostics.clear()
    assert parser.diagnostics() != []


# Nesting depth


@pytest.mark.parametrize(
    "source",
    [
        "-" * 400 + "1; x;",
        "!" * 400 + "true; x;",
        "(" * 400 + "1" + ")" * 400 + "; x;",
        "f(" * 400 + "1" + ")" * 400 + "; x;",
    ],
)
def test_deep_nesting_is_a_diagnostic(source: str) -> None:
    program, diagnostics = parse(source)
    assert diagnostics == ["expression nested too deeply"]
    assert program.render() == "x"


def test_deep_nesting_in_blocks_is_a_diagnostic() -> None:
    source = "if (x) { " * 400 + "y" + " }" * 400
    _, diagnostics = parse(source)
    assert diagnostics == ["expression nested too deeply"]


def test_nesting_just_under_the_limit(parse_ok: ParseOk) -> None:
    depth = MAX_NESTING - 1
    program = parse_ok("-" * depth + "1")
    assert program.render() == "(-" * depth + "1" + ")" * depth

    _, diagnostics = parse("-" * MAX_NESTING + "1")
    assert diagnostics == ["expression nested too deeply"]


def test_nested_blocks_just_under_the_limit(parse_ok: ParseOk) -> None:
    depth = MAX_NESTING - 1
    program = parse_ok("if (x) { " * depth + "y" + " }" * depth)
    assert program.render() == "if (x) { " * depth + "y" + " }" * depth


def test_long_infix_chain(parse_ok: ParseOk) -> None:
    program = parse_ok("a" + " + a" * 2000 + ";")
    assert program.render() == "(" * 2000 + "a" + " + a)" * 2000


def test_long_call_chain(parse_ok: ParseOk) -> None:
    program = parse_ok("f" + "()" * 2000)
    assert program.render() == "f" + "()" * 2000


def test_mixed_chain(parse_ok: ParseOk) -> None:
    program = parse_ok("a" + " * f(b)" * 1000)
    assert program.render() == "(" * 1000 + "a" + " * f(b))" * 1000


@given(st.text())
def test_arbitrary_text_never_raises(source: str) -> None:
    program, diagnostics = parse(source)
    assert isinstance(program, Program)
    assert all(isinstance(msg, str) for msg in diagnostics)
    program.render()


@given(st.text(alphabet="ab1-!+*/<>=;(){},\n ", max_size=400))
def test_operator_soup_never_raises(source: str) -> None:
    program, _ = parse(source)
    program.render()
    program.to_dict()


# Round-trip stability

names = st.sampled_from(["a", "b", "foo", "bar_baz"])
ints = st.integers(min_value=0, max_value=2**63 - 1).map(str)
atoms = st.one_of(names, ints, st.sampled_from(["true", "false"]))
binary_ops = st.sampled_from(["+", "-", "*", "/", "<", ">", "==", "!="])


def extend(children: st.SearchStrategy[str]) -> st.SearchStrategy[str]:
    return st.one_of(
        st.tuples(st.sampled_from(["-", "!"]), children).map("".join),
        st.tuples(children, binary_ops, children).map(" ".join),
        children.map(lambda c: f"({c})"),
        st.tuples(names, st.lists(children, max_size=3)).map(
            lambda t: f"{t[0]}({', '.join(t[1])})"
        ),
    )


expressions = st.recursive(atoms, extend, max_leaves=12)

statements = st.one_of(
    expressions,
    st.tuples(names, expressions).map(lambda t: f"let {t[0]} = {t[1]};"),
    expressions.map(lambda e: f"return {e};"),
    st.just("return;"),
    expressions.map(lambda e: f"if ({e}) {{ {e} }} else {{ }}"),
    expressions.map(lambda e: f"function(a, b) {{ return {e}; }}"),
)


@given(st.lists(statements, max_size=4))
def test_render_is_stable_under_reparse(parts: list[str]) -> None:
    source = "\n".join(p if p.endswith(";") else p + ";" for p in parts)
    program, diagnostics = parse(source)
    assert diagnostics == []

    rendered = program.render()
    reparsed, diagnostics = parse(rendered)
    assert diagnostics == []
    assert reparsed.render() == rendered
    assert len(reparsed.statements) == len(program.statements)
