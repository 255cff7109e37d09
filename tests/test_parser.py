import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from monkey.monkey_ast import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
)
from monkey.monkey_lexer import Lexer
from monkey.monkey_parser import Parser, Precedence


def parse(source: str) -> Program:
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    assert parser.errors == [], f"unexpected parser errors: {parser.errors}"
    return program


def parse_errors(source: str) -> list[str]:
    parser = Parser(source)
    parser.parse_program()
    return parser.errors


def single_expression(source: str) -> Expression:
    program = parse(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


def infix(left: object, op: str, right: object) -> InfixExpression:
    def lit(v: object) -> Expression:
        if isinstance(v, Expression):
            return v
        if isinstance(v, bool):
            return BooleanLiteral(v)
        if isinstance(v, int):
            return IntegerLiteral(v)
        return Identifier(str(v))

    return InfixExpression(lit(left), op, lit(right))


@pytest.mark.parametrize(
    "source,name,value",
    [
        ("let x = 5;", "x", IntegerLiteral(5)),
        ("let y = true;", "y", BooleanLiteral(True)),
        ("let foobar = y", "foobar", Identifier("y")),
    ],
)  # type: ignore[misc]
def test_let_statements(source: str, name: str, value: Expression) -> None:
    program = parse(source)
    assert program.statements == (LetStatement(Identifier(name), value),)
    stmt = program.statements[0]
    assert stmt.token is not None and stmt.token.literal == "let"


@pytest.mark.parametrize(
    "source,value",
    [
        ("return 5;", IntegerLiteral(5)),
        ("return true;", BooleanLiteral(True)),
        ("return foobar", Identifier("foobar")),
    ],
)  # type: ignore[misc]
def test_return_statements(source: str, value: Expression) -> None:
    assert parse(source).statements == (ReturnStatement(value),)


def test_literal_expressions() -> None:
    assert single_expression("foobar;") == Identifier("foobar")
    assert single_expression("5;") == IntegerLiteral(5)
    assert single_expression("false") == BooleanLiteral(False)
    assert single_expression('"hello world";') == StringLiteral("hello world")


def test_largest_integer_literal() -> None:
    assert single_expression("9223372036854775807") == IntegerLiteral(2**63 - 1)


@pytest.mark.parametrize(
    "source,operator,right",
    [
        ("!5;", "!", IntegerLiteral(5)),
        ("-15;", "-", IntegerLiteral(15)),
        ("!true;", "!", BooleanLiteral(True)),
        ("-a", "-", Identifier("a")),
    ],
)  # type: ignore[misc]
def test_prefix_expressions(source: str, operator: str, right: Expression) -> None:
    assert single_expression(source) == PrefixExpression(operator, right)


@pytest.mark.parametrize(
    "source,left,operator,right",
    [
        ("5 + 5;", 5, "+", 5),
        ("5 - 5;", 5, "-", 5),
        ("5 * 5;", 5, "*", 5),
        ("5 / 5;", 5, "/", 5),
        ("5 > 5;", 5, ">", 5),
        ("5 < 5;", 5, "<", 5),
        ("5 == 5;", 5, "==", 5),
        ("5 != 5;", 5, "!=", 5),
        ("true == true", True, "==", True),
        ("true != false", True, "!=", False),
        ("a + b", "a", "+", "b"),
    ],
)  # type: ignore[misc]
def test_infix_expressions(source: str, left: object, operator: str, right: object) -> None:
    assert single_expression(source) == infix(left, operator, right)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("-a * b", "((-a) * b)"),
        ("!-a", "(!(-a))"),
        ("a + b + c", "((a + b) + c)"),
        ("a + b - c", "((a + b) - c)"),
        ("a * b * c", "((a * b) * c)"),
        ("a * b / c", "((a * b) / c)"),
        ("a + b / c", "(a + (b / c))"),
        ("a + b * c + d / e - f", "(((a + (b * c)) + (d / e)) - f)"),
        ("3 + 4; -5 * 5", "(3 + 4); ((-5) * 5)"),
        ("5 > 4 == 3 < 4", "((5 > 4) == (3 < 4))"),
        ("5 < 4 != 3 > 4", "((5 < 4) != (3 > 4))"),
        ("3 + 4 * 5 == 3 * 1 + 4 * 5", "((3 + (4 * 5)) == ((3 * 1) + (4 * 5)))"),
        ("true", "true"),
        ("3 > 5 == false", "((3 > 5) == false)"),
        ("3 < 5 == true", "((3 < 5) == true)"),
        ("1 + (2 + 3) + 4", "((1 + (2 + 3)) + 4)"),
        ("(5 + 5) * 2", "((5 + 5) * 2)"),
        ("2 / (5 + 5)", "(2 / (5 + 5))"),
        ("-(5 + 5)", "(-(5 + 5))"),
        ("!(true == true)", "(!(true == true))"),
        ("a + add(b * c) + d", "((a + add((b * c))) + d)"),
        (
            "add(a, b, 1, 2 * 3, 4 + 5, add(6, 7 * 8))",
            "add(a, b, 1, (2 * 3), (4 + 5), add(6, (7 * 8)))",
        ),
        ("add(a + b + c * d / f + g)", "add((((a + b) + ((c * d) / f)) + g))"),
        ("a * [1, 2, 3, 4][b * c] * d", "((a * ([1, 2, 3, 4][(b * c)])) * d)"),
        (
            "add(a * b[2], b[1], 2 * [1, 2][1])",
            "add((a * (b[2])), (b[1]), (2 * ([1, 2][1])))",
        ),
    ],
)  # type: ignore[misc]
def test_operator_precedence(source: str, expected: str) -> None:
    assert str(parse(source)) == expected


def test_precedence_scale_is_ordered() -> None:
    order = [
        Precedence.LOWEST,
        Precedence.EQUALS,
        Precedence.LESSGREATER,
        Precedence.SUM,
        Precedence.PRODUCT,
        Precedence.PREFIX,
        Precedence.CALL,
        Precedence.INDEX,
    ]
    assert order == sorted(order)


def test_if_expression() -> None:
    expr = single_expression("if (x < y) { x }")
    assert expr == IfExpression(
        infix("x", "<", "y"),
        BlockStatement((ExpressionStatement(Identifier("x")),)),
    )


def test_if_else_expression() -> None:
    expr = single_expression("if (x < y) { x } else { y }")
    assert isinstance(expr, IfExpression)
    assert expr.alternative == BlockStatement((ExpressionStatement(Identifier("y")),))


def test_block_stops_at_end_of_input() -> None:
    expr = single_expression("if (x) { x")
    assert isinstance(expr, IfExpression)
    assert expr.consequence.statements == (ExpressionStatement(Identifier("x")),)


def test_function_literal() -> None:
    expr = single_expression("fn(x, y) { x + y; }")
    assert expr == FunctionLiteral(
        (Identifier("x"), Identifier("y")),
        BlockStatement((ExpressionStatement(infix("x", "+", "y")),)),
    )


@pytest.mark.parametrize(
    "source,params",
    [
        ("fn() {};", []),
        ("fn(x) {};", ["x"]),
        ("fn(x, y, z) {};", ["x", "y", "z"]),
    ],
)  # type: ignore[misc]
def test_function_parameters(source: str, params: list[str]) -> None:
    expr = single_expression(source)
    assert isinstance(expr, FunctionLiteral)
    assert [p.value for p in expr.parameters] == params


def test_call_expression() -> None:
    expr = single_expression("add(1, 2 * 3, 4 + 5);")
    assert expr == CallExpression(
        Identifier("add"),
        (IntegerLiteral(1), infix(2, "*", 3), infix(4, "+", 5)),
    )


def test_call_on_function_literal() -> None:
    expr = single_expression("fn(x) { x; }(5)")
    assert isinstance(expr, CallExpression)
    assert isinstance(expr.function, FunctionLiteral)
    assert expr.arguments == (IntegerLiteral(5),)


def test_array_literal() -> None:
    expr = single_expression("[1, 2 * 2, 3 + 3]")
    assert expr == ArrayLiteral((IntegerLiteral(1), infix(2, "*", 2), infix(3, "+", 3)))
    assert single_expression("[]") == ArrayLiteral(())


def test_index_expression() -> None:
    expr = single_expression("myArray[1 + 1]")
    assert expr == IndexExpression(Identifier("myArray"), infix(1, "+", 1))


def test_hash_literal_string_keys() -> None:
    expr = single_expression('{"one": 1, "two": 2, "three": 3}')
    assert expr == HashLiteral(
        (
            (StringLiteral("one"), IntegerLiteral(1)),
            (StringLiteral("two"), IntegerLiteral(2)),
            (StringLiteral("three"), IntegerLiteral(3)),
        )
    )


def test_empty_hash_literal() -> None:
    assert single_expression("{}") == HashLiteral(())


def test_hash_literal_with_expressions() -> None:
    expr = single_expression('{"one": 0 + 1, true: 10 - 8, 3: 15 / 5}')
    assert expr == HashLiteral(
        (
            (StringLiteral("one"), infix(0, "+", 1)),
            (BooleanLiteral(True), infix(10, "-", 8)),
            (IntegerLiteral(3), infix(15, "/", 5)),
        )
    )


@pytest.mark.parametrize(
    "source,message",
    [
        ("let x 5;", "expected next token to be ASSIGN, got INT instead"),
        ("let = 10;", "expected next token to be IDENT, got ASSIGN instead"),
        ("let 838383;", "expected next token to be IDENT, got INT instead"),
        ("(1 + 2", "expected next token to be RPAREN, got EOF instead"),
        ("if x { 1 }", "expected next token to be LPAREN, got IDENT instead"),
        ("if (x) 1", "expected next token to be LBRACE, got INT instead"),
        ("fn(x, 1) { x }", "expected next token to be IDENT, got INT instead"),
        ('{"a" 1}', "expected next token to be COLON, got INT instead"),
        ('{"a": 1 "b": 2}', "expected next token to be COMMA, got STRING instead"),
        ("[1, 2", "expected next token to be RBRACKET, got EOF instead"),
        ("+5;", "no prefix parse function for PLUS found"),
        ("5 @ 5", "no prefix parse function for ILLEGAL found"),
        (
            "9223372036854775808",
            "could not parse 9223372036854775808 as integer",
        ),
    ],
)  # type: ignore[misc]
def test_parser_errors(source: str, message: str) -> None:
    assert message in parse_errors(source)


def test_errors_do_not_stop_following_statements() -> None:
    parser = Parser("let x 5; let y = 10;")
    program = parser.parse_program()
    assert parser.errors == ["expected next token to be ASSIGN, got INT instead"]
    assert program.statements == (LetStatement(Identifier("y"), IntegerLiteral(10)),)


def test_every_failed_statement_is_reported() -> None:
    errors = parse_errors("let = 1; let 2; let z = 3;")
    assert errors == [
        "expected next token to be IDENT, got ASSIGN instead",
        "expected next token to be IDENT, got INT instead",
    ]


def test_parser_accepts_source_string() -> None:
    parser = Parser("1 + 2")
    assert str(parser.parse_program()) == "(1 + 2)"


def test_empty_program() -> None:
    assert parse("").statements == ()
    assert parse("  \n\t").statements == ()


def test_stray_semicolon_is_reported() -> None:
    assert parse_errors(";") == ["no prefix parse function for SEMICOLON found"]


# Canonical text must survive a parse/render round trip.

ROUND_TRIP_CORPUS = [
    "let x = 5;",
    "return x * 2;",
    "-a * b",
    "!(true == false)",
    'let s = "hello" + " " + "world";',
    "if (x < y) { x } else { y }",
    "if (a) { let b = 1; return b; }",
    "let add = fn(a, b) { a + b; };",
    "fn() { }",
    "fn(x) { x; }(5)",
    "let newAdder = fn(x) { fn(y) { x + y } }; let addTwo = newAdder(2); addTwo(2);",
    "[1, 2 * 3, [4]][0]",
    '{"one": 1, true: [2], 3: {"nested": fn(x) { x }}}',
    "{}",
    "[]",
    "a; (b); [c]; {d: e}",
    "puts(len(rest(push([1], 2))))",
    "if (if (a) { b }) { c }",
    "1 + if (x) { 2 } else { 3 }",
    "(fn(x) { x })(1)[0]",
]


@pytest.mark.parametrize("source", ROUND_TRIP_CORPUS)  # type: ignore[misc]
def test_round_trip_corpus(source: str) -> None:
    program = parse(source)
    rendered = str(program)
    reparsed = parse(rendered)
    assert str(reparsed) == rendered
    assert reparsed == program


names = st.sampled_from(["a", "b", "foo", "bar", "my_var"])
identifiers = names.map(Identifier)
leaves = st.one_of(
    identifiers,
    st.integers(min_value=0, max_value=10**6).map(IntegerLiteral),
    st.booleans().map(BooleanLiteral),
    st.text(alphabet="abc xyz_", max_size=6).map(StringLiteral),
)


def extend(children: st.SearchStrategy[Expression]) -> st.SearchStrategy[Expression]:
    blocks = st.lists(children.map(ExpressionStatement), max_size=2).map(
        lambda stmts: BlockStatement(tuple(stmts))
    )
    return st.one_of(
        st.builds(PrefixExpression, st.sampled_from(["!", "-"]), children),
        st.builds(
            InfixExpression,
            children,
            st.sampled_from(["+", "-", "*", "/", "<", ">", "==", "!="]),
            children,
        ),
        st.builds(IfExpression, children, blocks, st.none() | blocks),
        st.builds(FunctionLiteral, st.lists(identifiers, max_size=3).map(tuple), blocks),
        st.builds(CallExpression, children, st.lists(children, max_size=3).map(tuple)),
        st.lists(children, max_size=3).map(lambda e: ArrayLiteral(tuple(e))),
        st.lists(st.tuples(children, children), max_size=2).map(
            lambda p: HashLiteral(tuple(p))
        ),
        st.builds(IndexExpression, children, children),
    )


expressions = st.recursive(leaves, extend, max_leaves=12)
statements: st.SearchStrategy[Statement] = st.one_of(
    expressions.map(ExpressionStatement),
    st.builds(LetStatement, identifiers, expressions),
    expressions.map(ReturnStatement),
)
programs = st.lists(statements, min_size=1, max_size=4).map(
    lambda stmts: Program(tuple(stmts))
)


@settings(max_examples=200)  # type: ignore[misc]
@given(programs)  # type: ignore[misc]
def test_canonical_text_reparses_to_same_tree(program: Program) -> None:
    rendered = str(program)
    reparsed = parse(rendered)
    assert reparsed == program
    assert str(reparsed) == rendered
