"""
Monkey Language Parser

Parses a Monkey token stream into an immutable abstract syntax tree.

The parser is a Pratt (precedence-climbing) recursive-descent parser. It keeps
two tokens of lookahead, `current` and `peek`, reading both from the lexer on
construction. Every token category that can start an expression has a prefix
parse function; every category that can continue one has an infix parse
function and a binding power on the `Precedence` scale.

Supported Constructs
--------------------
- Statements:
    * `let <ident> = <expr>;`
    * `return <expr>;`
    * expression statements, with an optional trailing `;`
- Expressions:
    * identifiers, integer/boolean/string literals
    * prefix `!` and `-`
    * infix `+ - * / < > == !=`, left-associative
    * grouping `( ... )`
    * `if (<cond>) { ... } else { ... }`
    * `fn(<params>) { ... }`
    * calls `f(a, b)`, index access `xs[i]`
    * array literals `[a, b]`, hash literals `{k: v}`

Parser Behavior
---------------
- Never raises for malformed input. Each failed expectation appends a
  diagnostic to `errors` and aborts the statement being parsed; the parser
  then skips to the next `;` and carries on.
- `errors` is empty exactly when the whole program parsed.

Entry Points
------------
- `parse_program()`: Parse the full token stream into a `Program`.
- `errors`: Diagnostics collected so far.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import IntEnum

from monkey import monkey_constants as tk
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
from monkey.monkey_lexer import Lexer, Token

logger = logging.getLogger(__name__)

INT64_MAX = 2**63 - 1

PrefixParseFn = Callable[[], Expression]
InfixParseFn = Callable[[Expression], Expression]


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2  # ==
    LESSGREATER = 3  # > or <
    SUM = 4  # +
    PRODUCT = 5  # *
    PREFIX = 6  # -X or !X
    CALL = 7  # myFunction(X)
    INDEX = 8  # array[index]


precedences: dict[str, Precedence] = {
    tk.EQ: Precedence.EQUALS,
    tk.NOT_EQ: Precedence.EQUALS,
    tk.LT: Precedence.LESSGREATER,
    tk.GT: Precedence.LESSGREATER,
    tk.PLUS: Precedence.SUM,
    tk.MINUS: Precedence.SUM,
    tk.ASTERISK: Precedence.PRODUCT,
    tk.SLASH: Precedence.PRODUCT,
    tk.LPAREN: Precedence.CALL,
    tk.LBRACKET: Precedence.INDEX,
}


class ParseError(SyntaxError):
    """Aborts the production being parsed. Caught by `parse_program()`."""


class Parser:
    """
    Monkey Parser Class

    Attributes
    ----------
    lexer : Lexer
        Token supply.
    current : Token
        Token under examination.
    peek : Token
        One-token lookahead.
    errors : list[str]
        Diagnostics collected while parsing.
    """

    def __init__(self, source: Lexer | str) -> None:
        self.lexer: Lexer = source if isinstance(source, Lexer) else Lexer(source)
        self.errors: list[str] = []

        self.prefix_parse_fns: dict[str, PrefixParseFn] = {
            tk.IDENT: self.parse_identifier,
            tk.INT: self.parse_integer_literal,
            tk.TRUE: self.parse_boolean,
            tk.FALSE: self.parse_boolean,
            tk.STRING: self.parse_string_literal,
            tk.BANG: self.parse_prefix_expression,
            tk.MINUS: self.parse_prefix_expression,
            tk.LPAREN: self.parse_grouped_expression,
            tk.IF: self.parse_if_expression,
            tk.FUNCTION: self.parse_function_literal,
            tk.LBRACKET: self.parse_array_literal,
            tk.LBRACE: self.parse_hash_literal,
        }
        self.infix_parse_fns: dict[str, InfixParseFn] = {
            tk.PLUS: self.parse_infix_expression,
            tk.MINUS: self.parse_infix_expression,
            tk.ASTERISK: self.parse_infix_expression,
            tk.SLASH: self.parse_infix_expression,
            tk.EQ: self.parse_infix_expression,
            tk.NOT_EQ: self.parse_infix_expression,
            tk.LT: self.parse_infix_expression,
            tk.GT: self.parse_infix_expression,
            tk.LPAREN: self.parse_call_expression,
            tk.LBRACKET: self.parse_index_expression,
        }

        # Read two tokens so current and peek are both set.
        self.current: Token = self.lexer.next_token()
        self.peek: Token = self.lexer.next_token()

    # Token plumbing

    def next_token(self) -> None:
        self.current = self.peek
        self.peek = self.lexer.next_token()

    def current_is(self, type_: str) -> bool:
        return self.current.type == type_

    def peek_is(self, type_: str) -> bool:
        return self.peek.type == type_

    def fail(self, message: str) -> ParseError:
        """Records a diagnostic and returns the exception that aborts the production."""
        logger.debug("parse error at %d:%d: %s", self.peek.line, self.peek.col, message)
        self.errors.append(message)
        return ParseError(message)

    def expect_peek(self, type_: str) -> None:
        if not self.peek_is(type_):
            raise self.fail(
                f"expected next token to be {type_}, got {self.peek.type} instead"
            )
        self.next_token()

    def peek_precedence(self) -> Precedence:
        return precedences.get(self.peek.type, Precedence.LOWEST)

    def current_precedence(self) -> Precedence:
        return precedences.get(self.current.type, Precedence.LOWEST)

    def synchronize(self) -> None:
        """Skips the remainder of a failed statement, up to its `;` or EOF."""
        while not self.current_is(tk.SEMICOLON) and not self.current_is(tk.EOF):
            self.next_token()

    # Statements

    def parse_program(self) -> Program:
        """Parse every statement up to EOF into a `Program`."""
        statements: list[Statement] = []
        while not self.current_is(tk.EOF):
            try:
                statements.append(self.parse_statement())
            except ParseError:
                self.synchronize()
            self.next_token()
        return Program(tuple(statements))

    def parse_statement(self) -> Statement:
        if self.current_is(tk.LET):
            return self.parse_let_statement()
        if self.current_is(tk.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> LetStatement:
        token = self.current

        self.expect_peek(tk.IDENT)
        name = Identifier(self.current.literal, token=self.current)

        self.expect_peek(tk.ASSIGN)
        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)

        if self.peek_is(tk.SEMICOLON):
            self.next_token()
        return LetStatement(name, value, token=token)

    def parse_return_statement(self) -> ReturnStatement:
        token = self.current
        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)

        if self.peek_is(tk.SEMICOLON):
            self.next_token()
        return ReturnStatement(value, token=token)

    def parse_expression_statement(self) -> ExpressionStatement:
        token = self.current
        expression = self.parse_expression(Precedence.LOWEST)

        if self.peek_is(tk.SEMICOLON):
            self.next_token()
        return ExpressionStatement(expression, token=token)

    def parse_block_statement(self) -> BlockStatement:
        """Parse statements after `{` until `}` or EOF."""
        token = self.current
        statements: list[Statement] = []
        self.next_token()

        while not self.current_is(tk.RBRACE) and not self.current_is(tk.EOF):
            statements.append(self.parse_statement())
            self.next_token()

        return BlockStatement(tuple(statements), token=token)

    # Expressions

    def parse_expression(self, precedence: Precedence) -> Expression:
        prefix = self.prefix_parse_fns.get(self.current.type)
        if prefix is None:
            raise self.fail(f"no prefix parse function for {self.current.type} found")
        left = prefix()

        while not self.peek_is(tk.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek.type)
            if infix is None:
                return left  # pragma: no cover
            self.next_token()
            left = infix(left)

        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.current.literal, token=self.current)

    def parse_integer_literal(self) -> Expression:
        token = self.current
        try:
            value = int(token.literal)
        except ValueError:
            raise self.fail(f"could not parse {token.literal} as integer") from None
        if value > INT64_MAX:
            raise self.fail(f"could not parse {token.literal} as integer")
        return IntegerLiteral(value, token=token)

    def parse_boolean(self) -> Expression:
        return BooleanLiteral(self.current_is(tk.TRUE), token=self.current)

    def parse_string_literal(self) -> Expression:
        return StringLiteral(self.current.literal, token=self.current)

    def parse_prefix_expression(self) -> Expression:
        token = self.current
        self.next_token()
        right = self.parse_expression(Precedence.PREFIX)
        return PrefixExpression(token.literal, right, token=token)

    def parse_infix_expression(self, left: Expression) -> Expression:
        token = self.current
        precedence = self.current_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        return InfixExpression(left, token.literal, right, token=token)

    def parse_grouped_expression(self) -> Expression:
        self.next_token()
        expression = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(tk.RPAREN)
        return expression

    def parse_if_expression(self) -> Expression:
        token = self.current
        self.expect_peek(tk.LPAREN)
        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(tk.RPAREN)
        self.expect_peek(tk.LBRACE)
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_is(tk.ELSE):
            self.next_token()
            self.expect_peek(tk.LBRACE)
            alternative = self.parse_block_statement()

        return IfExpression(condition, consequence, alternative, token=token)

    def parse_function_literal(self) -> Expression:
        token = self.current
        self.expect_peek(tk.LPAREN)
        parameters = self.parse_function_parameters()
        self.expect_peek(tk.LBRACE)
        body = self.parse_block_statement()
        return FunctionLiteral(parameters, body, token=token)

    def parse_function_parameters(self) -> tuple[Identifier, ...]:
        parameters: list[Identifier] = []
        if self.peek_is(tk.RPAREN):
            self.next_token()
            return ()

        self.expect_peek(tk.IDENT)
        parameters.append(Identifier(self.current.literal, token=self.current))
        while self.peek_is(tk.COMMA):
            self.next_token()
            self.expect_peek(tk.IDENT)
            parameters.append(Identifier(self.current.literal, token=self.current))

        self.expect_peek(tk.RPAREN)
        return tuple(parameters)

    def parse_expression_list(self, end: str) -> tuple[Expression, ...]:
        """Parse comma-separated expressions up to the `end` token."""
        items: list[Expression] = []
        if self.peek_is(end):
            self.next_token()
            return ()

        self.next_token()
        items.append(self.parse_expression(Precedence.LOWEST))
        while self.peek_is(tk.COMMA):
            self.next_token()
            self.next_token()
            items.append(self.parse_expression(Precedence.LOWEST))

        self.expect_peek(end)
        return tuple(items)

    def parse_call_expression(self, function: Expression) -> Expression:
        token = self.current
        arguments = self.parse_expression_list(tk.RPAREN)
        return CallExpression(function, arguments, token=token)

    def parse_index_expression(self, left: Expression) -> Expression:
        token = self.current
        self.next_token()
        index = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(tk.RBRACKET)
        return IndexExpression(left, index, token=token)

    def parse_array_literal(self) -> Expression:
        token = self.current
        elements = self.parse_expression_list(tk.RBRACKET)
        return ArrayLiteral(elements, token=token)

    def parse_hash_literal(self) -> Expression:
        token = self.current
        pairs: list[tuple[Expression, Expression]] = []

        while not self.peek_is(tk.RBRACE):
            self.next_token()
            key = self.parse_expression(Precedence.LOWEST)
            self.expect_peek(tk.COLON)
            self.next_token()
            value = self.parse_expression(Precedence.LOWEST)
            pairs.append((key, value))
            if not self.peek_is(tk.RBRACE):
                self.expect_peek(tk.COMMA)

        self.expect_peek(tk.RBRACE)
        return HashLiteral(tuple(pairs), token=token)
