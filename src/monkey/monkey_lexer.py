"""
Lexical analyzer for the Monkey language.

This module turns raw source text into a lazy stream of tokens:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: A single token with category, literal text, and source location.
    Lexer: Produces tokens on demand from a CharacterStream.

Features:
    - Skips spaces, tabs, carriage returns and newlines
    - Identifiers are maximal runs of ASCII letters and underscores (no digits)
    - Integer literals are maximal runs of ASCII digits (sign handled by the parser)
    - String literals run to the next double quote, taken verbatim
    - Longest-match recognition of operators, so `==` and `!=` win over `=` and `!`
    - Unknown characters become ILLEGAL tokens; the lexer itself never raises

Example:
    >>> lexer = Lexer("let x = 5;")
    >>> lexer.next_token()
    Token(LET, let)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - token_hashmap
"""

import logging
from collections.abc import Iterator
from string import ascii_letters, digits
from typing import Any

from monkey.monkey_constants import (
    EOF,
    ILLEGAL,
    INT,
    MAX_OPERATOR_LEN,
    STRING,
    lookup_ident,
    operator_tokens,
    token_hashmap,
)

logger = logging.getLogger(__name__)

IDENT_CHARS = frozenset(ascii_letters + "_")
DIGIT_CHARS = frozenset(digits)
WHITESPACE_CHARS = frozenset(" \t\n\r")


class CharacterStream:
    """
    Reads characters from a source string while tracking line and column.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Returns:
            str: The consumed character, or an empty string at end of input.
        """
        if self.position >= len(self.source):
            return ""
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset from the current position without advancing.

        Args:
            offset (int, optional): Number of characters to look ahead. Defaults to 0.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """A classified lexical unit of Monkey source.

    Attributes:
        type (str): The token category (e.g. 'IDENT', 'INT', 'EOF').
        literal (str): The exact text matched.
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
    """

    __slots__ = ("type", "literal", "line", "col")

    def __init__(self, type_: str, literal: str, line: int = 0, col: int = 0):
        self.type = type_
        self.literal = literal
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.literal})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.literal == other.literal
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.literal, self.line, self.col))


class Lexer:
    """Lexical analyzer for the Monkey language.

    Tokens are produced one at a time by `next_token()`. Once the source is
    exhausted every further call returns an EOF token.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, source: "str | CharacterStream") -> None:
        """Initializes the Lexer.

        Args:
            source (str | CharacterStream): Raw source text or a prepared stream.
        """
        if isinstance(source, CharacterStream):
            self.stream = source
        else:
            self.stream = CharacterStream(source)

    def __iter__(self) -> Iterator[Token]:
        """Yields tokens up to and including the first EOF token."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == EOF:
                return

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while self.peek() in WHITESPACE_CHARS:
            self.advance()

    def read_while(self, allowed: frozenset[str]) -> str:
        """Consumes the maximal run of characters drawn from `allowed`."""
        text = ""
        while not self.stream.end_of_file() and self.peek() in allowed:
            text += self.advance()
        return text

    def read_string(self) -> str:
        """Consumes a double-quoted literal and returns the text between the quotes.

        No escape sequences are processed. A missing closing quote ends the
        literal at end of input.
        """
        self.advance()  # opening quote
        text = ""
        while not self.stream.end_of_file() and self.peek() != '"':
            text += self.advance()
        if self.peek() == '"':
            self.advance()
        else:
            logger.debug("unterminated string literal %r", text)
        return text

    def match_operator(self) -> Token | None:
        """Attempts to match the longest operator or delimiter from the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        candidate = ""

        for i in range(MAX_OPERATOR_LEN):
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in operator_tokens:
                max_token = candidate

        if max_token:
            for _ in range(len(max_token)):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns:
            Token: The next token; EOF once the source is exhausted.
        """
        self.skip_whitespace()

        line, col = self.stream.line, self.stream.column
        if self.stream.end_of_file():
            return Token(EOF, "", line, col)

        ch = self.peek()

        # 1. Identifier or keyword
        if ch in IDENT_CHARS:
            ident = self.read_while(IDENT_CHARS)
            return Token(lookup_ident(ident), ident, line, col)

        # 2. Integer
        if ch in DIGIT_CHARS:
            return Token(INT, self.read_while(DIGIT_CHARS), line, col)

        # 3. String
        if ch == '"':
            return Token(STRING, self.read_string(), line, col)

        # 4. Operator or delimiter
        token = self.match_operator()
        if token:
            return token

        # 5. Unknown character
        return Token(ILLEGAL, self.advance(), line, col)


__all__ = ["CharacterStream", "Lexer", "Token", "token_hashmap"]
