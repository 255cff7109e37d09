"""
Token vocabulary for the Monkey language.

Every token category is a plain upper-case string. The lexer resolves literal
text to a category through `token_hashmap`, which merges the reserved words and
the fixed operator/punctuation set.

Exports:
    - category names (EOF, ILLEGAL, IDENT, INT, STRING, ...)
    - keywords: reserved word -> category
    - operator_tokens: symbol -> category
    - token_hashmap: union of both tables
    - lookup_ident(): classify identifier-shaped text
"""

ILLEGAL = "ILLEGAL"
EOF = "EOF"

# Identifiers and literals
IDENT = "IDENT"
INT = "INT"
STRING = "STRING"

# Keywords
FUNCTION = "FUNCTION"
LET = "LET"
IF = "IF"
ELSE = "ELSE"
RETURN = "RETURN"
TRUE = "TRUE"
FALSE = "FALSE"

# Delimiters
COMMA = "COMMA"
SEMICOLON = "SEMICOLON"
COLON = "COLON"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
LBRACE = "LBRACE"
RBRACE = "RBRACE"
LBRACKET = "LBRACKET"
RBRACKET = "RBRACKET"

# Operators
ASSIGN = "ASSIGN"
PLUS = "PLUS"
MINUS = "MINUS"
ASTERISK = "ASTERISK"
SLASH = "SLASH"
EQ = "EQ"
NOT_EQ = "NOT_EQ"
LT = "LT"
GT = "GT"
BANG = "BANG"

keywords: dict[str, str] = {
    "fn": FUNCTION,
    "let": LET,
    "if": IF,
    "else": ELSE,
    "return": RETURN,
    "true": TRUE,
    "false": FALSE,
}

operator_tokens: dict[str, str] = {
    ",": COMMA,
    ";": SEMICOLON,
    ":": COLON,
    "(": LPAREN,
    ")": RPAREN,
    "{": LBRACE,
    "}": RBRACE,
    "[": LBRACKET,
    "]": RBRACKET,
    "=": ASSIGN,
    "==": EQ,
    "!": BANG,
    "!=": NOT_EQ,
    "+": PLUS,
    "-": MINUS,
    "*": ASTERISK,
    "/": SLASH,
    "<": LT,
    ">": GT,
}

token_hashmap: dict[str, str] = {**keywords, **operator_tokens}

# Longest operator spelling, bounds the lexer's lookahead.
MAX_OPERATOR_LEN = max(len(op) for op in operator_tokens)


def lookup_ident(ident: str) -> str:
    """Returns the keyword category for `ident`, or IDENT for any other name."""
    return keywords.get(ident, IDENT)
