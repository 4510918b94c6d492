"""
Token Types for the Monkey Parser

Shared between lexer and parser to avoid circular dependencies.
"""

from dataclasses import dataclass
from enum import Enum


class TT(Enum):
    """Token Types. Values double as the display name used in parse errors."""

    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # Identifiers + literals
    IDENT = "IDENT"
    INT = "INT"
    STRING = "STRING"

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
    COLON = ":"

    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    # Keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    TRUE = "TRUE"
    FALSE = "FALSE"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"
    FOR = "FOR"

    def __str__(self) -> str:
        return self.value


KEYWORDS = {
    'fn': TT.FUNCTION,
    'let': TT.LET,
    'true': TT.TRUE,
    'false': TT.FALSE,
    'if': TT.IF,
    'else': TT.ELSE,
    'return': TT.RETURN,
    'for': TT.FOR,
}


def lookup_ident(ident: str) -> TT:
    """Map an identifier to its keyword token type, or IDENT"""
    return KEYWORDS.get(ident, TT.IDENT)


@dataclass
class Tok:
    """Token with position info"""

    type: TT
    literal: str
    line: int = 0
    column: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.literal!r}, {self.line}:{self.column})"
