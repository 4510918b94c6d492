"""
Lexer for Monkey

Tokenizes Monkey source code on demand for the Pratt parser.

Features:
- Pull-based: the parser asks for one token at a time via next_token()
- Position tracking (line, column)
- EOF is returned forever once the input is exhausted
"""

from typing import List

from .token_types import TT, Tok, lookup_ident

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Monkey lexer.

    Whitespace is skipped, strings have no escape processing and integers
    carry no sign (unary minus is a parser-level prefix operator).
    """

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('==', TT.EQ),
        ('!=', TT.NOT_EQ),

        # Single-character operators
        ('=', TT.ASSIGN),
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('!', TT.BANG),
        ('*', TT.ASTERISK),
        ('/', TT.SLASH),
        ('<', TT.LT),
        ('>', TT.GT),
        (',', TT.COMMA),
        (';', TT.SEMICOLON),
        (':', TT.COLON),
        ('(', TT.LPAREN),
        (')', TT.RPAREN),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        ('[', TT.LBRACKET),
        (']', TT.RBRACKET),
    ]

    WHITESPACE = (' ', '\t', '\n', '\r')

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def next_token(self) -> Tok:
        """Scan and return the next token"""
        self.skip_whitespace()

        if self.pos >= len(self.source):
            return Tok(TT.EOF, "", self.line, self.column)

        line, column = self.line, self.column
        ch = self.peek()

        # String literals
        if ch == '"':
            return Tok(TT.STRING, self.read_string(), line, column)

        # Identifiers and keywords
        if self.is_letter(ch):
            ident = self.read_identifier()
            return Tok(lookup_ident(ident), ident, line, column)

        # Numbers
        if self.is_digit(ch):
            return Tok(TT.INT, self.read_number(), line, column)

        # Operators and punctuation
        for op, tt in self.OPERATORS:
            if self.source.startswith(op, self.pos):
                self.advance(len(op))
                return Tok(tt, op, line, column)

        self.advance()
        return Tok(TT.ILLEGAL, ch, line, column)

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list ending with EOF"""
        tokens: List[Tok] = []

        while True:
            tok = self.next_token()
            tokens.append(tok)

            if tok.type == TT.EOF:
                return tokens

    # ========================================================================
    # Scanners
    # ========================================================================

    def read_identifier(self) -> str:
        start = self.pos

        while self.pos < len(self.source) and (self.is_letter(self.peek()) or self.is_digit(self.peek())):
            self.advance()

        return self.source[start:self.pos]

    def read_number(self) -> str:
        start = self.pos

        while self.pos < len(self.source) and self.is_digit(self.peek()):
            self.advance()

        return self.source[start:self.pos]

    def read_string(self) -> str:
        """Read a double-quoted string; unterminated strings run to end of input"""
        self.advance()  # opening quote
        start = self.pos

        while self.pos < len(self.source) and self.peek() != '"':
            self.advance()

        value = self.source[start:self.pos]

        if self.pos < len(self.source):
            self.advance()  # closing quote

        return value

    def skip_whitespace(self) -> None:
        while self.pos < len(self.source) and self.peek() in self.WHITESPACE:
            self.advance()

    # ========================================================================
    # Character Helpers
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return ''

    def advance(self, count: int = 1) -> None:
        for _ in range(count):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    @staticmethod
    def is_letter(ch: str) -> bool:
        return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'

    @staticmethod
    def is_digit(ch: str) -> bool:
        return '0' <= ch <= '9'


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()
