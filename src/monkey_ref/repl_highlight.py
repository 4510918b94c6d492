"""prompt_toolkit lexer for live Monkey syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as MkLexer
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "builtin": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "error": "bold ansired",
}

# Token type → highlight group.
_TT_GROUP = {
    TT.FUNCTION: "keyword",
    TT.LET: "keyword",
    TT.IF: "keyword",
    TT.ELSE: "keyword",
    TT.RETURN: "keyword",
    TT.FOR: "keyword",
    TT.TRUE: "boolean",
    TT.FALSE: "boolean",
    TT.INT: "number",
    TT.STRING: "string",
    TT.IDENT: "identifier",
    TT.ASSIGN: "operator",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.BANG: "operator",
    TT.ASTERISK: "operator",
    TT.SLASH: "operator",
    TT.LT: "operator",
    TT.GT: "operator",
    TT.EQ: "operator",
    TT.NOT_EQ: "operator",
    TT.COMMA: "punctuation",
    TT.SEMICOLON: "punctuation",
    TT.COLON: "punctuation",
    TT.LPAREN: "punctuation",
    TT.RPAREN: "punctuation",
    TT.LBRACE: "punctuation",
    TT.RBRACE: "punctuation",
    TT.LBRACKET: "punctuation",
    TT.RBRACKET: "punctuation",
    TT.ILLEGAL: "error",
}

BUILTIN_NAMES = frozenset({"len", "first", "last", "rest", "push", "puts"})


def _token_text(tok: Tok, line: str) -> str:
    # String tokens carry their content only; re-attach the quotes.
    if tok.type == TT.STRING:
        start = tok.column - 1
        end = start + 1 + len(tok.literal)
        if end < len(line) and line[end] == '"':
            end += 1
        return line[start:end]

    return tok.literal


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    tokens = MkLexer(text).tokenize()

    result: StyleAndTextTuples = []
    pos = 0

    for tok in tokens:
        if tok.type == TT.EOF:
            break

        tok_text = _token_text(tok, text)
        if not tok_text:
            continue

        idx = tok.column - 1
        if idx < pos:
            continue

        # Unstyled gap before token.
        if idx > pos:
            result.append(("", text[pos:idx]))

        group = _TT_GROUP.get(tok.type, "")
        if tok.type == TT.IDENT and tok.literal in BUILTIN_NAMES:
            group = "builtin"

        result.append((GROUP_STYLE.get(group, ""), tok_text))
        pos = idx + len(tok_text)

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class MonkeyLexer(Lexer):
    """prompt_toolkit Lexer that highlights Monkey source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
