"""AST node classes produced by the Pratt parser.

Every node keeps the token it was built from (for ``token_literal()``) and
renders a canonical, fully-parenthesised source form through ``string()``.
Nodes are built once by the parser and treated as read-only afterwards.

``to_lark()`` converts a program into a ``lark.Tree`` so the CLI and the
parser's ``__main__`` can dump it with ``Tree.pretty()``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from lark import Token, Tree
from typing_extensions import TypeAlias

from .token_types import Tok


class Node:
    token: Tok

    def token_literal(self) -> str:
        return self.token.literal

    def string(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.string()


class Statement(Node):
    pass


class Expression(Node):
    pass


def _render(node: Optional[Node]) -> str:
    return node.string() if node is not None else ""


# ---------- Statements ----------

@dataclass(eq=False)
class Program(Node):
    statements: List[Statement] = field(default_factory=list)

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def string(self) -> str:
        return "".join(stmt.string() for stmt in self.statements)


@dataclass(eq=False)
class LetStatement(Statement):
    token: Tok
    name: Optional[Identifier] = None
    value: Optional[Expression] = None

    def string(self) -> str:
        return f"{self.token_literal()} {_render(self.name)} = {_render(self.value)};"


@dataclass(eq=False)
class ReturnStatement(Statement):
    token: Tok
    return_value: Optional[Expression] = None

    def string(self) -> str:
        return f"{self.token_literal()} {_render(self.return_value)};"


@dataclass(eq=False)
class ExpressionStatement(Statement):
    token: Tok
    expression: Optional[Expression] = None

    def string(self) -> str:
        return _render(self.expression)


@dataclass(eq=False)
class BlockStatement(Statement):
    token: Tok
    statements: List[Statement] = field(default_factory=list)

    def string(self) -> str:
        return "".join(stmt.string() for stmt in self.statements)


# ---------- Expressions ----------

@dataclass(eq=False)
class Identifier(Expression):
    token: Tok
    value: str

    def string(self) -> str:
        return self.value


@dataclass(eq=False)
class IntegerLiteral(Expression):
    token: Tok
    value: int = 0

    def string(self) -> str:
        return self.token.literal


@dataclass(eq=False)
class BooleanLiteral(Expression):
    token: Tok
    value: bool = False

    def string(self) -> str:
        return self.token.literal


@dataclass(eq=False)
class StringLiteral(Expression):
    token: Tok
    value: str = ""

    def string(self) -> str:
        return self.token.literal


@dataclass(eq=False)
class PrefixExpression(Expression):
    token: Tok
    operator: str
    right: Optional[Expression] = None

    def string(self) -> str:
        return f"({self.operator}{_render(self.right)})"


@dataclass(eq=False)
class InfixExpression(Expression):
    token: Tok
    left: Optional[Expression]
    operator: str
    right: Optional[Expression] = None

    def string(self) -> str:
        return f"({_render(self.left)} {self.operator} {_render(self.right)})"


@dataclass(eq=False)
class IfExpression(Expression):
    token: Tok
    condition: Optional[Expression] = None
    consequence: Optional[BlockStatement] = None
    alternative: Optional[BlockStatement] = None

    def string(self) -> str:
        out = f"if{_render(self.condition)} {_render(self.consequence)}"
        if self.alternative is not None:
            out += f"else {self.alternative.string()}"
        return out


@dataclass(eq=False)
class FunctionLiteral(Expression):
    token: Tok
    parameters: List[Identifier] = field(default_factory=list)
    body: Optional[BlockStatement] = None

    def string(self) -> str:
        params = ", ".join(p.string() for p in self.parameters)
        return f"{self.token_literal()}({params}) {_render(self.body)}"


@dataclass(eq=False)
class CallExpression(Expression):
    token: Tok
    function: Optional[Expression]
    arguments: List[Expression] = field(default_factory=list)

    def string(self) -> str:
        args = ", ".join(a.string() for a in self.arguments)
        return f"{_render(self.function)}({args})"


@dataclass(eq=False)
class ArrayLiteral(Expression):
    token: Tok
    elements: List[Expression] = field(default_factory=list)

    def string(self) -> str:
        return "[" + ", ".join(e.string() for e in self.elements) + "]"


@dataclass(eq=False)
class HashLiteral(Expression):
    token: Tok
    pairs: List[Tuple[Expression, Expression]] = field(default_factory=list)

    def string(self) -> str:
        pairs = [f"{k.string()}:{v.string()}" for k, v in self.pairs]
        return "{" + ", ".join(pairs) + "}"


@dataclass(eq=False)
class IndexExpression(Expression):
    token: Tok
    left: Optional[Expression]
    index: Optional[Expression] = None

    def string(self) -> str:
        return f"({_render(self.left)}[{_render(self.index)}])"


# ---------- Lark views ----------

LarkNode: TypeAlias = Union[Tree, Token]


def _tok(kind: str, value: object) -> Token:
    return Token(kind, str(value))


def to_lark(node: Optional[Node]) -> LarkNode:
    """Mirror an AST node as a lark Tree (labels are snake_case node kinds)."""
    match node:
        case None:
            return Tree('missing', [])
        case Program(statements=stmts):
            return Tree('program', [to_lark(s) for s in stmts])
        case LetStatement(name=name, value=value):
            return Tree('let', [to_lark(name), to_lark(value)])
        case ReturnStatement(return_value=value):
            return Tree('return', [to_lark(value)])
        case ExpressionStatement(expression=expr):
            return Tree('expr_stmt', [to_lark(expr)])
        case BlockStatement(statements=stmts):
            return Tree('block', [to_lark(s) for s in stmts])
        case Identifier(value=value):
            return _tok('IDENT', value)
        case IntegerLiteral(value=value):
            return _tok('INT', value)
        case BooleanLiteral(token=token):
            return _tok('BOOLEAN', token.literal)
        case StringLiteral(value=value):
            return _tok('STRING', value)
        case PrefixExpression(operator=op, right=right):
            return Tree('prefix', [_tok('OP', op), to_lark(right)])
        case InfixExpression(left=left, operator=op, right=right):
            return Tree('infix', [to_lark(left), _tok('OP', op), to_lark(right)])
        case IfExpression(condition=cond, consequence=cons, alternative=alt):
            children = [to_lark(cond), to_lark(cons)]
            if alt is not None:
                children.append(to_lark(alt))
            return Tree('if', children)
        case FunctionLiteral(parameters=params, body=body):
            return Tree('fn', [Tree('params', [to_lark(p) for p in params]), to_lark(body)])
        case CallExpression(function=fn, arguments=args):
            return Tree('call', [to_lark(fn), Tree('args', [to_lark(a) for a in args])])
        case ArrayLiteral(elements=elements):
            return Tree('array', [to_lark(e) for e in elements])
        case HashLiteral(pairs=pairs):
            return Tree('hash', [Tree('pair', [to_lark(k), to_lark(v)]) for k, v in pairs])
        case IndexExpression(left=left, index=index):
            return Tree('index', [to_lark(left), to_lark(index)])
        case _:
            raise TypeError(f"Unsupported node {type(node).__name__}")
