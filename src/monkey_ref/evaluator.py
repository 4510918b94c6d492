from __future__ import annotations

from typing import Callable, Dict, Optional

from .runtime import init_stdlib
from .tree import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
)
from .types import Environment, MkValue, new_environment

from .eval.blocks import eval_program, eval_block_statement
from .eval.control import eval_if_expression, eval_return_stmt
from .eval.let import eval_let_stmt
from .eval.expr import eval_prefix, eval_infix
from .eval.literals import eval_boolean_literal, eval_identifier, eval_integer_literal, eval_string_literal
from .eval.fn import eval_function_literal, eval_call_expression
from .eval.objects import eval_array_literal, eval_hash_literal, eval_index_expression

# ---------------- Public API ----------------

def evaluate(program: Program, env: Optional[Environment]=None) -> Optional[MkValue]:
    """Evaluate a parsed program; returns None when it produced no value
    (empty program, or a trailing `let`)."""
    init_stdlib()

    if env is None:
        env = new_environment()

    return eval_node(program, env)

# ---------------- Core evaluator ----------------

def eval_node(n: Optional[Node], env: Environment) -> Optional[MkValue]:
    if n is None:
        return None

    handler = _NODE_DISPATCH.get(type(n))
    if handler is not None:
        return handler(n, env)

    raise TypeError(f"Unknown node: {type(n).__name__}")

def _eval_expression_stmt(n: ExpressionStatement, env: Environment) -> Optional[MkValue]:
    return eval_node(n.expression, env)

_NODE_DISPATCH: Dict[type, Callable[..., Optional[MkValue]]] = {
    Program: lambda n, env: eval_program(n.statements, env, eval_node),
    BlockStatement: lambda n, env: eval_block_statement(n, env, eval_node),
    ExpressionStatement: _eval_expression_stmt,
    LetStatement: lambda n, env: eval_let_stmt(n, env, eval_node),
    ReturnStatement: lambda n, env: eval_return_stmt(n, env, eval_node),
    IntegerLiteral: eval_integer_literal,
    BooleanLiteral: eval_boolean_literal,
    StringLiteral: eval_string_literal,
    Identifier: eval_identifier,
    PrefixExpression: lambda n, env: eval_prefix(n, env, eval_node),
    InfixExpression: lambda n, env: eval_infix(n, env, eval_node),
    IfExpression: lambda n, env: eval_if_expression(n, env, eval_node),
    FunctionLiteral: eval_function_literal,
    CallExpression: lambda n, env: eval_call_expression(n, env, eval_node),
    ArrayLiteral: lambda n, env: eval_array_literal(n, env, eval_node),
    HashLiteral: lambda n, env: eval_hash_literal(n, env, eval_node),
    IndexExpression: lambda n, env: eval_index_expression(n, env, eval_node),
}
