from __future__ import annotations

from ..runtime import lookup_builtin
from ..tree import BooleanLiteral, Identifier, IntegerLiteral, StringLiteral
from ..types import Environment, MkBoolean, MkInteger, MkString, MkValue
from .helpers import native_bool_to_boolean, new_error

def eval_integer_literal(node: IntegerLiteral, _env: Environment) -> MkInteger:
    return MkInteger(node.value)

def eval_boolean_literal(node: BooleanLiteral, _env: Environment) -> MkBoolean:
    return native_bool_to_boolean(node.value)

def eval_string_literal(node: StringLiteral, _env: Environment) -> MkString:
    return MkString(node.value)

def eval_identifier(node: Identifier, env: Environment) -> MkValue:
    """Scope chain first, then builtins."""
    val = env.get(node.value)
    if val is not None:
        return val

    builtin = lookup_builtin(node.value)
    if builtin is not None:
        return builtin

    return new_error(f"identifier not found: {node.value}")
