from __future__ import annotations

from typing import Optional

from ..tree import IfExpression, ReturnStatement
from ..types import NULL, Environment, MkReturnValue, MkValue
from .helpers import EvalFunc, eval_value, is_signal, is_truthy

def eval_if_expression(node: IfExpression, env: Environment, eval_func: EvalFunc) -> Optional[MkValue]:
    condition = eval_value(node.condition, env, eval_func)
    if is_signal(condition):
        return condition

    if is_truthy(condition):
        return eval_func(node.consequence, env)

    if node.alternative is not None:
        return eval_func(node.alternative, env)

    return NULL

def eval_return_stmt(node: ReturnStatement, env: Environment, eval_func: EvalFunc) -> MkValue:
    val = eval_value(node.return_value, env, eval_func)
    if is_signal(val):
        return val

    return MkReturnValue(val)
