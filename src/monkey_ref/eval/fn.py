from __future__ import annotations

from ..runtime import apply_function
from ..tree import BlockStatement, CallExpression, FunctionLiteral
from ..types import Environment, MkFunction, MkValue
from .helpers import EvalFunc, eval_expressions, eval_value, is_signal

def eval_function_literal(node: FunctionLiteral, env: Environment) -> MkFunction:
    # Captures env by reference: later bindings in it stay visible to the closure.
    body = node.body if node.body is not None else BlockStatement(token=node.token)
    return MkFunction(parameters=list(node.parameters), body=body, env=env)

def eval_call_expression(node: CallExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    callee = eval_value(node.function, env, eval_func)
    if is_signal(callee):
        return callee

    args, signal = eval_expressions(node.arguments, env, eval_func)
    if signal is not None:
        return signal

    return apply_function(callee, args)
