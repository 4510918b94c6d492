from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from ..tree import Node
from ..types import (
    FALSE,
    TRUE,
    Environment,
    MkBoolean,
    MkError,
    MkNull,
    MkReturnValue,
    MkValue,
    _ensure_mk_value,
)

EvalFunc = Callable[[Optional[Node], Environment], Optional[MkValue]]

def is_truthy(val: MkValue) -> bool:
    """Only false and null are falsy; 0, "" and [] are truthy."""
    match val:
        case MkBoolean(value=b):
            return b
        case MkNull():
            return False
        case _:
            return True

def native_bool_to_boolean(value: bool) -> MkBoolean:
    return TRUE if value else FALSE

def new_error(message: str) -> MkError:
    return MkError(message)

def is_signal(val: Optional[MkValue]) -> bool:
    """Errors and return wrappers stop evaluation of the enclosing construct."""
    return isinstance(val, (MkError, MkReturnValue))

def eval_value(node: Optional[Node], env: Environment, eval_func: EvalFunc) -> MkValue:
    """Evaluate a node whose result is consumed as a value (None becomes null)."""
    return _ensure_mk_value(eval_func(node, env))

def eval_expressions(
    nodes: List[Node], env: Environment, eval_func: EvalFunc
) -> Tuple[List[MkValue], Optional[MkValue]]:
    """Evaluate left-to-right, stopping at the first error or return signal."""
    values: List[MkValue] = []

    for node in nodes:
        val = eval_value(node, env, eval_func)
        if is_signal(val):
            return values, val
        values.append(val)

    return values, None
