from __future__ import annotations

from typing import Optional

from ..tree import LetStatement
from ..types import Environment, MkValue
from .helpers import EvalFunc, eval_value, is_signal

def eval_let_stmt(node: LetStatement, env: Environment, eval_func: EvalFunc) -> Optional[MkValue]:
    """Bind in the current scope only; shadows outer bindings from here on."""
    val = eval_value(node.value, env, eval_func)
    if is_signal(val):
        return val

    if node.name is not None:
        env.set(node.name.value, val)

    return None
