from __future__ import annotations

from typing import List, Optional

from ..tree import BlockStatement, Statement
from ..types import Environment, MkError, MkReturnValue, MkValue
from .helpers import EvalFunc, is_signal

def eval_program(statements: List[Statement], env: Environment, eval_func: EvalFunc) -> Optional[MkValue]:
    """Top level: a `return` ends the program with its unwrapped value."""
    result: Optional[MkValue] = None

    for stmt in statements:
        result = eval_func(stmt, env)

        match result:
            case MkReturnValue(value=value):
                return value
            case MkError():
                return result

    return result

def eval_block_statement(block: BlockStatement, env: Environment, eval_func: EvalFunc) -> Optional[MkValue]:
    """Like eval_program, but hands the return wrapper itself back to the caller
    so `return` can escape nested blocks up to the function boundary."""
    result: Optional[MkValue] = None

    for stmt in block.statements:
        result = eval_func(stmt, env)

        if is_signal(result):
            return result

    return result
