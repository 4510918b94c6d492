from __future__ import annotations

import importlib
from typing import Dict, List, Optional

from .eval.helpers import new_error
from .types import (
    Environment,
    MkBuiltin,
    MkFunction,
    MkReturnValue,
    MkValue,
    BuiltinFn,
    _ensure_mk_value,
    new_enclosed_environment,
)

_STDLIB_INITIALIZED = False

class Builtins:
    functions: Dict[str, MkBuiltin] = {}

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_builtin hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("monkey_ref.stdlib")
    _STDLIB_INITIALIZED = True

def register_builtin(name: str):
    def dec(fn: BuiltinFn):
        Builtins.functions[name] = MkBuiltin(fn=fn, name=name)
        return fn

    return dec

def lookup_builtin(name: str) -> Optional[MkBuiltin]:
    init_stdlib()
    return Builtins.functions.get(name)

def apply_function(fn: MkValue, args: List[MkValue]) -> MkValue:
    """
    Call semantics:
    - MkFunction: fresh scope enclosed by the closure scope, params bound
      positionally, body evaluated, a `return` wrapper unwrapped.
    - MkBuiltin: native function gets the evaluated args as-is.
    """
    from .evaluator import eval_node  # local import to avoid cycle

    match fn:
        case MkFunction():
            extended_env = extend_function_env(fn, args)
            evaluated = eval_node(fn.body, extended_env)
            return unwrap_return_value(_ensure_mk_value(evaluated))
        case MkBuiltin():
            return _ensure_mk_value(fn.fn(*args))
        case _:
            return new_error(f"not a function {fn.type()}")

def extend_function_env(fn: MkFunction, args: List[MkValue]) -> Environment:
    # Extra args are ignored; params without an arg stay unbound.
    env = new_enclosed_environment(fn.env)

    for param, arg in zip(fn.parameters, args):
        env.set(param.value, arg)

    return env

def unwrap_return_value(obj: MkValue) -> MkValue:
    if isinstance(obj, MkReturnValue):
        return obj.value

    return obj
