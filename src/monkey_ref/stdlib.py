"""Built-in functions (len, puts, etc.) registered via register_builtin."""

from __future__ import annotations

from .eval.helpers import new_error
from .runtime import register_builtin
from .types import NULL, MkArray, MkInteger, MkString, MkValue

def _arity_error(got: int, want: int) -> MkValue:
    return new_error(f"wrong number of arguments. got={got}, want={want}")

def _array_arg_error(name: str, arg: MkValue) -> MkValue:
    return new_error(f"argument to '{name}' must be ARRAY, got {arg.type()}")

@register_builtin("len")
def builtin_len(*args: MkValue) -> MkValue:
    if len(args) != 1:
        return _arity_error(len(args), 1)

    match args[0]:
        case MkString(value=s):
            return MkInteger(len(s))
        case MkArray(elements=elements):
            return MkInteger(len(elements))
        case arg:
            return new_error(f"argument to 'len' not supported, got {arg.type()}")

@register_builtin("first")
def builtin_first(*args: MkValue) -> MkValue:
    if len(args) != 1:
        return _arity_error(len(args), 1)

    arr = args[0]
    if not isinstance(arr, MkArray):
        return _array_arg_error("first", arr)

    return arr.elements[0] if arr.elements else NULL

@register_builtin("last")
def builtin_last(*args: MkValue) -> MkValue:
    if len(args) != 1:
        return _arity_error(len(args), 1)

    arr = args[0]
    if not isinstance(arr, MkArray):
        return _array_arg_error("last", arr)

    return arr.elements[-1] if arr.elements else NULL

@register_builtin("rest")
def builtin_rest(*args: MkValue) -> MkValue:
    if len(args) != 1:
        return _arity_error(len(args), 1)

    arr = args[0]
    if not isinstance(arr, MkArray):
        return _array_arg_error("rest", arr)

    if not arr.elements:
        return NULL

    return MkArray(list(arr.elements[1:]))

@register_builtin("push")
def builtin_push(*args: MkValue) -> MkValue:
    if len(args) != 2:
        return _arity_error(len(args), 2)

    arr, item = args
    if not isinstance(arr, MkArray):
        return _array_arg_error("push", arr)

    # Arrays are values: the input array is left untouched.
    return MkArray([*arr.elements, item])

@register_builtin("puts")
def builtin_puts(*args: MkValue) -> MkValue:
    for arg in args:
        print(arg.inspect())

    return NULL
