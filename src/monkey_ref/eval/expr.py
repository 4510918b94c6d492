from __future__ import annotations

from typing import Callable, Dict

from ..tree import InfixExpression, PrefixExpression
from ..types import Environment, MkBoolean, MkInteger, MkNull, MkString, MkValue
from .helpers import EvalFunc, eval_value, is_signal, is_truthy, native_bool_to_boolean, new_error

_INT64_MASK = (1 << 64) - 1
_INT64_SIGN = 1 << 63

def wrap_int64(value: int) -> int:
    """Two's-complement wrap into the signed 64-bit range."""
    value &= _INT64_MASK
    return value - (1 << 64) if value & _INT64_SIGN else value

def _trunc_div(lhs: int, rhs: int) -> int:
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs < 0) == (rhs < 0) else -quotient

# ---------------- Prefix ----------------

def eval_prefix(node: PrefixExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    right = eval_value(node.right, env, eval_func)
    if is_signal(right):
        return right

    return apply_prefix_operator(node.operator, right)

def apply_prefix_operator(op: str, right: MkValue) -> MkValue:
    match op:
        case '!':
            return native_bool_to_boolean(not is_truthy(right))
        case '-':
            if not isinstance(right, MkInteger):
                return new_error(f"unknown operator: -{right.type()}")
            return MkInteger(wrap_int64(-right.value))
        case _:
            return new_error(f"unknown operator: {op}{right.type()}")

# ---------------- Infix ----------------

def eval_infix(node: InfixExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    left = eval_value(node.left, env, eval_func)
    if is_signal(left):
        return left

    right = eval_value(node.right, env, eval_func)
    if is_signal(right):
        return right

    return apply_binary_operator(node.operator, left, right)

def apply_binary_operator(op: str, left: MkValue, right: MkValue) -> MkValue:
    match (left, right):
        case (MkInteger(), MkInteger()):
            return _integer_infix(op, left, right)
        case (MkString(), MkString()):
            return _string_infix(op, left, right)

    if op == '==':
        return native_bool_to_boolean(_same_object(left, right))
    if op == '!=':
        return native_bool_to_boolean(not _same_object(left, right))

    if left.type() != right.type():
        return new_error(f"type mismatch: {left.type()} {op} {right.type()}")

    return new_error(f"unknown operator: {left.type()} {op} {right.type()}")

def _same_object(left: MkValue, right: MkValue) -> bool:
    # Booleans and null are value types; everything else compares by identity.
    if isinstance(left, (MkBoolean, MkNull)):
        return left == right
    return left is right

_INT_ARITH: Dict[str, Callable[[int, int], int]] = {
    '+': lambda a, b: a + b,
    '-': lambda a, b: a - b,
    '*': lambda a, b: a * b,
    '/': _trunc_div,
}

_INT_COMPARE: Dict[str, Callable[[int, int], bool]] = {
    '<': lambda a, b: a < b,
    '>': lambda a, b: a > b,
    '==': lambda a, b: a == b,
    '!=': lambda a, b: a != b,
}

def _integer_infix(op: str, left: MkInteger, right: MkInteger) -> MkValue:
    arith = _INT_ARITH.get(op)
    if arith is not None:
        if op == '/' and right.value == 0:
            return new_error(f"division by zero: {left.type()} / {right.type()}")
        return MkInteger(wrap_int64(arith(left.value, right.value)))

    compare = _INT_COMPARE.get(op)
    if compare is not None:
        return native_bool_to_boolean(compare(left.value, right.value))

    return new_error(f"unknown operator: {left.type()} {op} {right.type()}")

def _string_infix(op: str, left: MkString, right: MkString) -> MkValue:
    if op != '+':
        return new_error(f"unknown operator: {left.type()} {op} {right.type()}")

    return MkString(left.value + right.value)
