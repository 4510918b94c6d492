from __future__ import annotations

from typing import Dict

from ..tree import ArrayLiteral, HashLiteral, IndexExpression
from ..types import NULL, Environment, HashKey, HashPair, MkArray, MkHash, MkInteger, MkValue, hash_key_of
from .helpers import EvalFunc, eval_expressions, eval_value, is_signal, new_error

def eval_array_literal(node: ArrayLiteral, env: Environment, eval_func: EvalFunc) -> MkValue:
    elements, signal = eval_expressions(node.elements, env, eval_func)
    if signal is not None:
        return signal

    return MkArray(elements)

def eval_hash_literal(node: HashLiteral, env: Environment, eval_func: EvalFunc) -> MkValue:
    """Keys then values, pair by pair; a repeated key overwrites the earlier entry."""
    pairs: Dict[HashKey, HashPair] = {}

    for key_node, value_node in node.pairs:
        key = eval_value(key_node, env, eval_func)
        if is_signal(key):
            return key

        hashed = hash_key_of(key)
        if hashed is None:
            return new_error(f"unusable as hash key: {key.type()}")

        value = eval_value(value_node, env, eval_func)
        if is_signal(value):
            return value

        pairs[hashed] = HashPair(key=key, value=value)

    return MkHash(pairs)

def eval_index_expression(node: IndexExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    left = eval_value(node.left, env, eval_func)
    if is_signal(left):
        return left

    index = eval_value(node.index, env, eval_func)
    if is_signal(index):
        return index

    return index_value(left, index)

def index_value(left: MkValue, index: MkValue) -> MkValue:
    match (left, index):
        case (MkArray(elements=elements), MkInteger(value=idx)):
            # Out of range is null, never an error.
            if idx < 0 or idx >= len(elements):
                return NULL
            return elements[idx]
        case (MkHash(), _):
            return _hash_index(left, index)
        case _:
            return new_error(f"index operator not supported: {left.type()}")

def _hash_index(hash_obj: MkHash, index: MkValue) -> MkValue:
    hashed = hash_key_of(index)
    if hashed is None:
        return new_error(f"unusable as hash key: {index.type()}")

    pair = hash_obj.pairs.get(hashed)
    if pair is None:
        return NULL

    return pair.value
