from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from monkey_ref.lexer_rd import Lexer
from monkey_ref.parser_rd import ParseError, Parser, parse_source as parse_program
from monkey_ref.runner import run as run_program
from monkey_ref.tree import Program
from monkey_ref.types import (
    MkArray,
    MkBoolean,
    MkError,
    MkFunction,
    MkHash,
    MkInteger,
    MkNull,
    MkString,
    MkValue,
)

__all__ = [
    "ParseError",
    "parse_errors",
    "parse_program",
    "run_program",
    "run_runtime_case",
    "single_expression",
    "verify_result",
]

RuntimeExpectation = Optional[Tuple[str, object]]


def parse_errors(source: str) -> List[str]:
    """Parse without raising and return the accumulated error messages."""
    parser = Parser(Lexer(source))
    parser.parse_program()
    return parser.get_errors()


def single_expression(source: str) -> object:
    """Parse a one-statement program and return its expression node."""
    program: Program = parse_program(source)
    assert len(program.statements) == 1, f"expected 1 statement, got {len(program.statements)}"
    return program.statements[0].expression


def _plain(value: MkValue) -> object:
    """Python shape of a Monkey value for comparisons in expectations."""
    match value:
        case MkInteger(value=v) | MkString(value=v) | MkBoolean(value=v):
            return v
        case MkNull():
            return None
        case MkArray(elements=elements):
            return [_plain(e) for e in elements]
        case MkHash(pairs=pairs):
            return {_plain(p.key): _plain(p.value) for p in pairs.values()}
        case _:
            return value.inspect()


def verify_result(value: Optional[MkValue], kind: str, expected: object) -> None:
    """Assert evaluation result shape/value against a (kind, expected) pair."""
    match kind:
        case "int":
            assert isinstance(
                value, MkInteger
            ), f"expected MkInteger, got {type(value).__name__}"
            assert value.value == expected, f"expected {expected}, got {value.value}"
            return
        case "bool":
            assert isinstance(
                value, MkBoolean
            ), f"expected MkBoolean, got {type(value).__name__}"
            assert value.value is expected, f"expected {expected}, got {value.value}"
            return
        case "string":
            assert isinstance(
                value, MkString
            ), f"expected MkString, got {type(value).__name__}"
            assert value.value == expected, f"expected {expected!r}, got {value.value!r}"
            return
        case "null":
            assert isinstance(
                value, MkNull
            ), f"expected MkNull, got {type(value).__name__}"
            return
        case "none":
            assert value is None, f"expected no value, got {value!r}"
            return
        case "array":
            assert isinstance(
                value, MkArray
            ), f"expected MkArray, got {type(value).__name__}"
            actual = _plain(value)
            assert actual == expected, f"expected {expected!r}, got {actual!r}"
            return
        case "hash":
            assert isinstance(
                value, MkHash
            ), f"expected MkHash, got {type(value).__name__}"
            actual = _plain(value)
            assert actual == expected, f"expected {expected!r}, got {actual!r}"
            return
        case "fn":
            assert isinstance(
                value, MkFunction
            ), f"expected MkFunction, got {type(value).__name__}"
            assert value.inspect() == expected, f"expected {expected!r}, got {value.inspect()!r}"
            return
        case "error":
            assert isinstance(
                value, MkError
            ), f"expected MkError, got {type(value).__name__}: {value!r}"
            assert value.message == expected, f"expected {expected!r}, got {value.message!r}"
            return
        case "inspect":
            assert value is not None, "expected a value, got None"
            assert value.inspect() == expected, f"expected {expected!r}, got {value.inspect()!r}"
            return
        case _:
            raise AssertionError(f"unknown expectation kind {kind}")


def run_runtime_case(
    source: str,
    expectation: RuntimeExpectation,
    expected_exc: Optional[type],
) -> None:
    """Execute one runtime scenario with optional expected exception."""
    if expected_exc is not None:
        with pytest.raises(expected_exc):
            run_program(source)
        return

    result = run_program(source)
    if expectation is not None:
        verify_result(result, expectation[0], expectation[1])
