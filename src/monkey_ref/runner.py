from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import Optional

from .evaluator import evaluate
from .lexer_rd import tokenize
from .parser_rd import ParseError, parse_source
from .runtime import init_stdlib
from .tree import to_lark
from .types import Environment, MkError, MkValue, new_environment
from .utils import debug_py_trace_enabled, format_parse_errors, inspect_or_none

def run(src: str, env: Optional[Environment]=None) -> Optional[MkValue]:
    """Parse and evaluate *src*. Raises ParseError if the parser reported anything."""
    init_stdlib()

    program = parse_source(src)

    if env is None:
        env = new_environment()

    return evaluate(program, env)

def repl_eval(src: str, env: Environment) -> Optional[MkValue]:
    """Evaluate one REPL entry against the persistent session environment."""
    return run(src, env)

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    try:
        is_file = candidate.is_file()
    except OSError:
        # source longer than a path component, or otherwise not a usable path
        is_file = False

    if is_file:
        return candidate.read_text(encoding="utf-8")

    return arg

def _dump_tokens(source: str) -> None:
    for tok in tokenize(source):
        print(f"{tok.line}:{tok.column}\t{tok.type.name}\t{tok.literal!r}")

def main() -> None:
    show_ast = False
    show_tokens = False
    arg = None

    for token in sys.argv[1:]:
        if token == "--ast":
            show_ast = True
            continue

        if token == "--tokens":
            show_tokens = True
            continue

        if token.startswith("--"):
            raise SystemExit(f"Unknown flag: {token}")

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    source = _load_source(arg or "-")

    if show_tokens:
        _dump_tokens(source)
        return

    try:
        if show_ast:
            print(to_lark(parse_source(source)).pretty())
            return

        result = run(source)
        rendered = inspect_or_none(result)
    except ParseError as exc:
        print(format_parse_errors(exc.errors), file=sys.stderr)
        raise SystemExit(1) from None
    except RecursionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if debug_py_trace_enabled():
            traceback.print_exc()
        raise SystemExit(1) from None

    if rendered is None:
        return

    print(rendered)

    if isinstance(result, MkError):
        raise SystemExit(1)

if __name__ == "__main__":
    main()
