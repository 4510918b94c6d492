from __future__ import annotations

import os
from typing import List, Optional

from .types import MkValue

DEBUG_PY_TRACE_ENV = "MONKEY_DEBUG_PY_TRACE"

MONKEY_FACE = r'''            __,__
   .--.  .-"     "-.  .--.
  / .. \/  .-. .-.  \/ .. \
 | |  '|  /   Y   \  |'  | |
 | \   \  \ 0 | 0 /  /   / |
  \ '- ,\.-"""""""-./, -' /
   ''-' /_   ^ ^   _\ '-''
       |  \._   _./  |
       \   \ '~' /   /
        '._ '-=-' _.'
           '-----'
'''

def debug_py_trace_enabled() -> bool:
    return os.environ.get(DEBUG_PY_TRACE_ENV, "") not in ("", "0")

def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        os.environ[DEBUG_PY_TRACE_ENV] = "1"
    else:
        os.environ.pop(DEBUG_PY_TRACE_ENV, None)

def format_parse_errors(errors: List[str]) -> str:
    """Banner plus one tab-indented line per accumulated parser message."""
    lines = [MONKEY_FACE, "Whoops! We ran into some monkey business here!", " parser errors:"]
    lines.extend(f"\t{msg}" for msg in errors)
    return "\n".join(lines)

def inspect_or_none(value: Optional[MkValue]) -> Optional[str]:
    """inspect() of an evaluation result, or None when nothing was produced."""
    if value is None:
        return None

    return value.inspect()
