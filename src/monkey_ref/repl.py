"""Interactive REPL for Monkey, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
import traceback
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .lexer_rd import tokenize
from .parser_rd import ParseError, parse_source
from .repl_highlight import MonkeyLexer
from .runtime import init_stdlib
from .runner import repl_eval
from .token_types import TT
from .types import Environment, new_environment
from .utils import debug_py_trace_enabled, format_parse_errors, inspect_or_none, set_debug_py_trace

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/ast": ("Echo the parsed program before evaluating", "[on|off]"),
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}

_DEPTH_OPEN = {TT.LPAREN, TT.LBRACKET, TT.LBRACE}
_DEPTH_CLOSE = {TT.RPAREN, TT.RBRACKET, TT.RBRACE}

_ON = ("on", "1", "true", "yes")
_OFF = ("off", "0", "false", "no")


class ReplState:
    """Mutable session state so slash commands can swap the environment."""

    def __init__(self) -> None:
        self.env: Environment = new_environment()
        self.show_ast = False


def bracket_depth(text: str) -> int:
    """Net count of unclosed (, [ and { in *text*; never below zero."""
    depth = 0

    for tok in tokenize(text):
        if tok.type in _DEPTH_OPEN:
            depth += 1
        elif tok.type in _DEPTH_CLOSE:
            depth = max(depth - 1, 0)

    return depth


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display=f"{cmd} {hint}" if hint else cmd,
                    display_meta=desc,
                )


def _parse_switch(arg: str, current: bool) -> bool | None:
    """on/off argument, empty toggles; None for anything else."""
    lowered = arg.lower()
    if lowered in _ON:
        return True
    if lowered in _OFF:
        return False
    if arg == "":
        return not current
    return None


def handle_slash(line: str, state: ReplState) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1].strip() if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        enabled = _parse_switch(arg, debug_py_trace_enabled())
        if enabled is None:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        set_debug_py_trace(enabled)
        state_str = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state_str}")
        return True

    if cmd == "/ast":
        enabled = _parse_switch(arg, state.show_ast)
        if enabled is None:
            print("Usage: /ast [on|off]", file=sys.stderr)
            return True

        state.show_ast = enabled
        print(f"AST echo: {'on' if enabled else 'off'}")
        return True

    if cmd == "/reset":
        init_stdlib()
        state.env = new_environment()
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def eval_line(text: str, state: ReplState) -> None:
    """Evaluate one submitted entry and print its outcome."""
    try:
        if state.show_ast:
            print(parse_source(text).string())

        result = repl_eval(text, state.env)
        rendered = inspect_or_none(result)
    except ParseError as exc:
        print(format_parse_errors(exc.errors))
        return
    except RecursionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if debug_py_trace_enabled():
            print("\nPython traceback:", file=sys.stderr)
            print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")
        return

    if rendered is not None:
        print(rendered)


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    init_stdlib()
    state = ReplState()

    history = InMemoryHistory()
    lexer = MonkeyLexer()

    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        # Keep reading lines while a bracket is still open.
        if not text.lstrip().startswith("/") and bracket_depth(text) > 0:
            buf.insert_text("\n" + "    " * bracket_depth(text))
            return

        buf.validate_and_handle()

    session: PromptSession[str] = PromptSession(
        history=history,
        lexer=lexer,
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation=".. ",
    )

    print("monkey repl (Ctrl-D to exit, / for commands)")

    while True:
        try:
            text = session.prompt(">> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if handle_slash(text, state):
            continue

        eval_line(text, state)


if __name__ == "__main__":
    repl()
