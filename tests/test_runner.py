from __future__ import annotations

import io
import sys
from pathlib import Path

import pytest

from tests.support.harness import ParseError, run_program
from monkey_ref.repl import ReplState, _SlashCompleter, bracket_depth, eval_line, handle_slash
from monkey_ref.repl_highlight import GROUP_STYLE, MonkeyLexer, _highlight_line
from monkey_ref.runner import _load_source, main, repl_eval
from monkey_ref.types import MkInteger, new_environment
from monkey_ref.utils import (
    DEBUG_PY_TRACE_ENV,
    MONKEY_FACE,
    debug_py_trace_enabled,
    format_parse_errors,
    inspect_or_none,
)
from prompt_toolkit.document import Document


def _run_main(monkeypatch: pytest.MonkeyPatch, *argv: str) -> None:
    monkeypatch.setattr(sys, "argv", ["monkey", *argv])
    main()


def test_run_uses_fresh_environment_by_default() -> None:
    assert run_program("let x = 1;") is None

    with_x = run_program("x")
    assert with_x.message == "identifier not found: x"


def test_repl_eval_shares_environment() -> None:
    env = new_environment()

    assert repl_eval("let a = 2;", env) is None
    assert repl_eval("a * 21", env).value == 42


def test_run_raises_parse_error() -> None:
    with pytest.raises(ParseError) as exc_info:
        run_program("let x 1;")

    assert exc_info.value.errors == ["expected next token to be =, got INT instead"]


def test_load_source_literal_and_file(tmp_path: Path) -> None:
    script = tmp_path / "prog.monkey"
    script.write_text("let a = 1; a + 1", encoding="utf-8")

    assert _load_source(str(script)) == "let a = 1; a + 1"
    assert _load_source("1 + 2") == "1 + 2"


def test_load_source_stdin(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO("5 * 5"))
    assert _load_source("-") == "5 * 5"

    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    with pytest.raises(SystemExit):
        _load_source(None)


def test_main_prints_inspect(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    _run_main(monkeypatch, "let xs = [1, 2]; push(xs, 3)")
    assert capsys.readouterr().out == "[1, 2, 3]\n"


def test_main_prints_nothing_for_no_value(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    _run_main(monkeypatch, "let x = 1;")
    assert capsys.readouterr().out == ""


def test_main_runs_file(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    script = tmp_path / "hello.monkey"
    script.write_text('puts("hi"); len("four")', encoding="utf-8")

    _run_main(monkeypatch, str(script))
    assert capsys.readouterr().out == "hi\n4\n"


def test_main_error_value_exits_nonzero(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        _run_main(monkeypatch, "5 + true")

    assert exc_info.value.code == 1
    assert capsys.readouterr().out == "Error: type mismatch: INTEGER + BOOLEAN\n"


def test_main_parse_error_exits_nonzero(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        _run_main(monkeypatch, "let = 1;")

    assert exc_info.value.code == 1
    err = capsys.readouterr().err
    assert "Whoops! We ran into some monkey business here!" in err
    assert "\texpected next token to be IDENT, got = instead" in err


def test_main_ast_dump(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    _run_main(monkeypatch, "--ast", "let x = 1 + 2;")
    out = capsys.readouterr().out

    assert out.splitlines()[0] == "program"
    assert "let" in out
    assert "infix" in out


def test_main_token_dump(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    _run_main(monkeypatch, "--tokens", "let x")
    lines = capsys.readouterr().out.splitlines()

    assert lines == ["1:1\tLET\t'let'", "1:5\tIDENT\t'x'", "1:6\tEOF\t''"]


@pytest.mark.parametrize(
    "argv",
    [
        pytest.param(("--bogus", "1"), id="unknown-flag"),
        pytest.param(("1", "2"), id="extra-argument"),
    ],
)
def test_main_rejects_bad_arguments(monkeypatch: pytest.MonkeyPatch, argv) -> None:
    with pytest.raises(SystemExit):
        _run_main(monkeypatch, *argv)


def test_format_parse_errors() -> None:
    rendered = format_parse_errors(["first", "second"])
    lines = rendered.splitlines()

    assert rendered.startswith(MONKEY_FACE)
    assert lines[-4:] == [
        "Whoops! We ran into some monkey business here!",
        " parser errors:",
        "\tfirst",
        "\tsecond",
    ]


def test_inspect_or_none() -> None:
    assert inspect_or_none(None) is None
    assert inspect_or_none(MkInteger(3)) == "3"


@pytest.mark.parametrize(
    "text, depth",
    [
        pytest.param("let x = 1;", 0, id="balanced"),
        pytest.param("let f = fn(x) {", 1, id="open-brace"),
        pytest.param("[1, {", 2, id="nested-open"),
        pytest.param("fn(x) { [x] }", 0, id="closed"),
        pytest.param("}}", 0, id="never-negative"),
        pytest.param('"{"', 0, id="brace-in-string"),
    ],
)
def test_bracket_depth(text: str, depth: int) -> None:
    assert bracket_depth(text) == depth


def test_repl_eval_line_prints_results(capsys: pytest.CaptureFixture[str]) -> None:
    state = ReplState()

    eval_line("let add = fn(a, b) { a + b };", state)
    eval_line("add(1, 2)", state)
    eval_line("add(1, true)", state)

    assert capsys.readouterr().out.splitlines() == ["3", "Error: type mismatch: INTEGER + BOOLEAN"]


def test_repl_eval_line_reports_parse_errors(capsys: pytest.CaptureFixture[str]) -> None:
    state = ReplState()
    eval_line("let x 5;", state)

    out = capsys.readouterr().out
    assert "Whoops! We ran into some monkey business here!" in out
    assert "\texpected next token to be =, got INT instead" in out
    assert state.env.get("x") is None


def test_repl_slash_reset_and_ast(capsys: pytest.CaptureFixture[str]) -> None:
    state = ReplState()
    eval_line("let x = 1;", state)
    assert state.env.get("x") is not None

    assert handle_slash("/reset", state)
    assert state.env.get("x") is None

    assert handle_slash("/ast on", state)
    assert state.show_ast
    eval_line("1 + 2 * 3", state)

    assert handle_slash("/ast", state)
    assert not state.show_ast

    out = capsys.readouterr().out.splitlines()
    assert out == ["Environment reset.", "AST echo: on", "(1 + (2 * 3))", "7", "AST echo: off"]


def test_repl_slash_py_traceback(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.delenv(DEBUG_PY_TRACE_ENV, raising=False)
    state = ReplState()

    assert handle_slash("/py-traceback on", state)
    assert debug_py_trace_enabled()
    assert handle_slash("/py-traceback", state)
    assert not debug_py_trace_enabled()
    assert handle_slash("/py-traceback maybe", state)

    captured = capsys.readouterr()
    assert captured.out.splitlines() == ["Python traceback: on", "Python traceback: off"]
    assert "Usage: /py-traceback [on|off]" in captured.err


def test_repl_slash_unknown_and_plain_input(capsys: pytest.CaptureFixture[str]) -> None:
    state = ReplState()

    assert not handle_slash("1 + 1", state)
    assert handle_slash("/nope", state)
    assert "Unknown command: /nope" in capsys.readouterr().err


def test_highlight_line_styles_tokens() -> None:
    fragments = _highlight_line('let s = len("hi");')

    assert "".join(text for _, text in fragments) == 'let s = len("hi");'
    assert (GROUP_STYLE["keyword"], "let") in fragments
    assert (GROUP_STYLE["builtin"], "len") in fragments
    assert (GROUP_STYLE["string"], '"hi"') in fragments


def test_highlight_lexer_document() -> None:
    get_line = MonkeyLexer().lex_document(Document("let a = 1;\n@"))

    assert get_line(0)[0] == (GROUP_STYLE["keyword"], "let")
    assert get_line(1) == [(GROUP_STYLE["error"], "@")]
    assert get_line(5) == [("", "")]


DEEP_NESTING = "let a = [1]; " + "let a = [a]; " * 5000 + "a"


def test_repl_survives_deep_render(capsys: pytest.CaptureFixture[str]) -> None:
    state = ReplState()

    eval_line(DEEP_NESTING, state)
    eval_line("len(a)", state)

    captured = capsys.readouterr()
    assert captured.err.startswith("Error: ")
    assert captured.out == "1\n"


def test_main_reports_deep_render(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        _run_main(monkeypatch, DEEP_NESTING)

    assert exc_info.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Error: ")


def test_long_literal_source_is_not_a_path(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    source = "let x = 1; " * 40 + "x"

    assert _load_source(source) == source

    _run_main(monkeypatch, source)
    assert capsys.readouterr().out == "1\n"


def test_slash_completion_shows_argument_hint() -> None:
    completions = list(_SlashCompleter().get_completions(Document("/a"), None))

    assert [c.text for c in completions] == ["/ast"]
    assert completions[0].display_text == "/ast [on|off]"
    assert completions[0].display_meta_text == "Echo the parsed program before evaluating"
