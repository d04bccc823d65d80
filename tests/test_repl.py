import io
import logging

import pytest

from malt import repl as repl_module
from malt.errors import NestingTooDeep, ReadFailure, ReadInterrupt
from malt.repl import LineReader, evaluate, rep, repl
from malt.types.symbol import Symbol
from malt.types.values import List


def test_evaluate_is_identity():
    form = Symbol("x")
    assert evaluate(form) is form


@pytest.mark.parametrize(
    "line, expected",
    [
        ("(+ 1 2)", ["(+ 1 2)"]),
        ("  (a   ,b)  ", ["(a b)"]),
        ("a b", ["a", "b"]),
        ("'x", ["(quote x)"]),
        ('^{"a" 1} x', ['(with-meta x {"a" 1})']),
        ("; nothing", []),
        ("", []),
    ]
)
def test_rep(line, expected):
    assert rep(line) == expected


def test_repl_echoes_forms_until_interrupt(scripted_reader):
    out = io.StringIO()
    reader = scripted_reader(["(a b)", "[1 2] c"])
    status = repl(reader, out)
    assert status == 0
    assert out.getvalue() == "(a b)\n[1 2]\nc\n"
    assert reader.prompts == ["user> ", "user> ", "user> "]


def test_repl_reports_reader_errors_and_continues(scripted_reader):
    out = io.StringIO()
    status = repl(scripted_reader(["(+ 1 2", '"abc', "ok"]), out)
    assert status == 0
    lines = out.getvalue().splitlines()
    assert lines[0].startswith("error: Unbalanced list")
    assert lines[1].startswith("error: Unbalanced string")
    assert lines[2] == "ok"


@pytest.mark.parametrize("signal", [EOFError(), KeyboardInterrupt()])
def test_interrupt_ends_session_cleanly(scripted_reader, signal):
    out = io.StringIO()
    assert repl(scripted_reader(["a", signal, "never read"]), out) == 0
    assert out.getvalue() == "a\n"


def test_io_failure_ends_session_with_failure(scripted_reader, caplog):
    out = io.StringIO()
    with caplog.at_level(logging.ERROR, logger="malt.repl"):
        status = repl(scripted_reader([OSError("stdin went away")]), out)
    assert status == 1
    assert out.getvalue() == "Error reading stdin: stdin went away\n"
    assert "stdin went away" in caplog.text


def test_line_reader_translates_errors(scripted_reader):
    reader = scripted_reader([KeyboardInterrupt(), OSError("boom")])
    with pytest.raises(ReadInterrupt):
        reader.read_line()
    with pytest.raises(ReadFailure, match="boom"):
        reader.read_line()


def test_line_reader_uses_configured_prompt(monkeypatch):
    monkeypatch.setenv("MALT_PROMPT", "malt> ")
    assert LineReader(input_fn=lambda p: "").prompt == "malt> "
    assert LineReader(prompt="x> ", input_fn=lambda p: "").prompt == "x> "


def test_line_reader_creates_missing_history_file(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(repl_module.readline, "parse_and_bind", calls.append)
    history = tmp_path / "history"
    reader = LineReader(prompt="> ", history_file=history, input_fn=lambda p: "x")
    reader.start()
    assert history.exists()
    assert calls == ["set bell-style none"]


def test_main_uses_configured_log_level(monkeypatch):
    seen = {}
    monkeypatch.setenv("MALT_LOG_LEVEL", "debug")
    monkeypatch.setattr(repl_module.logging, "basicConfig", lambda **kw: seen.update(kw))
    monkeypatch.setattr(repl_module, "repl", lambda: 7)
    assert repl_module.main() == 7
    assert seen["level"] == logging.DEBUG


def test_repl_survives_deep_nesting(scripted_reader):
    out = io.StringIO()
    status = repl(scripted_reader(["(" * 5000 + ")" * 5000, "ok"]), out)
    assert status == 0
    lines = out.getvalue().splitlines()
    assert lines[0] == "error: Form nested too deeply"
    assert lines[1] == "ok"


def test_rep_reports_forms_too_deep_to_print(monkeypatch):
    form = Symbol("x")
    for _ in range(5000):
        form = List((form,))
    monkeypatch.setattr(repl_module, "read_str", lambda line: [form])
    with pytest.raises(NestingTooDeep):
        rep("ignored")


# ----------------------------------------
# History file
# ----------------------------------------
class FakeHistory:
    """Stand-in for readline's history list; input() would append to it."""

    def __init__(self, length=0):
        self.length = length
        self.loaded = []
        self.appended = []

    def install(self, monkeypatch):
        rl = repl_module.readline
        monkeypatch.setattr(rl, "parse_and_bind", lambda s: None)
        monkeypatch.setattr(rl, "read_history_file", self.loaded.append)
        monkeypatch.setattr(rl, "get_current_history_length", lambda: self.length)
        monkeypatch.setattr(rl, "append_history_file", lambda n, path: self.appended.append((n, path)))
        return self


def test_existing_history_is_loaded(tmp_path, monkeypatch):
    history = tmp_path / "history"
    history.write_text("(old form)\n")
    fake = FakeHistory(length=5).install(monkeypatch)
    reader = LineReader(prompt="> ", history_file=history, input_fn=lambda p: "x")
    reader.start()
    assert fake.loaded == [history]
    assert reader.hlen == 5


def test_new_lines_are_appended_to_history(tmp_path, monkeypatch):
    history = tmp_path / "history"
    fake = FakeHistory(length=5).install(monkeypatch)
    lines = iter(["(a)", "(b)"])

    def fake_input(prompt):
        fake.length += 1
        return next(lines)

    reader = LineReader(prompt="> ", history_file=history, input_fn=fake_input)
    reader.start()
    assert reader.read_line() == "(a)"
    assert reader.read_line() == "(b)"
    assert fake.appended == [(1, history), (1, history)]
    assert reader.hlen == 7


def test_blank_lines_do_not_touch_history(tmp_path, monkeypatch):
    fake = FakeHistory(length=3).install(monkeypatch)
    reader = LineReader(prompt="> ", history_file=tmp_path / "history", input_fn=lambda p: "")
    reader.start()
    reader.read_line()
    assert fake.appended == []


def test_no_history_file_means_no_history_io(monkeypatch):
    fake = FakeHistory(length=3).install(monkeypatch)
    reader = LineReader(prompt="> ", history_file=None, input_fn=lambda p: "a")
    reader.start()
    reader.read_line()
    assert fake.loaded == [] and fake.appended == []


def test_unreadable_history_fails_the_session(tmp_path, monkeypatch):
    history = tmp_path / "history"
    FakeHistory().install(monkeypatch)

    def deny(path):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(repl_module.readline, "read_history_file", deny)
    out = io.StringIO()
    reader = LineReader(prompt="> ", history_file=history, input_fn=lambda p: "never")
    assert repl(reader, out) == 1
    assert out.getvalue().startswith(f"Error reading stdin: Cannot read history file {history}")


def test_uncreatable_history_fails_start(tmp_path, monkeypatch):
    history = tmp_path / "missing-dir" / "history"
    FakeHistory().install(monkeypatch)

    def missing(path):
        raise FileNotFoundError(2, "No such file or directory")

    monkeypatch.setattr(repl_module.readline, "read_history_file", missing)
    reader = LineReader(prompt="> ", history_file=history, input_fn=lambda p: "x")
    with pytest.raises(ReadFailure, match="Cannot create history file"):
        reader.start()


def test_unwritable_history_fails_the_session(tmp_path, monkeypatch):
    history = tmp_path / "history"
    fake = FakeHistory().install(monkeypatch)

    def fake_input(prompt):
        fake.length += 1
        return "(a)"

    def deny(n, path):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(repl_module.readline, "append_history_file", deny)
    out = io.StringIO()
    reader = LineReader(prompt="> ", history_file=history, input_fn=fake_input)
    assert repl(reader, out) == 1
    assert out.getvalue().startswith(f"Error reading stdin: Cannot write history file {history}")
