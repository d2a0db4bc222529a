import json
import logging
from pathlib import Path
from typing import Any

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from kscope import kscope_cli

PROGRAM = "extern sin(x);\ndef twice(x) x*2;\ntwice(3)\n"


def test_run_string_reports_on_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    status = kscope_cli.run_kscope(PROGRAM, is_string=True)
    captured = capsys.readouterr()
    assert status == 0
    assert captured.out == ""
    assert captured.err.splitlines() == [
        "Parsed an extern",
        "Parsed a function definition.",
        "Parsed a top-level expr",
    ]


def test_run_string_dump(capsys: pytest.CaptureFixture[str]) -> None:
    kscope_cli.run_kscope("def add(a b) a+b", is_string=True, dump=True)
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 1
    node = json.loads(lines[0])
    assert node["kind"] == "function"
    assert node["prototype"]["name"] == "add"
    assert node["prototype"]["params"] == ["a", "b"]
    assert node["body"]["op"] == "+"


def test_run_reports_errors_and_fails(capsys: pytest.CaptureFixture[str]) -> None:
    status = kscope_cli.run_kscope("foo(; 1", is_string=True, dump=True)
    captured = capsys.readouterr()
    assert status == 1
    assert "Error: Unknown token when expecting an expression." in captured.err
    assert "Parsed a top-level expr" in captured.err
    assert len(captured.out.splitlines()) == 1


def test_run_file_input(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "prog.ks"
    path.write_text(PROGRAM, encoding="utf-8")
    assert kscope_cli.run_kscope(str(path)) == 0
    assert "Parsed an extern" in capsys.readouterr().err


def test_run_rejects_other_suffixes(tmp_path: Path) -> None:
    path = tmp_path / "prog.txt"
    path.write_text(PROGRAM, encoding="utf-8")
    with pytest.raises(ValueError, match="Only .ks files"):
        kscope_cli.run_kscope(str(path))


def test_main_with_string(capsys: pytest.CaptureFixture[str]) -> None:
    assert kscope_cli.main(["-s", "1+2", "--dump"]) == 0
    out = capsys.readouterr().out
    assert json.loads(out)["body"]["kind"] == "binary"


def test_main_without_source_starts_repl(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[bool] = []
    monkeypatch.setattr(kscope_cli, "start_repl", lambda: calls.append(True))
    assert kscope_cli.main([]) == 0
    assert kscope_cli.main(["--repl"]) == 0
    assert calls == [True, True]


def test_main_verbose_configures_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, Any] = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: seen.update(kw))
    kscope_cli.main(["-s", "1", "--verbose"])
    assert seen["level"] == logging.DEBUG


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])  # type: ignore[misc]
@given(st.text(alphabet="xy09.(),+*-<;#\n ", max_size=30))  # type: ignore[misc]
def test_run_never_raises(capsys: pytest.CaptureFixture[str], source: str) -> None:
    status = kscope_cli.run_kscope(source, is_string=True, dump=True)
    captured = capsys.readouterr()
    assert status in (0, 1)
    assert (status == 1) == ("Error:" in captured.err)
    for line in captured.out.splitlines():
        json.loads(line)


def test_dump_of_very_long_sum_reports_error(capsys: pytest.CaptureFixture[str]) -> None:
    source = "+".join(["1"] * 5000)
    status = kscope_cli.run_kscope(source, is_string=True, dump=True)
    captured = capsys.readouterr()
    assert status == 1
    assert "Parsed a top-level expr" in captured.err
    assert "Error: AST too deep to dump (line 1, col 9998)" in captured.err
    assert captured.out == ""
