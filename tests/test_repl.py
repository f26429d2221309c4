from __future__ import annotations

import io

import pytest

from tests.support.harness import CvInt, Scoping
from corvid_ref.repl import Repl, _normalize, open_depth


@pytest.mark.parametrize(
    "text, expected",
    [
        pytest.param("x = 1", 0, id="flat"),
        pytest.param("fn f() {", 1, id="open-brace"),
        pytest.param("xs = [[1, 2]", 1, id="open-bracket"),
        pytest.param("f(g(", 2, id="open-parens"),
        pytest.param('s = "{"', 0, id="brace-in-string"),
        pytest.param('s = "\\"{"', 0, id="escaped-quote-in-string"),
        pytest.param("x = 1 # {", 0, id="brace-in-comment"),
        pytest.param("# {\n{", 1, id="comment-ends-at-newline"),
        pytest.param("}}", 0, id="never-negative"),
        pytest.param("}{", 1, id="stray-closer-then-opener"),
    ],
)
def test_open_depth(text: str, expected: int) -> None:
    assert open_depth(text) == expected


def _session(scoping: Scoping = Scoping.DYNAMIC) -> tuple[Repl, io.StringIO]:
    out = io.StringIO()
    return Repl(scoping, out=out), out


def test_source_is_not_a_command() -> None:
    session, _ = _session()
    assert session.handle_command("x = 1") is False


def test_submit_echoes_values_but_not_none() -> None:
    session, out = _session()
    session.submit("x = 40")
    session.submit('println("side")')
    session.submit("x + 2")
    assert out.getvalue() == "40\nside\n42\n"


def test_bindings_persist_across_inputs() -> None:
    session, _ = _session()
    session.submit("fn double(n) { n * 2 }")
    session.submit("y = double(21)")
    assert session.frame.lookup("y") == CvInt(42)


def test_errors_keep_the_session(capsys: pytest.CaptureFixture[str]) -> None:
    session, out = _session()
    session.submit("x = 1")
    session.submit("x / 0")
    session.submit("1 +")
    session.submit("x")

    err = capsys.readouterr().err
    assert "Error: Cannot divide by zero." in err
    assert "Error: Unexpected end of input" in err
    assert out.getvalue().endswith("1\n")


def test_reset_drops_bindings_and_keeps_scoping() -> None:
    session, out = _session(Scoping.GLOBAL)
    session.submit("x = 1")
    old = session.frame

    assert session.handle_command("/reset") is True
    assert session.frame is not old
    assert "x" not in session.frame.vars
    assert session.frame.scoping is Scoping.GLOBAL
    assert out.getvalue().endswith("Environment reset.\n")


def test_scoping_command() -> None:
    session, out = _session()

    session.handle_command("/scoping global")
    assert session.frame.scoping is Scoping.GLOBAL

    session.handle_command("/scoping")
    assert out.getvalue() == "Scoping: global\nScoping: global\n"


def test_scoping_command_rejects_unknown(capsys: pytest.CaptureFixture[str]) -> None:
    session, _ = _session()
    session.handle_command("/scoping lexical")
    assert session.frame.scoping is Scoping.DYNAMIC
    assert "Unknown scoping policy" in capsys.readouterr().err


def test_py_traceback_toggle() -> None:
    session, out = _session()

    session.handle_command("/py-traceback on")
    session.handle_command("/py-traceback")
    session.handle_command("/py-traceback yes")
    assert out.getvalue() == (
        "Python traceback: on\nPython traceback: off\nPython traceback: on\n"
    )


def test_py_traceback_printed_on_error(capsys: pytest.CaptureFixture[str]) -> None:
    session, _ = _session()
    session.handle_command("/py-traceback on")
    session.submit("missing")
    assert "Python traceback:" in capsys.readouterr().err


def test_unknown_command(capsys: pytest.CaptureFixture[str]) -> None:
    session, _ = _session()
    assert session.handle_command("/nope") is True
    assert "Unknown command: /nope" in capsys.readouterr().err


def test_normalize_strips_invisible_characters() -> None:
    assert _normalize("x\u200b = 1\r") == "x = 1"
