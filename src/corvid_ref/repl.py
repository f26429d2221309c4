"""Interactive Corvid session on top of prompt_toolkit.

Input is read until every bracket opened on the buffer is closed, then run
against one long-lived root frame. Lines starting with ``/`` are session
commands rather than Corvid source.
"""

from __future__ import annotations

import os
import re
import sys
import traceback
from typing import Callable, Dict, Iterable, Optional, Tuple

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .parser import ParseError
from .runner import configure_logging, run
from .runtime import CorvidRuntimeError, CvNone, Frame, Scoping
from .utils import debug_py_trace_enabled

# zero-width characters, BOM, nbsp, stray CR
_STRIP_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

_PAIRS = {"}": "{", "]": "[", ")": "("}

_TRUTHY = ("on", "1", "true", "yes")
_FALSY = ("off", "0", "false", "no")


def open_depth(text: str) -> int:
    """How many brackets are still open at the end of `text`.

    String literals and `#` comments are skipped; a stray closer never drives
    the count below zero.
    """
    depth = 0
    quote = False
    comment = False
    skip = False

    for ch in text:
        if skip:
            skip = False
        elif comment:
            comment = ch != "\n"
        elif quote:
            if ch == "\\":
                skip = True
            elif ch == '"':
                quote = False
        elif ch == '"':
            quote = True
        elif ch == "#":
            comment = True
        elif ch in _PAIRS.values():
            depth += 1
        elif ch in _PAIRS and depth:
            depth -= 1

    return depth


def _normalize(text: str) -> str:
    return _STRIP_RE.sub("", text)


class Repl:
    """State for one interactive session: the root frame and the command table."""

    def __init__(self, scoping: Optional[Scoping] = None, out=None):
        self.out = out if out is not None else sys.stdout
        self.frame = Frame(out=self.out, scoping=scoping)
        self.commands: Dict[str, Tuple[Callable[[str], None], str]] = {
            "/clear": (self._cmd_clear, "Clear the terminal screen"),
            "/py-traceback": (self._cmd_traceback, "Show Python tracebacks on errors [on|off]"),
            "/reset": (self._cmd_reset, "Drop every binding"),
            "/scoping": (self._cmd_scoping, "Show or set call scoping [dynamic|global]"),
        }

    # ---- commands ----

    def handle_command(self, line: str) -> bool:
        """Run `line` as a session command; False when it is ordinary source."""
        stripped = line.strip()
        if not stripped.startswith("/"):
            return False

        name, _, arg = stripped.partition(" ")
        entry = self.commands.get(name)
        if entry is None:
            print(f"Unknown command: {name}", file=sys.stderr)
            return True

        entry[0](arg.strip())
        return True

    def _cmd_clear(self, _arg: str) -> None:
        clear()

    def _cmd_traceback(self, arg: str) -> None:
        choice = arg.lower()
        if choice in _TRUTHY:
            enable = True
        elif choice in _FALSY:
            enable = False
        elif not choice:
            enable = not debug_py_trace_enabled()
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return

        if enable:
            os.environ["CORVID_DEBUG_PY_TRACE"] = "1"
        else:
            os.environ.pop("CORVID_DEBUG_PY_TRACE", None)

        print(f"Python traceback: {'on' if enable else 'off'}", file=self.out)

    def _cmd_reset(self, _arg: str) -> None:
        self.frame = Frame(out=self.out, scoping=self.frame.scoping)
        print("Environment reset.", file=self.out)

    def _cmd_scoping(self, arg: str) -> None:
        if arg:
            try:
                self.frame.scoping = Scoping.parse(arg)
            except ValueError as exc:
                print(exc, file=sys.stderr)
                return

        print(f"Scoping: {self.frame.scoping.value}", file=self.out)

    # ---- evaluation ----

    def submit(self, text: str) -> None:
        """Run one complete input and echo its value."""
        text = _normalize(text)
        if not text.strip() or self.handle_command(text):
            return

        try:
            result = run(text, self.frame)
        except (ParseError, CorvidRuntimeError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            if debug_py_trace_enabled():
                print("Python traceback:", file=sys.stderr)
                traceback.print_tb(exc.__traceback__, file=sys.stderr)
            return

        if not isinstance(result, CvNone):
            print(result, file=self.out)

    def loop(self) -> None:
        session: PromptSession[str] = PromptSession(
            history=InMemoryHistory(),
            completer=_CommandCompleter(self.commands.items()),
            complete_while_typing=True,
            key_bindings=_bindings(),
            multiline=True,
            prompt_continuation="... ",
        )

        print("corvid repl (Ctrl-D to exit, / for commands)", file=self.out)

        while True:
            try:
                text = session.prompt(">>> ")
            except KeyboardInterrupt:
                print("KeyboardInterrupt", file=self.out)
                continue
            except EOFError:
                print(file=self.out)
                return

            self.submit(text)


class _CommandCompleter(Completer):
    def __init__(self, commands: Iterable[Tuple[str, Tuple[Callable[[str], None], str]]]):
        self._commands = [(name, help_text) for name, (_, help_text) in commands]

    def get_completions(self, document, complete_event):
        typed = document.text_before_cursor
        if not typed.startswith("/"):
            return

        for name, help_text in self._commands:
            if name.startswith(typed):
                yield Completion(name, start_position=-len(typed), display_meta=help_text)


def _bindings() -> KeyBindings:
    bindings = KeyBindings()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        depth = open_depth(buf.text)

        if depth:
            buf.insert_text("\n" + "    " * depth)
        else:
            buf.validate_and_handle()

    return bindings


def repl(scoping: Optional[Scoping] = None) -> None:
    configure_logging(False)
    Repl(scoping).loop()


if __name__ == "__main__":
    repl()
