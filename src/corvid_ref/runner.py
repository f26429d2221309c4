from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .evaluator import evaluate
from .parser import ParseError, parse_source
from .runtime import CorvidRuntimeError, Frame, Scoping, Value
from .tree import pretty
from .utils import debug_logging_enabled

def run(src: str, frame: Optional[Frame]=None) -> Value:
    """Parse `src` and evaluate it; a fresh root frame is used when none is given."""
    if frame is None:
        frame = Frame()

    ast = parse_source(src)
    logger.opt(lazy=True).debug("parsed tree:\n{}", lambda: pretty(ast))

    result = evaluate(ast, frame)
    logger.debug("evaluation finished with {}", type(result).__name__)

    return result

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Otherwise treat the argument as a path.
    """

    if arg is None or arg == "-":
        return sys.stdin.read()

    candidate = Path(arg)
    if not candidate.exists():
        raise SystemExit(f"No such file: {arg}")

    return candidate.read_text(encoding="utf-8")

def configure_logging(debug: bool) -> None:
    level = "DEBUG" if debug or debug_logging_enabled() else "WARNING"
    logger.remove()
    logger.add(sys.stderr, level=level, format="{level} {name}: {message}", backtrace=False, diagnose=False)

def main(argv: Optional[List[str]]=None) -> int:
    scoping: Optional[Scoping] = None
    debug = False
    inline_src: Optional[str] = None
    arg = None
    it = iter(sys.argv[1:] if argv is None else argv)

    for token in it:
        if token == "--debug":
            debug = True
            continue

        if token.startswith("--scoping=") or token == "--scoping":
            if "=" in token:
                value = token.split("=", 1)[1]
            else:
                try:
                    value = next(it)
                except StopIteration:
                    raise SystemExit("--scoping flag requires a value") from None
            try:
                scoping = Scoping.parse(value)
            except ValueError as exc:
                raise SystemExit(str(exc)) from None
            continue

        if token in ("-e", "--eval"):
            try:
                inline_src = next(it)
            except StopIteration:
                raise SystemExit(f"{token} flag requires source text") from None
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    configure_logging(debug)

    if inline_src is None and arg is None and sys.stdin.isatty():
        from .repl import repl
        repl(scoping=scoping)
        return 0

    source = inline_src if inline_src is not None else _load_source(arg)
    frame = Frame(out=sys.stdout, scoping=scoping)

    try:
        run(source, frame)
    except (ParseError, CorvidRuntimeError) as exc:
        logger.opt(exception=True).debug("evaluation aborted")
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
