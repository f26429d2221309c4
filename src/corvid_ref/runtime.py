from __future__ import annotations

import os
import sys
from enum import Enum
from typing import Dict, Mapping, Optional, TextIO

from .types import (
    NONE, CvNone, CvString, CvInt, CvFloat, CvBool, CvList, CvDict, CvRange, CvFn,
    Hashable, Value, is_hashable, type_name,
    CorvidRuntimeError, CorvidNameError, CorvidTypeError, CorvidArityError,
    CorvidZeroDivisionError, CorvidRecursionError, CorvidUnhashableError, CorvidIndexError,
    CorvidLiteralError, CorvidNotCallableError, CorvidNotSubscriptableError,
    CorvidNotIterableError,
)

class Scoping(Enum):
    """Where a function call scope falls back to for unbound names."""
    DYNAMIC = "dynamic"  # the caller's frame
    GLOBAL = "global"    # the root frame only

    @classmethod
    def parse(cls, text: str) -> 'Scoping':
        try:
            return cls(text.strip().lower())
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown scoping policy {text!r} (expected one of: {choices})") from None

def default_scoping() -> Scoping:
    raw = os.environ.get("CORVID_SCOPING")
    if not raw:
        return Scoping.DYNAMIC

    return Scoping.parse(raw)

class Frame:
    """A mutable name -> value scope, chained to a parent for lookup."""

    def __init__(
        self,
        parent: Optional['Frame']=None,
        bindings: Optional[Mapping[str, Value]]=None,
        out: Optional[TextIO]=None,
        scoping: Optional[Scoping]=None,
    ):
        self.parent = parent
        self.vars: Dict[str, Value] = dict(bindings) if bindings else {}

        if out is None and parent is not None:
            out = parent.out
        self.out: Optional[TextIO] = out

        if scoping is None:
            scoping = parent.scoping if parent is not None else default_scoping()
        self.scoping: Scoping = scoping

    def lookup(self, name: str) -> Value:
        frame: Optional[Frame] = self

        while frame is not None:
            if name in frame.vars:
                return frame.vars[name]
            frame = frame.parent

        raise CorvidNameError(name)

    def bind(self, name: str, val: Value) -> None:
        self.vars[name] = val

    def child_scope(self, bindings: Mapping[str, Value]) -> 'Frame':
        return Frame(parent=self, bindings=bindings)

    def root(self) -> 'Frame':
        frame = self
        while frame.parent is not None:
            frame = frame.parent
        return frame

    def call_scope(self, bindings: Mapping[str, Value]) -> 'Frame':
        """Scope for a function body invoked from this frame."""
        if self.scoping is Scoping.GLOBAL:
            return self.root().child_scope(bindings)

        return self.child_scope(bindings)

    def write(self, text: str) -> None:
        stream = self.out if self.out is not None else sys.stdout
        stream.write(text)
