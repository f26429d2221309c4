from __future__ import annotations

from typing import Callable

from ..runtime import (
    CvBool,
    CvInt,
    Frame,
    Hashable,
    Value,
    CorvidIndexError,
    CorvidTypeError,
    CorvidUnhashableError,
    is_hashable,
    type_name,
)
from ..tree import Node

EvalFunc = Callable[[Node, Frame], Value]

def require_bool(value: Value, context: str) -> bool:
    if not isinstance(value, CvBool):
        raise CorvidTypeError(f"{context}, got {type_name(value)}.")

    return value.value

def require_index(value: Value) -> int:
    if not isinstance(value, CvInt):
        raise CorvidIndexError(f"List index must be an integer, got {type_name(value)}.")

    return value.value

def require_key(value: Value) -> Hashable:
    if not is_hashable(value):
        raise CorvidUnhashableError(value)

    return value
