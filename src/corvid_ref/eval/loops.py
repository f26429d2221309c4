from __future__ import annotations

from typing import Iterable

from ..runtime import (
    CvDict,
    CvList,
    NONE,
    CvRange,
    Frame,
    Value,
    CorvidNotIterableError,
)
from ..tree import Conditional, ForLoop
from .common import EvalFunc, require_bool

def eval_conditional(n: Conditional, frame: Frame, eval_func: EvalFunc) -> Value:
    cond = require_bool(eval_func(n.cond, frame), "Condition must evaluate to a boolean")

    # only the selected branch is evaluated
    if cond:
        return eval_func(n.if_true, frame)

    return eval_func(n.if_false, frame)

def iter_values(value: Value) -> Iterable[Value]:
    match value:
        case CvList(items=items):
            return items
        case CvDict(entries=entries):
            # keys as of loop entry
            return list(entries)
        case CvRange():
            return value.values()

    raise CorvidNotIterableError(value)

def eval_for_loop(n: ForLoop, frame: Frame, eval_func: EvalFunc) -> Value:
    iterable = iter_values(eval_func(n.iterable, frame))
    result: Value = NONE

    for item in iterable:
        # bound in the enclosing scope; the last value outlives the loop
        frame.bind(n.var, item)
        result = eval_func(n.body, frame)

    return result
