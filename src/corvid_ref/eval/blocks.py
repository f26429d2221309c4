from __future__ import annotations

from ..runtime import NONE, Frame, Value
from ..tree import Block
from .common import EvalFunc

def eval_block(n: Block, frame: Frame, eval_func: EvalFunc) -> Value:
    """Evaluate members in order in the current scope; the last value wins."""
    result: Value = NONE

    for expr in n.exprs:
        result = eval_func(expr, frame)

    return result
