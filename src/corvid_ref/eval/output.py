from __future__ import annotations

from ..runtime import NONE, CvNone, Frame
from ..tree import NoneLiteral, Print
from ..utils import render
from .common import EvalFunc

def eval_print(n: Print, frame: Frame, eval_func: EvalFunc) -> CvNone:
    if isinstance(n.expr, NoneLiteral):
        text = ""
    else:
        text = render(eval_func(n.expr, frame))

    frame.write(text + "\n" if n.newline else text)

    return NONE
