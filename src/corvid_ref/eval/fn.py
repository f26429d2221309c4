from __future__ import annotations

from typing import List

from ..runtime import (
    CvFn,
    Frame,
    Value,
    CorvidArityError,
    CorvidNotCallableError,
)
from ..tree import DeclareFn, InvokeFn
from .common import EvalFunc

def eval_declare_fn(n: DeclareFn, frame: Frame) -> CvFn:
    fn_value = CvFn(name=n.name, params=list(n.params), body=n.body)
    frame.bind(n.name, fn_value)

    return fn_value

def eval_invoke_fn(n: InvokeFn, frame: Frame, eval_func: EvalFunc) -> Value:
    fn_value = frame.lookup(n.name)

    if not isinstance(fn_value, CvFn):
        raise CorvidNotCallableError(n.name)

    if len(fn_value.params) != len(n.args):
        raise CorvidArityError(n.name, len(fn_value.params), len(n.args))

    args: List[Value] = [eval_func(arg, frame) for arg in n.args]
    call_frame = frame.call_scope(dict(zip(fn_value.params, args)))

    return eval_func(fn_value.body, call_frame)
