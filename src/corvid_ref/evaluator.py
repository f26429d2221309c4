from __future__ import annotations

import sys
from typing import Optional

from .runtime import NONE, Frame, Value, CorvidRecursionError, CorvidRuntimeError
from .tree import (
    Arithmetic,
    Assign,
    Block,
    BoolLiteral,
    CollectionAssign,
    CollectionDeref,
    Compare,
    Concatenate,
    Conditional,
    DeclareFn,
    Deref,
    DictExpr,
    Equality,
    FloatLiteral,
    ForLoop,
    IntLiteral,
    InvokeFn,
    ListExpr,
    LogicalOperator,
    Negate,
    Node,
    NoneLiteral,
    Print,
    RangeExpr,
    StringLiteral,
    node_meta,
)

from .eval.literals import eval_bool_literal, eval_float_literal, eval_int_literal, eval_string_literal
from .eval.containers import (
    eval_collection_assign,
    eval_collection_deref,
    eval_dict,
    eval_list,
    eval_range,
)
from .eval.expr import (
    eval_arithmetic,
    eval_compare,
    eval_concatenate,
    eval_equality,
    eval_logical,
    eval_negate,
)
from .eval.blocks import eval_block
from .eval.loops import eval_conditional, eval_for_loop
from .eval.fn import eval_declare_fn, eval_invoke_fn
from .eval.output import eval_print


def _maybe_attach_location(exc: CorvidRuntimeError, node: Node) -> None:
    # innermost node wins; outer frames leave it alone
    if exc.meta is not None:
        return

    meta = node_meta(node)

    if meta is not None and getattr(meta, "line", None) is not None:
        exc.meta = meta

# ---------------- Public API ----------------

# each Corvid call level costs roughly a dozen Python frames
RECURSION_LIMIT = 12_000

def evaluate(root: Node, frame: Optional[Frame]=None) -> Value:
    """Evaluate `root` in `frame` (a fresh root frame when omitted)."""
    if frame is None:
        frame = Frame()

    if sys.getrecursionlimit() < RECURSION_LIMIT:
        sys.setrecursionlimit(RECURSION_LIMIT)

    try:
        return eval_node(root, frame)
    except RecursionError:
        raise CorvidRecursionError() from None

# ---------------- Core evaluator ----------------

def eval_node(n: Node, frame: Frame) -> Value:
    try:
        return _eval_node_inner(n, frame)
    except CorvidRuntimeError as e:
        _maybe_attach_location(e, n)
        raise


def _eval_node_inner(n: Node, frame: Frame) -> Value:
    match n:
        # literals
        case NoneLiteral():
            return NONE
        case StringLiteral():
            return eval_string_literal(n)
        case IntLiteral():
            return eval_int_literal(n)
        case FloatLiteral():
            return eval_float_literal(n)
        case BoolLiteral():
            return eval_bool_literal(n)

        # variables
        case Assign(name=name, expr=expr):
            value = eval_node(expr, frame)
            frame.bind(name, value)
            return value
        case Deref(name=name):
            return frame.lookup(name)

        # collections
        case ListExpr():
            return eval_list(n, frame, eval_node)
        case DictExpr():
            return eval_dict(n, frame, eval_node)
        case RangeExpr():
            return eval_range(n, frame, eval_node)
        case CollectionAssign():
            return eval_collection_assign(n, frame, eval_node)
        case CollectionDeref():
            return eval_collection_deref(n, frame, eval_node)

        # operators
        case Arithmetic():
            return eval_arithmetic(n, frame, eval_node)
        case Equality():
            return eval_equality(n, frame, eval_node)
        case Compare():
            return eval_compare(n, frame, eval_node)
        case Concatenate():
            return eval_concatenate(n, frame, eval_node)
        case Negate():
            return eval_negate(n, frame, eval_node)
        case LogicalOperator():
            return eval_logical(n, frame, eval_node)

        # composite / flow control
        case Block():
            return eval_block(n, frame, eval_node)
        case Conditional():
            return eval_conditional(n, frame, eval_node)
        case ForLoop():
            return eval_for_loop(n, frame, eval_node)

        # functions / output
        case DeclareFn():
            return eval_declare_fn(n, frame)
        case InvokeFn():
            return eval_invoke_fn(n, frame, eval_node)
        case Print():
            return eval_print(n, frame, eval_node)
        case _:
            raise CorvidRuntimeError(f"Unknown node: {type(n).__name__}")
