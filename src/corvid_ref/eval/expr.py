from __future__ import annotations

from ..runtime import (
    CvBool,
    CvFloat,
    CvInt,
    CvString,
    Frame,
    Value,
    CorvidRuntimeError,
    CorvidTypeError,
    CorvidZeroDivisionError,
    type_name,
)
from ..tree import Arithmetic, Comparator, Compare, Concatenate, Equality, LogicalOperator, Negate, Operator
from ..utils import render, to_f32, wrap_i32
from .common import EvalFunc, require_bool

def eval_arithmetic(n: Arithmetic, frame: Frame, eval_func: EvalFunc) -> Value:
    lhs = eval_func(n.left, frame)
    rhs = eval_func(n.right, frame)
    return apply_arithmetic(n.op, lhs, rhs)

def apply_arithmetic(op: Operator, lhs: Value, rhs: Value) -> Value:
    if op is Operator.MUL:
        match (lhs, rhs):
            case (CvString(value=text), CvInt(value=count)) | (CvInt(value=count), CvString(value=text)):
                return CvString(_repeat(text, count))

    if isinstance(lhs, CvInt) and isinstance(rhs, CvInt):
        return CvInt(_int_op(op, lhs.value, rhs.value))

    x = _as_float(lhs)
    y = _as_float(rhs)
    return CvFloat(to_f32(_float_op(op, x, y)))

def _repeat(text: str, count: int) -> str:
    if count < 0:
        raise CorvidTypeError(f"String repetition count must be non-negative, got {count}.")

    return text * count

def _int_op(op: Operator, x: int, y: int) -> int:
    match op:
        case Operator.ADD:
            return wrap_i32(x + y)
        case Operator.SUB:
            return wrap_i32(x - y)
        case Operator.MUL:
            return wrap_i32(x * y)
        case Operator.DIV:
            if y == 0:
                raise CorvidZeroDivisionError()
            # truncate toward zero, unlike Python's floor division
            q = abs(x) // abs(y)
            return wrap_i32(q if (x < 0) == (y < 0) else -q)

    raise CorvidRuntimeError(f"Invalid arithmetic operator {op.value}.")

def _float_op(op: Operator, x: float, y: float) -> float:
    match op:
        case Operator.ADD:
            return x + y
        case Operator.SUB:
            return x - y
        case Operator.MUL:
            return x * y
        case Operator.DIV:
            if y == 0.0:
                raise CorvidZeroDivisionError()
            return x / y

    raise CorvidRuntimeError(f"Invalid arithmetic operator {op.value}.")

def _as_float(value: Value) -> float:
    match value:
        case CvInt(value=n):
            return to_f32(float(n))
        case CvFloat(value=f):
            return f

    raise CorvidTypeError(f"Undefined arithmetic operation on {type_name(value)}.")

def eval_equality(n: Equality, frame: Frame, eval_func: EvalFunc) -> CvBool:
    lhs = eval_func(n.left, frame)
    rhs = eval_func(n.right, frame)

    if not isinstance(lhs, (CvString, CvBool, CvInt, CvFloat)) or type(lhs) is not type(rhs):
        raise CorvidTypeError(
            f"Equality check can only be performed on objects of the same type, "
            f"got {type_name(lhs)} and {type_name(rhs)}."
        )

    match n.cmp:
        case Comparator.EQ:
            return CvBool(lhs.value == rhs.value)
        case Comparator.NE:
            return CvBool(lhs.value != rhs.value)

    raise CorvidRuntimeError(f"Invalid comparator {n.cmp.value}.")

def eval_compare(n: Compare, frame: Frame, eval_func: EvalFunc) -> CvBool:
    lhs = eval_func(n.left, frame)
    rhs = eval_func(n.right, frame)

    match (lhs, rhs):
        case (CvInt(value=x), CvInt(value=y)) | (CvFloat(value=x), CvFloat(value=y)):
            pass
        case _:
            raise CorvidTypeError(
                f"Can only compare numbers of the same type, got {type_name(lhs)} and {type_name(rhs)}."
            )

    match n.cmp:
        case Comparator.LT:
            return CvBool(x < y)
        case Comparator.LE:
            return CvBool(x <= y)
        case Comparator.GT:
            return CvBool(x > y)
        case Comparator.GE:
            return CvBool(x >= y)

    raise CorvidRuntimeError(f"Invalid comparator {n.cmp.value}.")

def eval_concatenate(n: Concatenate, frame: Frame, eval_func: EvalFunc) -> CvString:
    lhs = eval_func(n.left, frame)
    rhs = eval_func(n.right, frame)
    return CvString(render(lhs) + render(rhs))

def eval_negate(n: Negate, frame: Frame, eval_func: EvalFunc) -> CvBool:
    operand = eval_func(n.operand, frame)
    return CvBool(not require_bool(operand, "Can only negate boolean data"))

def eval_logical(n: LogicalOperator, frame: Frame, eval_func: EvalFunc) -> CvBool:
    # both sides are evaluated; there is no short-circuit
    lhs = eval_func(n.left, frame)
    rhs = eval_func(n.right, frame)

    if not isinstance(lhs, CvBool) or not isinstance(rhs, CvBool):
        raise CorvidTypeError(
            f"Logical operators can only be applied to boolean data, got {type_name(lhs)} and {type_name(rhs)}."
        )

    match n.op:
        case Operator.AND:
            return CvBool(lhs.value and rhs.value)
        case Operator.OR:
            return CvBool(lhs.value or rhs.value)

    raise CorvidRuntimeError(f"Invalid logical operator {n.op.value}.")
