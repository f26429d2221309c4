from __future__ import annotations

from typing import Dict

from ..runtime import (
    CvDict,
    CvInt,
    CvList,
    NONE,
    CvRange,
    Frame,
    Hashable,
    Value,
    CorvidIndexError,
    CorvidNotSubscriptableError,
    CorvidTypeError,
    type_name,
)
from ..tree import CollectionAssign, CollectionDeref, DictExpr, ListExpr, RangeExpr
from .common import EvalFunc, require_index, require_key

def eval_list(n: ListExpr, frame: Frame, eval_func: EvalFunc) -> CvList:
    return CvList([eval_func(el, frame) for el in n.elements])

def eval_dict(n: DictExpr, frame: Frame, eval_func: EvalFunc) -> CvDict:
    entries: Dict[Hashable, Value] = {}

    for key_node, value_node in n.pairs:
        key = require_key(eval_func(key_node, frame))
        entries[key] = eval_func(value_node, frame)

    return CvDict(entries)

def eval_range(n: RangeExpr, frame: Frame, eval_func: EvalFunc) -> CvRange:
    low = eval_func(n.low, frame)
    high = eval_func(n.high, frame)

    if not isinstance(low, CvInt) or not isinstance(high, CvInt):
        raise CorvidTypeError(
            f"Can only iterate over integer ranges, got {type_name(low)}..{type_name(high)}."
        )

    return CvRange(low.value, high.value)

def eval_collection_assign(n: CollectionAssign, frame: Frame, eval_func: EvalFunc) -> Value:
    target = eval_func(n.coll, frame)

    match target:
        case CvList(items=items):
            index = require_index(eval_func(n.subscript, frame))
            value = eval_func(n.expr, frame)
            _check_bounds(index, items)
            items[index] = value
            return value
        case CvDict(entries=entries):
            key = require_key(eval_func(n.subscript, frame))
            value = eval_func(n.expr, frame)
            entries[key] = value
            return value

    raise CorvidNotSubscriptableError(target)

def eval_collection_deref(n: CollectionDeref, frame: Frame, eval_func: EvalFunc) -> Value:
    target = eval_func(n.coll, frame)

    match target:
        case CvList(items=items):
            index = require_index(eval_func(n.subscript, frame))
            if index < 0:
                raise CorvidIndexError(f"List index must be nonnegative, got {index}.")
            _check_bounds(index, items)
            return items[index]
        case CvDict(entries=entries):
            key = require_key(eval_func(n.subscript, frame))
            return entries.get(key, NONE)

    raise CorvidNotSubscriptableError(target)

def _check_bounds(index: int, items: list) -> None:
    # Python would silently wrap negative indices
    if not 0 <= index < len(items):
        raise CorvidIndexError(f"Index {index} out of bounds for length {len(items)}.")
