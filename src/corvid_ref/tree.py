"""Expression tree consumed by the evaluator.

Every node kind is a dataclass; `Node` is the closed union of them, and the
evaluator matches on it exhaustively. Nodes optionally carry the parser's
position metadata (`meta.line`, `meta.column`), which never takes part in
equality.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, List, Optional, Tuple, Union
from typing_extensions import TypeAlias


class Operator(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    AND = "and"
    OR = "or"


class Comparator(Enum):
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    EQ = "=="
    NE = "!="


@dataclass
class _Positioned:
    meta: Optional[Any] = field(default=None, compare=False, repr=False, kw_only=True)


# ---------- Literals ----------

@dataclass
class NoneLiteral(_Positioned):
    """The explicit "nothing" sentinel; also what `none` parses to."""


@dataclass
class StringLiteral(_Positioned):
    lexeme: str  # still quoted


@dataclass
class IntLiteral(_Positioned):
    lexeme: str


@dataclass
class FloatLiteral(_Positioned):
    lexeme: str


@dataclass
class BoolLiteral(_Positioned):
    lexeme: str


# ---------- Variables ----------

@dataclass
class Assign(_Positioned):
    name: str
    expr: 'Node'


@dataclass
class Deref(_Positioned):
    name: str


# ---------- Collections ----------

@dataclass
class ListExpr(_Positioned):
    elements: List['Node']


@dataclass
class DictExpr(_Positioned):
    pairs: List[Tuple['Node', 'Node']]


@dataclass
class RangeExpr(_Positioned):
    low: 'Node'
    high: 'Node'


@dataclass
class CollectionAssign(_Positioned):
    coll: 'Node'
    subscript: 'Node'
    expr: 'Node'


@dataclass
class CollectionDeref(_Positioned):
    coll: 'Node'
    subscript: 'Node'


# ---------- Operators ----------

@dataclass
class Arithmetic(_Positioned):
    op: Operator
    left: 'Node'
    right: 'Node'


@dataclass
class Equality(_Positioned):
    cmp: Comparator
    left: 'Node'
    right: 'Node'


@dataclass
class Compare(_Positioned):
    cmp: Comparator
    left: 'Node'
    right: 'Node'


@dataclass
class Concatenate(_Positioned):
    left: 'Node'
    right: 'Node'


@dataclass
class Negate(_Positioned):
    operand: 'Node'


@dataclass
class LogicalOperator(_Positioned):
    op: Operator
    left: 'Node'
    right: 'Node'


# ---------- Composite / flow control ----------

@dataclass
class Block(_Positioned):
    exprs: List['Node']


@dataclass
class Conditional(_Positioned):
    cond: 'Node'
    if_true: 'Node'
    if_false: 'Node'


@dataclass
class ForLoop(_Positioned):
    var: str
    iterable: 'Node'
    body: 'Node'


# ---------- Functions / output ----------

@dataclass
class DeclareFn(_Positioned):
    name: str
    params: List[str]
    body: 'Node'


@dataclass
class InvokeFn(_Positioned):
    name: str
    args: List['Node']


@dataclass
class Print(_Positioned):
    expr: 'Node'
    newline: bool


Node: TypeAlias = Union[
    NoneLiteral,
    StringLiteral,
    IntLiteral,
    FloatLiteral,
    BoolLiteral,
    Assign,
    Deref,
    ListExpr,
    DictExpr,
    RangeExpr,
    CollectionAssign,
    CollectionDeref,
    Arithmetic,
    Equality,
    Compare,
    Concatenate,
    Negate,
    LogicalOperator,
    Block,
    Conditional,
    ForLoop,
    DeclareFn,
    InvokeFn,
    Print,
]


def node_meta(node: Node) -> Optional[Any]:
    return getattr(node, "meta", None)


def pretty(node: Node, indent: str = '  ') -> str:
    """Return an indented outline of the tree, one node or scalar per line."""
    def _pretty(item: Any, level: int) -> List[str]:
        pad = indent * level

        if isinstance(item, _Positioned):
            lines = [f"{pad}{type(item).__name__}"]
            for f in fields(item):
                if f.name == "meta":
                    continue
                lines.extend(_pretty(getattr(item, f.name), level + 1))
            return lines

        if isinstance(item, (list, tuple)):
            lines = []
            for child in item:
                lines.extend(_pretty(child, level))
            return lines

        if isinstance(item, Enum):
            return [f"{pad}{item.name}"]

        return [f"{pad}{item!r}"]

    return "\n".join(_pretty(node, 0)) + "\n"
