"""Surface syntax -> expression tree, via a lark LALR grammar."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, List, Optional

from lark import Lark, Transformer, UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken
from lark.visitors import v_args

from .tree import (
    Arithmetic,
    Assign,
    Block,
    BoolLiteral,
    CollectionAssign,
    CollectionDeref,
    Comparator,
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
    Operator,
    Print,
    RangeExpr,
    StringLiteral,
)

GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")


class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(
            f"{message} at line {line}, col {column}" if line is not None else message
        )


def _pos(meta: Any) -> Optional[Any]:
    return None if getattr(meta, "empty", True) else meta


@v_args(meta=True)
class ToNodes(Transformer):
    """Build tree.py dataclasses from the lark parse tree."""

    # ---- statements / blocks ----
    def start(self, meta, c):
        return Block(list(c), meta=_pos(meta))

    def block(self, meta, c):
        return Block(list(c), meta=_pos(meta))

    def assign(self, meta, c):
        name, expr = c
        return Assign(str(name), expr, meta=_pos(meta))

    def collection_assign(self, meta, c):
        coll, subscript, expr = c
        return CollectionAssign(coll, subscript, expr, meta=_pos(meta))

    # ---- operators ----
    def logical_or(self, meta, c):
        return LogicalOperator(Operator.OR, *c, meta=_pos(meta))

    def logical_and(self, meta, c):
        return LogicalOperator(Operator.AND, *c, meta=_pos(meta))

    def negate(self, meta, c):
        return Negate(c[0], meta=_pos(meta))

    def eq(self, meta, c):
        return Equality(Comparator.EQ, *c, meta=_pos(meta))

    def ne(self, meta, c):
        return Equality(Comparator.NE, *c, meta=_pos(meta))

    def lt(self, meta, c):
        return Compare(Comparator.LT, *c, meta=_pos(meta))

    def le(self, meta, c):
        return Compare(Comparator.LE, *c, meta=_pos(meta))

    def gt(self, meta, c):
        return Compare(Comparator.GT, *c, meta=_pos(meta))

    def ge(self, meta, c):
        return Compare(Comparator.GE, *c, meta=_pos(meta))

    def concatenate(self, meta, c):
        return Concatenate(*c, meta=_pos(meta))

    def range(self, meta, c):
        return RangeExpr(*c, meta=_pos(meta))

    def add(self, meta, c):
        return Arithmetic(Operator.ADD, *c, meta=_pos(meta))

    def sub(self, meta, c):
        return Arithmetic(Operator.SUB, *c, meta=_pos(meta))

    def mul(self, meta, c):
        return Arithmetic(Operator.MUL, *c, meta=_pos(meta))

    def div(self, meta, c):
        return Arithmetic(Operator.DIV, *c, meta=_pos(meta))

    def subscript(self, meta, c):
        coll, subscript = c
        return CollectionDeref(coll, subscript, meta=_pos(meta))

    # ---- literals ----
    def int_lit(self, meta, c):
        return IntLiteral(str(c[0]), meta=_pos(meta))

    def neg_int(self, meta, c):
        return IntLiteral("-" + str(c[0]), meta=_pos(meta))

    def float_lit(self, meta, c):
        return FloatLiteral(str(c[0]), meta=_pos(meta))

    def neg_float(self, meta, c):
        return FloatLiteral("-" + str(c[0]), meta=_pos(meta))

    def string_lit(self, meta, c):
        return StringLiteral(str(c[0]), meta=_pos(meta))

    def true_lit(self, meta, _):
        return BoolLiteral("true", meta=_pos(meta))

    def false_lit(self, meta, _):
        return BoolLiteral("false", meta=_pos(meta))

    def none_lit(self, meta, _):
        return NoneLiteral(meta=_pos(meta))

    # ---- names / calls ----
    def deref(self, meta, c):
        return Deref(str(c[0]), meta=_pos(meta))

    def invoke(self, meta, c):
        name, *rest = c
        args = rest[0] if rest else []
        return InvokeFn(str(name), args, meta=_pos(meta))

    def args(self, _, c):
        return list(c)

    def params(self, _, c):
        return [str(tok) for tok in c]

    def print_stmt(self, meta, c):
        return Print(c[0] if c else NoneLiteral(), False, meta=_pos(meta))

    def println_stmt(self, meta, c):
        return Print(c[0] if c else NoneLiteral(), True, meta=_pos(meta))

    # ---- collections ----
    def list_lit(self, meta, c):
        return ListExpr(list(c), meta=_pos(meta))

    def pair(self, _, c):
        key, value = c
        return (key, value)

    def dict_lit(self, meta, c):
        return DictExpr(list(c), meta=_pos(meta))

    def empty_dict(self, meta, _):
        return DictExpr([], meta=_pos(meta))

    # ---- flow control / functions ----
    def if_expr(self, meta, c):
        cond, if_true, *rest = c
        if_false = rest[0] if rest else Block([])
        return Conditional(cond, if_true, if_false, meta=_pos(meta))

    def for_expr(self, meta, c):
        var, iterable, body = c
        return ForLoop(str(var), iterable, body, meta=_pos(meta))

    def fn_def(self, meta, c):
        name, *rest = c
        body = rest[-1]
        params: List[str] = rest[0] if len(rest) > 1 else []
        return DeclareFn(str(name), params, body, meta=_pos(meta))


@lru_cache(maxsize=1)
def make_parser() -> Lark:
    grammar = GRAMMAR_PATH.read_text(encoding="utf-8")
    # basic lexer: keywords stay reserved even where only NAME is expected
    return Lark(grammar, parser="lalr", lexer="basic", propagate_positions=True, maybe_placeholders=False)


def _describe(exc: UnexpectedInput, source: str) -> str:
    match exc:
        case UnexpectedEOF():
            return "Unexpected end of input"
        case UnexpectedToken(token=tok) if tok.type == "$END":
            return "Unexpected end of input"
        case UnexpectedToken(token=tok):
            return f"Unexpected token {str(tok)!r}"
        case UnexpectedCharacters(pos_in_stream=pos):
            return f"Unexpected character {source[pos]!r}"
    return "Syntax error"


def parse_source(source: str) -> Node:
    """Parse Corvid source into a Block of top-level statements."""
    try:
        tree = make_parser().parse(source)
    except UnexpectedInput as exc:
        raise ParseError(_describe(exc, source), getattr(exc, "line", None), getattr(exc, "column", None)) from exc

    return ToNodes().transform(tree)
