from __future__ import annotations

import re

from ..runtime import CvBool, CvFloat, CvInt, CvString, CorvidLiteralError
from ..tree import BoolLiteral, FloatLiteral, IntLiteral, StringLiteral
from ..utils import fits_i32, to_f32

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")

def eval_string_literal(node: StringLiteral) -> CvString:
    raw = node.lexeme

    if len(raw) < 2 or raw[0] != '"' or raw[-1] != '"':
        raise CorvidLiteralError("string", raw)

    # only the escaped quote is unescaped; other backslashes stay literal
    return CvString(raw[1:-1].replace('\\"', '"'))

def eval_int_literal(node: IntLiteral) -> CvInt:
    if _INT_RE.fullmatch(node.lexeme) is None:
        raise CorvidLiteralError("integer", node.lexeme)

    value = int(node.lexeme)
    if not fits_i32(value):
        raise CorvidLiteralError("integer", node.lexeme)

    return CvInt(value)

def eval_float_literal(node: FloatLiteral) -> CvFloat:
    if _FLOAT_RE.fullmatch(node.lexeme) is None:
        raise CorvidLiteralError("float", node.lexeme)

    return CvFloat(to_f32(float(node.lexeme)))

def eval_bool_literal(node: BoolLiteral) -> CvBool:
    return CvBool(node.lexeme == "true")
