from __future__ import annotations

import io
from types import SimpleNamespace

import pytest

from tests.support.harness import (
    CorvidArityError,
    CorvidIndexError,
    CorvidLiteralError,
    CorvidNameError,
    CorvidRuntimeError,
    CvFloat,
    CvInt,
    CvList,
    CvNone,
    CvString,
    Frame,
)
from corvid_ref.evaluator import eval_node, evaluate
from corvid_ref.runtime import CvFn
from corvid_ref.tree import (
    Arithmetic,
    Assign,
    Block,
    BoolLiteral,
    CollectionAssign,
    Comparator,
    Conditional,
    DeclareFn,
    Deref,
    Equality,
    FloatLiteral,
    IntLiteral,
    InvokeFn,
    ListExpr,
    LogicalOperator,
    Operator,
    Print,
    StringLiteral,
)


def _int(n: int) -> IntLiteral:
    return IntLiteral(str(n))


def test_evaluate_without_frame() -> None:
    assert evaluate(Arithmetic(Operator.DIV, _int(7), _int(2))) == CvInt(3)


def test_float_literal_is_single_precision() -> None:
    result = evaluate(FloatLiteral("0.1"))
    assert isinstance(result, CvFloat)
    assert result.value != 0.1


def test_string_literal_unquotes() -> None:
    assert evaluate(StringLiteral('"a\\"b"')) == CvString('a"b')


@pytest.mark.parametrize(
    "node",
    [
        pytest.param(IntLiteral("abc"), id="int-letters"),
        pytest.param(IntLiteral("99999999999"), id="int-overflow"),
        pytest.param(FloatLiteral("1.2.3"), id="float-two-points"),
        pytest.param(StringLiteral("abc"), id="string-unquoted"),
    ],
)
def test_malformed_literals(node) -> None:
    with pytest.raises(CorvidLiteralError):
        evaluate(node)


def test_untaken_branch_is_not_evaluated() -> None:
    node = Conditional(BoolLiteral("false"), Deref("missing"), _int(3))
    assert evaluate(node) == CvInt(3)


def test_arity_error_leaves_no_partial_bindings() -> None:
    frame = Frame()
    frame.bind("f", CvFn("f", ["a"], Block([Deref("a")])))
    call = InvokeFn("f", [Assign("leak", _int(1)), _int(2)])

    with pytest.raises(CorvidArityError):
        evaluate(call, frame)

    assert "leak" not in frame.vars


def test_args_evaluated_left_to_right() -> None:
    out = io.StringIO()
    frame = Frame(out=out)
    frame.bind("f", CvFn("f", ["a", "b"], Block([])))
    call = InvokeFn("f", [Print(_int(1), False), Print(_int(2), False)])

    assert evaluate(call, frame) == CvNone()
    assert out.getvalue() == "12"


def test_declare_does_not_evaluate_body() -> None:
    frame = Frame()
    fn_value = evaluate(DeclareFn("f", [], Arithmetic(Operator.DIV, _int(1), _int(0))), frame)
    assert isinstance(fn_value, CvFn)
    assert frame.lookup("f") is fn_value


def test_collection_assign_checks_index_before_value() -> None:
    frame = Frame()
    node = CollectionAssign(ListExpr([]), StringLiteral('"a"'), Assign("side", _int(1)))

    with pytest.raises(CorvidIndexError):
        evaluate(node, frame)

    assert "side" not in frame.vars


def test_collection_assign_evaluates_value_before_bounds() -> None:
    frame = Frame()
    node = CollectionAssign(ListExpr([]), _int(5), Assign("side", _int(1)))

    with pytest.raises(CorvidIndexError):
        evaluate(node, frame)

    assert frame.lookup("side") == CvInt(1)


def test_collection_assign_mutates_shared_list() -> None:
    frame = Frame()
    shared = CvList([CvInt(0)])
    frame.bind("xs", shared)
    evaluate(CollectionAssign(Deref("xs"), _int(0), _int(9)), frame)
    assert shared.items == [CvInt(9)]


def test_arithmetic_rejects_logical_operator() -> None:
    with pytest.raises(CorvidRuntimeError, match="Invalid arithmetic operator"):
        evaluate(Arithmetic(Operator.AND, _int(1), _int(2)))


def test_logical_rejects_arithmetic_operator() -> None:
    with pytest.raises(CorvidRuntimeError, match="Invalid logical operator"):
        evaluate(LogicalOperator(Operator.ADD, BoolLiteral("true"), BoolLiteral("true")))


def test_equality_rejects_ordering_comparator() -> None:
    with pytest.raises(CorvidRuntimeError, match="Invalid comparator"):
        evaluate(Equality(Comparator.LT, _int(1), _int(1)))


def test_unknown_node() -> None:
    with pytest.raises(CorvidRuntimeError, match="Unknown node"):
        eval_node(object(), Frame())  # type: ignore[arg-type]


def test_error_location_attached() -> None:
    node = Deref("x", meta=SimpleNamespace(line=4, column=2))

    with pytest.raises(CorvidNameError) as excinfo:
        evaluate(node)

    assert str(excinfo.value) == "x is not assigned. (line 4, col 2)"


def test_innermost_location_wins() -> None:
    inner = Deref("x", meta=SimpleNamespace(line=3, column=5))
    outer = Block([inner], meta=SimpleNamespace(line=1, column=1))

    with pytest.raises(CorvidNameError) as excinfo:
        evaluate(outer)

    assert excinfo.value.meta.line == 3


def test_outer_location_used_when_inner_has_none() -> None:
    outer = Block([Deref("x")], meta=SimpleNamespace(line=7, column=1))

    with pytest.raises(CorvidNameError) as excinfo:
        evaluate(outer)

    assert "(line 7, col 1)" in str(excinfo.value)
