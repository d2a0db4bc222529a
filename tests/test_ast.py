import dataclasses
import json

import hypothesis.strategies as st
import pytest
from hypothesis import given

from kscope.kscope_ast import (
    BinaryExpr,
    CallExpr,
    ExprAST,
    FunctionAST,
    NumberExpr,
    PrototypeAST,
    VariableExpr,
)


def test_equality_ignores_positions() -> None:
    assert NumberExpr(1.0, line=1, col=1) == NumberExpr(1.0, line=7, col=9)
    assert VariableExpr("x", line=2, col=3) == VariableExpr("x")


def test_equality_is_structural() -> None:
    a = BinaryExpr("+", NumberExpr(1.0), VariableExpr("x"))
    b = BinaryExpr("+", NumberExpr(1.0), VariableExpr("x"))
    c = BinaryExpr("-", NumberExpr(1.0), VariableExpr("x"))
    assert a == b
    assert a != c
    assert NumberExpr(1.0) != VariableExpr("1.0")


def test_nodes_are_immutable() -> None:
    node = VariableExpr("x")
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.name = "y"  # type: ignore[misc]


def test_expression_variants_share_base() -> None:
    for node in (
        NumberExpr(1.0),
        VariableExpr("x"),
        BinaryExpr("*", NumberExpr(1.0), NumberExpr(2.0)),
        CallExpr("f"),
    ):
        assert isinstance(node, ExprAST)
    assert not isinstance(PrototypeAST("f"), ExprAST)


def test_call_args_become_tuple_in_order() -> None:
    args = [NumberExpr(1.0), VariableExpr("y")]
    call = CallExpr("f", args)  # type: ignore[arg-type]
    args.append(NumberExpr(3.0))
    assert call.args == (NumberExpr(1.0), VariableExpr("y"))


def test_prototype_params_keep_order_and_duplicates() -> None:
    proto = PrototypeAST("f", ["b", "a", "b"])  # type: ignore[arg-type]
    assert proto.params == ("b", "a", "b")
    assert not proto.is_anonymous


def test_anonymous_function_wraps_body() -> None:
    body = NumberExpr(4.0, line=2, col=5)
    fn = FunctionAST.anonymous(body)
    assert fn.prototype.is_anonymous
    assert fn.prototype == PrototypeAST("", ())
    assert fn.body is body
    assert (fn.line, fn.col) == (2, 5)


def test_repr_hides_positions() -> None:
    assert repr(NumberExpr(1.0, line=3, col=4)) == "NumberExpr(value=1.0)"


def test_to_dict_shapes() -> None:
    fn = FunctionAST(
        PrototypeAST("foo", ("a",), line=1, col=5),
        CallExpr(
            "bar",
            (BinaryExpr("<", VariableExpr("a"), NumberExpr(2.0)),),
            line=1,
            col=12,
        ),
        line=1,
        col=1,
    )
    d = fn.to_dict()
    assert d["kind"] == "function"
    assert d["prototype"] == {
        "kind": "prototype",
        "name": "foo",
        "params": ["a"],
        "line": 1,
        "col": 5,
    }
    call = d["body"]
    assert call["kind"] == "call"
    assert call["callee"] == "bar"
    binary = call["args"][0]
    assert binary["kind"] == "binary"
    assert binary["op"] == "<"
    assert binary["lhs"]["kind"] == "variable"
    assert binary["rhs"] == {"kind": "number", "value": 2.0, "line": 0, "col": 0}
    json.dumps(d)


@given(st.text(min_size=1), st.text(min_size=1))  # type: ignore[misc]
def test_variable_eq_same_name(a: str, b: str) -> None:
    assert VariableExpr(a) == VariableExpr(a)
    assert (VariableExpr(a) == VariableExpr(b)) == (a == b)


@given(st.lists(st.floats(allow_nan=False), max_size=5))  # type: ignore[misc]
def test_call_hashable_and_equal(values: list[float]) -> None:
    args = tuple(NumberExpr(v) for v in values)
    assert CallExpr("f", args) == CallExpr("f", args)
    assert hash(CallExpr("f", args)) == hash(CallExpr("f", args))
