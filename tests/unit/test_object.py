"""Value model: truthiness, equality and printing."""

import pytest

from treelox.object import (
    NIL, TRUE, FALSE, Number, String, NativeFunction, is_truthy, values_equal, stringify
)


def test_truthiness_rule():
    assert not is_truthy(NIL)
    assert not is_truthy(FALSE)
    assert is_truthy(TRUE)
    assert is_truthy(Number(0))
    assert is_truthy(String(""))


def test_scalar_equality_by_value():
    assert values_equal(Number(2), Number(2.0))
    assert values_equal(String("a"), String("a"))
    assert not values_equal(Number(1), String("1"))
    assert not values_equal(NIL, FALSE)
    assert values_equal(NIL, NIL)


def test_nan_equals_itself():
    nan = float("nan")
    assert values_equal(Number(nan), Number(nan))


def test_number_printing():
    assert stringify(Number(3)) == "3"
    assert stringify(Number(-0.5)) == "-0.5"
    assert stringify(Number(1e21)) == "1000000000000000000000"
    assert stringify(Number(float("inf"))) == "inf"
    assert stringify(Number(float("nan"))) == "NaN"


def test_native_function_contract():
    native = NativeFunction("twice", 1, lambda n: Number(n.value * 2))
    assert native.arity() == 1
    assert native.call(None, [Number(4)]) == Number(8)
    assert stringify(native) == "<native fn>"


@pytest.mark.parametrize("value,text", [
    (-0.0, "-0"),
    (1e-7, "0.0000001"),
    (0.1, "0.1"),
    (100.0, "100"),
    (1.5e22, "15000000000000000000000"),
])
def test_number_printing_never_uses_exponents(value, text):
    assert stringify(Number(value)) == text
