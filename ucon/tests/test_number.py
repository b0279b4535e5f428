"""
Test Value Expressions
======================
"""

import pytest

from ucon.errors import InvalidInput
from ucon.parse.number import NumberExpr, is_number_expr, parse_float, parse_number_expr


@pytest.mark.parametrize("token, value", [
    ("1", 1.0),
    ("-40", -40.0),
    ("+2.5", 2.5),
    (".5", 0.5),
    ("3.", 3.0),
    ("6.02e23", 6.02e23),
    ("1E-3", 1e-3),
])
def test_literals(token, value):
    assert parse_number_expr(token) == NumberExpr(value=value)


def test_recall():
    assert parse_number_expr(":") == NumberExpr(recall=True)


@pytest.mark.parametrize("token", ["abc", "1,5", "1e", "0x10", "1_000", "", "in", "--1"])
def test_not_a_number(token):
    with pytest.raises(InvalidInput) as excinfo:
        parse_number_expr(token)

    assert excinfo.value.token == token


@pytest.mark.parametrize("token", ["inf", "-inf", "nan", "Infinity", "1e999"])
def test_not_finite(token):
    with pytest.raises(InvalidInput, match="not finite"):
        parse_number_expr(token)


def test_parse_float_strips():
    assert parse_float(" 25.4 ") == 25.4
    with pytest.raises(ValueError):
        parse_float("25.4mm")


def test_is_number_expr():
    assert is_number_expr("12")
    assert is_number_expr(":")
    assert is_number_expr("nan")
    assert not is_number_expr("mm")
    assert not is_number_expr("_k:")
