"""
Test Unit Expressions
=====================
"""

import math

import pytest

from ucon.errors import NoNameAllowed, NoNameGiven, UnknownPrefix
from ucon.parse.unit_expr import (
    PREFIXES,
    Literal,
    PrefixedLiteral,
    PrefixedRecall,
    Recall,
    parse_unit_expr,
    prefix_multiplier,
)


@pytest.mark.parametrize("token, expected", [
    ("in", Literal("in")),
    ("L/100km", Literal("L/100km")),
    ("_kg", PrefixedLiteral("k", "g")),
    ("_ug", PrefixedLiteral("u", "g")),
    ("_Mm3", PrefixedLiteral("M", "m3")),
    (":", Recall()),
    ("_k:", PrefixedRecall("k")),
    ("_m:", PrefixedRecall("m")),
    ("\\_x", Literal("_x")),
    ("\\:", Literal(":")),
    ("a:b", Literal("a:b")),
    ("_k\\:", PrefixedLiteral("k", ":")),
])
def test_parse(token, expected):
    assert parse_unit_expr(token) == expected


@pytest.mark.parametrize("token", ["", "_", "_k", "\\"])
def test_no_name_given(token):
    with pytest.raises(NoNameGiven):
        parse_unit_expr(token)


@pytest.mark.parametrize("token", ["::", ":x", "_k:x", "_k::"])
def test_no_name_allowed(token):
    with pytest.raises(NoNameAllowed):
        parse_unit_expr(token)


@pytest.mark.parametrize("token, prefix", [("_qg", "q"), ("_:", ":"), ("_Kg", "K"), ("_xm", "x")])
def test_unknown_prefix(token, prefix):
    with pytest.raises(UnknownPrefix) as excinfo:
        parse_unit_expr(token)

    assert excinfo.value.prefix == prefix
    assert excinfo.value.token == token


def test_prefix_table():
    assert len(PREFIXES) == 20
    assert PREFIXES["k"] == 1e3
    assert PREFIXES["D"] == 10.0
    assert PREFIXES["d"] == 0.1
    assert PREFIXES["Y"] == 1e24
    assert PREFIXES["y"] == 1e-24

    exponents = sorted(round(math.log10(v)) for v in PREFIXES.values())
    assert exponents == [-24, -21, -18, -15, -12, -9, -6, -3, -2, -1,
                         1, 2, 3, 6, 9, 12, 15, 18, 21, 24]


@pytest.mark.parametrize("letter", list("YZEPTGMkhDdcmunpfazy"))
def test_every_prefix_parses(letter):
    assert parse_unit_expr(f"_{letter}g") == PrefixedLiteral(letter, "g")
    assert prefix_multiplier(letter) == PREFIXES[letter]


@pytest.mark.parametrize("letter", list("ABCFHIJKLNOQRSUVWXbegijloqrstvwx"))
def test_other_letters_are_unknown(letter):
    with pytest.raises(UnknownPrefix):
        prefix_multiplier(letter)
