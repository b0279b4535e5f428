"""
Value Expressions
=================

A value token is either a decimal float literal or ':' (the last value used).

Usage:
    >>> from ucon.parse.number import parse_number_expr
    >>> parse_number_expr("2.5e3")
    NumberExpr(value=2500.0, recall=False)
"""

import math
import re
from dataclasses import dataclass
from typing import Optional

from ucon.errors import InvalidInput

RECALL_SIGIL = ":"

FLOAT_PATTERN = re.compile(
    r"""
    [+-]?
    (?:
        (?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?
      | inf(?:inity)?
      | nan
    )
    """,
    re.VERBOSE | re.IGNORECASE,
)


@dataclass(frozen=True)
class NumberExpr:
    value: Optional[float] = None
    recall: bool = False


def parse_float(token: str) -> float:
    """
    Parse a float literal, accepting the same forms the unit definitions use.

    Raises:
        ValueError: If the token is not a float literal
    """
    text = token.strip()
    if not FLOAT_PATTERN.fullmatch(text):
        raise ValueError(f"not a number: '{token}'")
    return float(text)


def parse_number_expr(token: str) -> NumberExpr:
    """
    Parse a value token.

    Raises:
        InvalidInput: Not a number, or NaN/infinite
    """
    if token == RECALL_SIGIL:
        return NumberExpr(recall=True)

    try:
        value = parse_float(token)
    except ValueError:
        raise InvalidInput(token) from None

    if not math.isfinite(value):
        raise InvalidInput(token, "not finite")
    return NumberExpr(value=value)


def is_number_expr(token: str) -> bool:
    """True if the token reads as a value (literal or recall), finite or not."""
    return token == RECALL_SIGIL or FLOAT_PATTERN.fullmatch(token) is not None
