"""
Output Formatting
=================

Renders a conversion result in one of three styles:

    simple          25.4
    descriptive     25.4 mm
    verbose         1 in = 25.4 mm

Unit names are echoed as typed, with recall sigils swapped for the name they
recalled, so '_k:' after 'newton' prints as 'knewton'. Nothing here touches
the registry.
"""

import math
from enum import Enum
from typing import Optional, TYPE_CHECKING

from ucon.errors import UnitExpressionError
from ucon.parse.number import RECALL_SIGIL, parse_float
from ucon.parse.unit_expr import (
    Literal,
    PrefixedLiteral,
    PrefixedRecall,
    Recall,
    parse_unit_expr,
)
from ucon.state import RecallCache, Slot

if TYPE_CHECKING:
    from ucon.session import Conversion

DEFAULT_PRECISION = 10
MAX_PRECISION = 17


class OutputStyle(Enum):
    SIMPLE = "simple"
    DESCRIPTIVE = "descriptive"
    VERBOSE = "verbose"

    @classmethod
    def from_name(cls, name: str) -> "OutputStyle":
        """
        Accepts the full names and the one-letter console forms s, d, v
        and l (long, same as verbose).
        """
        key = name.strip().lower()
        for style in cls:
            if key == style.value:
                return style
        short = {'s': cls.SIMPLE, 'd': cls.DESCRIPTIVE, 'v': cls.VERBOSE, 'l': cls.VERBOSE}
        if key in short:
            return short[key]
        raise ValueError(f"unknown output format: '{name}'")

    def __str__(self) -> str:
        return self.value


def format_number(value: float, precision: int = DEFAULT_PRECISION) -> str:
    """'%g' formatting with the given number of significant digits."""
    if not 1 <= precision <= MAX_PRECISION:
        raise ValueError(f"precision must be within 1..{MAX_PRECISION}, got {precision}")
    text = f"{value:.{precision}g}"
    if text == "-0":
        return "0"
    return text


def display_name(token: str, cache: Optional[RecallCache], slot: Slot) -> str:
    """
    Name to print for a unit token.

    Malformed tokens, and recalls with nothing cached, come back unchanged.
    """
    try:
        expr = parse_unit_expr(token)
    except UnitExpressionError:
        return token

    if isinstance(expr, Literal):
        return expr.name
    if isinstance(expr, PrefixedLiteral):
        return f"{expr.prefix}{expr.name}"

    recalled = cache.get(slot) if cache is not None else None
    if recalled is None:
        return token
    if isinstance(expr, PrefixedRecall):
        return f"{expr.prefix}{recalled.display_name}"
    if isinstance(expr, Recall):
        return recalled.display_name
    return token


def display_value(token: str, cache: Optional[RecallCache],
                  precision: int = DEFAULT_PRECISION) -> str:
    """Input value as printed in verbose output."""
    if token == RECALL_SIGIL:
        if cache is not None and cache.last_value is not None:
            return format_number(cache.last_value, precision)
        return token
    try:
        value = parse_float(token)
    except ValueError:
        return token
    if not math.isfinite(value):
        return token
    return format_number(value, precision)


def format_result(
    style: OutputStyle,
    value: float,
    value_token: str,
    input_token: str,
    output_token: str,
    cache: Optional[RecallCache] = None,
    precision: int = DEFAULT_PRECISION,
) -> str:
    """
    Render one result from the tokens that produced it.

    Args:
        style: Output style
        value: Converted value
        value_token: Value as typed
        input_token: Input unit as typed
        output_token: Output unit as typed
        cache: Recall state to expand ':' against
        precision: Significant digits

    Returns:
        The formatted line, without a newline
    """
    result = format_number(value, precision)

    if style is OutputStyle.SIMPLE:
        return result

    output_name = display_name(output_token, cache, Slot.OUTPUT)
    if style is OutputStyle.DESCRIPTIVE:
        return f"{result} {output_name}"

    input_value = display_value(value_token, cache, precision)
    input_name = display_name(input_token, cache, Slot.INPUT)
    return f"{input_value} {input_name} = {result} {output_name}"


def format_conversion(style: OutputStyle, conversion: "Conversion",
                      precision: int = DEFAULT_PRECISION) -> str:
    """Render a finished Conversion, using the names it was resolved with."""
    result = format_number(conversion.result, precision)

    if style is OutputStyle.SIMPLE:
        return result
    if style is OutputStyle.DESCRIPTIVE:
        return f"{result} {conversion.target.display_name}"

    value = format_number(conversion.value, precision)
    return f"{value} {conversion.source.display_name} = {result} {conversion.target.display_name}"
