"""
Conversion Session
==================

Entry points that take the three tokens of a conversion (value, input unit,
output unit) and run them through resolution and the engine.

    convert_tokens()    - stateless function over an explicit RecallCache
    Session             - owns a RecallCache and an output style, and handles
                          lines with several values or output units

Usage:
    from ucon.config.loader import load_registry
    from ucon.session import Session

    session = Session(load_registry("units.cfg"))
    conversion = session.convert("63", "gr", "_ug")
    session.format(conversion)      # '4082331.33'
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ucon.convert import convert, convert_values
from ucon.errors import InvalidInput, RecallUnset
from ucon.formatting import DEFAULT_PRECISION, OutputStyle, format_conversion, format_number
from ucon.parse.number import is_number_expr, parse_number_expr
from ucon.resolve import resolve_unit
from ucon.state import RecallCache, Slot
from ucon.units import ResolvedUnit, UnitRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Conversion:
    """One finished conversion."""
    value: float
    result: float
    source: ResolvedUnit
    target: ResolvedUnit


def resolve_value(cache: RecallCache, token: str) -> float:
    """
    Value for a value token, remembering literals for later ':'.

    Raises:
        InvalidInput: Not a finite number
        RecallUnset: ':' before any value was given
    """
    expr = parse_number_expr(token)
    if expr.recall:
        if cache.last_value is None:
            raise RecallUnset(str(Slot.VALUE))
        return cache.last_value
    cache.remember_value(expr.value)
    return expr.value


def convert_tokens(
    registry: UnitRegistry,
    cache: RecallCache,
    value_token: str,
    input_token: str,
    output_token: str,
) -> float:
    """
    Convert a value given as three tokens.

    Tokens are resolved in order (value, input, output), and each literal
    updates the cache as soon as it resolves, so a later failure leaves the
    earlier ones remembered.

    Args:
        registry: Loaded units
        cache: Recall state, updated in place
        value_token: Number or ':'
        input_token: Unit expression to convert from
        output_token: Unit expression to convert to

    Returns:
        The converted value

    Raises:
        UnitError: Any subclass, on the first failure
    """
    value = resolve_value(cache, value_token)
    source = resolve_unit(registry, cache, input_token, Slot.INPUT)
    target = resolve_unit(registry, cache, output_token, Slot.OUTPUT)
    return convert(value, source, target)


def split_conversion(tokens: Sequence[str]):
    """
    Split a conversion line into (value tokens, input token, output tokens).

    The first token is always a value. Further tokens are values while they
    read as numbers and at least two tokens are left for the units, so
    '24 : _m:' is one value with a recalled input unit.

    Raises:
        InvalidInput: Fewer than three tokens
    """
    if len(tokens) < 3:
        raise InvalidInput(
            " ".join(tokens),
            "expected a value, an input unit and at least one output unit",
        )

    split = 1
    while len(tokens) - split > 2 and is_number_expr(tokens[split]):
        split += 1

    return list(tokens[:split]), tokens[split], list(tokens[split + 1:])


class Session:
    """
    A run of conversions sharing recall state and output settings.

    Args:
        registry: Loaded units
        cache: Recall state, a fresh one by default
        style: Output style for format()
        precision: Significant digits for format()
    """

    def __init__(
        self,
        registry: UnitRegistry,
        cache: Optional[RecallCache] = None,
        style: OutputStyle = OutputStyle.SIMPLE,
        precision: int = DEFAULT_PRECISION,
    ):
        self.registry = registry
        self.cache = cache if cache is not None else RecallCache()
        self.style = style
        self.precision = precision
        # Validates the precision
        format_number(0.0, precision)

    def convert(self, value_token: str, input_token: str, output_token: str) -> Conversion:
        value = resolve_value(self.cache, value_token)
        source = resolve_unit(self.registry, self.cache, input_token, Slot.INPUT)
        target = resolve_unit(self.registry, self.cache, output_token, Slot.OUTPUT)
        result = convert(value, source, target)
        return Conversion(value, result, source, target)

    def convert_line(self, tokens: Sequence[str]) -> List[Conversion]:
        """
        Convert every value on a line to every output unit.

        Returns:
            Conversions in value-major order: all outputs for the first
            value, then all outputs for the second, and so on
        """
        value_tokens, input_token, output_tokens = split_conversion(tokens)

        values = [resolve_value(self.cache, t) for t in value_tokens]
        source = resolve_unit(self.registry, self.cache, input_token, Slot.INPUT)

        columns = []
        for token in output_tokens:
            target = resolve_unit(self.registry, self.cache, token, Slot.OUTPUT)
            columns.append((target, convert_values(values, source, target)))

        conversions = []
        for row, value in enumerate(values):
            for target, results in columns:
                conversions.append(Conversion(value, float(results[row]), source, target))

        logger.debug(f"{len(values)} value(s) x {len(columns)} unit(s) from '{input_token}'")
        return conversions

    def format(self, conversion: Conversion) -> str:
        return format_conversion(self.style, conversion, self.precision)
