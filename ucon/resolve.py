"""
Unit Resolution
===============

Turns a unit token into a ResolvedUnit: parse the expression, then either look
the name up in the registry or take the unit from the recall cache.

Usage:
    from ucon.resolve import resolve_unit
    from ucon.state import RecallCache, Slot

    cache = RecallCache()
    kn = resolve_unit(registry, cache, "_knewton", Slot.INPUT)
    kn.multiplier   # 1000.0
    cache.last_input.unit.name   # 'newton'
"""

import logging

from ucon.errors import RecallUnset, UnitNotFound
from ucon.parse.unit_expr import (
    Literal,
    PrefixedLiteral,
    PrefixedRecall,
    Recall,
    parse_unit_expr,
    prefix_multiplier,
)
from ucon.state import RecallCache, Slot
from ucon.units import ResolvedUnit, UnitRegistry

logger = logging.getLogger(__name__)


def _recall(cache: RecallCache, slot: Slot, prefix: str = "") -> ResolvedUnit:
    recalled = cache.get(slot)
    if recalled is None:
        raise RecallUnset(str(slot))
    multiplier = prefix_multiplier(prefix) if prefix else 1.0
    return ResolvedUnit(recalled.unit, multiplier, prefix, recalled.alias)


def _lookup(registry: UnitRegistry, cache: RecallCache, slot: Slot,
            name: str, prefix: str = "") -> ResolvedUnit:
    unit = registry.lookup(name)
    if unit is None:
        raise UnitNotFound(name, str(slot))
    cache.remember(slot, unit, name)
    multiplier = prefix_multiplier(prefix) if prefix else 1.0
    return ResolvedUnit(unit, multiplier, prefix, name)


def resolve_unit(registry: UnitRegistry, cache: RecallCache,
                 token: str, slot: Slot) -> ResolvedUnit:
    """
    Resolve one unit token for the input or output slot.

    A literal that is found is remembered in the slot (without its prefix)
    before anything else can fail.

    Args:
        registry: Loaded units
        cache: Session recall state, updated in place
        token: Unit expression as typed
        slot: Slot.INPUT or Slot.OUTPUT

    Returns:
        ResolvedUnit with the prefix multiplier applied

    Raises:
        UnitExpressionError: Malformed expression
        UnitNotFound: Literal name not in the registry
        RecallUnset: Recall with nothing cached for the slot
    """
    expr = parse_unit_expr(token)

    if isinstance(expr, Recall):
        resolved = _recall(cache, slot)
    elif isinstance(expr, PrefixedRecall):
        resolved = _recall(cache, slot, expr.prefix)
    elif isinstance(expr, PrefixedLiteral):
        resolved = _lookup(registry, cache, slot, expr.name, expr.prefix)
    elif isinstance(expr, Literal):
        resolved = _lookup(registry, cache, slot, expr.name)
    else:
        raise TypeError(f"unexpected unit expression: {expr!r}")

    logger.debug(
        f"{slot}: '{token}' -> {resolved.unit.name} "
        f"({resolved.unit.unit_type}, x{resolved.multiplier:g})"
    )
    return resolved
