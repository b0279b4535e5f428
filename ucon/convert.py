"""
Conversion Engine
=================

Converts a value between two resolved units of the same type by way of the
type's reference unit.

    v = value * p_in ** d_in            metric prefix, per dimension
    v = 1 / v                           input is an inverse unit
    v = v * cf_in                       into reference units
    v = v + zo_in - zo_out              shift between zero points
    v = v / cf_out                      out of reference units
    v = 1 / v                           output is an inverse unit
    v = v / p_out ** d_out              output prefix

For units that are not inverse this is
((value * p_in^d_in * cf_in + zo_in) - zo_out) / cf_out / p_out^d_out.

Usage:
    from ucon.convert import convert, convert_values

    convert(1.0, inch, mm)                      # 25.4
    convert_values([1, 2, 3], inch, mm)         # array([25.4, 50.8, 76.2])
"""

from typing import Iterable, Union

import numpy as np

from ucon.errors import IncompatibleUnits, InvalidInput
from ucon.units import ResolvedUnit


def check_compatible(source: ResolvedUnit, target: ResolvedUnit) -> None:
    """
    Raises:
        IncompatibleUnits: If the units measure different quantities
    """
    if source.unit.unit_type is not target.unit.unit_type:
        raise IncompatibleUnits(
            str(source.unit.unit_type),
            str(target.unit.unit_type),
            source.display_name,
            target.display_name,
        )


def _is_identity(source: ResolvedUnit, target: ResolvedUnit) -> bool:
    return source.unit == target.unit and source.multiplier == target.multiplier


def _apply(values: np.ndarray, source: ResolvedUnit, target: ResolvedUnit) -> np.ndarray:
    src, dst = source.unit, target.unit

    with np.errstate(divide='ignore', over='ignore', invalid='ignore'):
        v = values * np.float64(source.multiplier) ** src.dimensions
        if src.is_inverse:
            v = 1.0 / v
        v = v * np.float64(src.conversion_factor)
        v = v + (np.float64(src.zero_offset) - np.float64(dst.zero_offset))
        v = v / np.float64(dst.conversion_factor)
        if dst.is_inverse:
            v = 1.0 / v
        v = v / np.float64(target.multiplier) ** dst.dimensions

    return v


def convert_values(
    values: Union[Iterable[float], np.ndarray],
    source: ResolvedUnit,
    target: ResolvedUnit,
) -> np.ndarray:
    """
    Convert every element of an array.

    Args:
        values: Values in the source unit
        source: Unit converted from
        target: Unit converted to

    Returns:
        float64 array of converted values

    Raises:
        InvalidInput: If any value or any result is NaN or infinite
        IncompatibleUnits: If the unit types differ
    """
    values = np.asarray(values, dtype=np.float64)

    bad = ~np.isfinite(values)
    if bad.any():
        raise InvalidInput(repr(float(values[bad][0])), "not finite")

    check_compatible(source, target)

    if _is_identity(source, target):
        return values.copy()

    result = _apply(values, source, target)

    bad = ~np.isfinite(result)
    if bad.any():
        raise InvalidInput(
            repr(float(values[bad][0])),
            f"no finite result converting {source.display_name} to {target.display_name}",
        )
    return result


def convert(value: float, source: ResolvedUnit, target: ResolvedUnit) -> float:
    """
    Convert a single value. Same rules as convert_values.

    Returns:
        Converted value, unrounded
    """
    return float(convert_values([value], source, target)[0])
