"""
Unit Model and Registry
=======================

Units are loaded once from the unit definitions file (see ucon.config.loader)
and never change afterwards. The registry keeps them in declaration order for
listing and indexes every name for lookup.

Reference units:
    Each unit type has one reference unit (millimetre for length, kelvin for
    temperature, ...). A unit's conversion_factor is how many reference units
    make one of it; zero_offset is the reference value at the unit's zero.

Usage:
    >>> from ucon.units import Unit, UnitType, UnitRegistry
    >>> registry = UnitRegistry()
    >>> _ = registry.add(Unit(("inch", "in"), UnitType.LENGTH, 25.4))
    >>> registry["in"].conversion_factor
    25.4
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple


# =============================================================================
# UNIT TYPES
# =============================================================================

class UnitType(Enum):
    """Physical quantity a unit measures. Values are the names used in units.cfg."""
    LENGTH = "length"
    VOLUME = "volume"
    AREA = "area"
    ENERGY = "energy"
    POWER = "power"
    MASS = "mass"
    FORCE = "force"
    TORQUE = "torque"
    SPEED = "speed"
    PRESSURE = "pressure"
    TEMPERATURE = "temperature"
    FUEL_ECONOMY = "fuel economy"

    @classmethod
    def from_name(cls, name: str) -> "UnitType":
        """Look up a type by its config name. Raises ValueError if unknown."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f"no such unit type: '{name}'") from None

    def __str__(self) -> str:
        return self.value


MAX_DIMENSIONS = 255


# =============================================================================
# UNIT DEFINITIONS
# =============================================================================

@dataclass(frozen=True)
class Unit:
    """Definition of a single unit."""
    names: Tuple[str, ...]           # Primary name first, then aliases
    unit_type: UnitType
    conversion_factor: float         # Reference units per one of this unit
    zero_offset: float = 0.0         # For affine scales (temperature)
    dimensions: int = 1              # Exponent applied to metric prefixes
    is_inverse: bool = False         # Reciprocal relationship to the reference

    def __post_init__(self):
        if not self.names:
            raise ValueError("a unit needs at least one name")
        if len(set(self.names)) != len(self.names):
            raise ValueError(f"duplicate names in unit: {self.names}")
        if not (math.isfinite(self.conversion_factor) and self.conversion_factor > 0):
            raise ValueError(
                f"conversion factor must be positive and finite, got {self.conversion_factor}"
            )
        if not math.isfinite(self.zero_offset):
            raise ValueError(f"zero offset must be finite, got {self.zero_offset}")
        if not 1 <= self.dimensions <= MAX_DIMENSIONS:
            raise ValueError(
                f"dimensions must be within 1..{MAX_DIMENSIONS}, got {self.dimensions}"
            )

    @property
    def name(self) -> str:
        return self.names[0]

    @property
    def aliases(self) -> Tuple[str, ...]:
        return self.names[1:]

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ResolvedUnit:
    """
    A unit as it appears in one conversion: the registry entry plus whatever
    metric prefix the expression applied to it.

    alias is the name the user typed (or the one a recall stood for), so the
    formatter can echo it back without touching the registry.
    """
    unit: Unit
    multiplier: float = 1.0
    prefix: str = ""
    alias: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.prefix}{self.alias or self.unit.name}"


# =============================================================================
# REGISTRY
# =============================================================================

class UnitRegistry:
    """
    Ordered, append-only collection of units with name lookup.

    Every name is unique across the whole registry. When a new unit shares
    names with units already present, only its remaining names are kept;
    a unit left without names is not added.
    """

    def __init__(self):
        self._units: List[Unit] = []
        self._index: Dict[str, int] = {}

    def add(self, unit: Unit) -> Optional[Unit]:
        """
        Add a unit.

        Returns:
            The unit as stored (possibly with conflicting names removed),
            or None if every name was already taken.
        """
        if self.conflicts(unit):
            kept = tuple(n for n in unit.names if n not in self._index)
            if not kept:
                return None
            unit = replace(unit, names=kept)

        position = len(self._units)
        self._units.append(unit)
        for name in unit.names:
            self._index[name] = position
        return unit

    def conflicts(self, unit: Unit) -> List[str]:
        """Names of the given unit that are already registered."""
        return [n for n in unit.names if n in self._index]

    def lookup(self, name: str) -> Optional[Unit]:
        """Exact, case-sensitive lookup. Returns None when the name is unknown."""
        position = self._index.get(name)
        if position is None:
            return None
        return self._units[position]

    def __getitem__(self, name: str) -> Unit:
        unit = self.lookup(name)
        if unit is None:
            raise KeyError(name)
        return unit

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[Unit]:
        return iter(self._units)

    def __len__(self) -> int:
        return len(self._units)

    def by_type(self, unit_type: UnitType) -> List[Unit]:
        return [u for u in self._units if u.unit_type is unit_type]

    def types(self) -> List[UnitType]:
        """Unit types present in the registry, in first-seen order."""
        seen: List[UnitType] = []
        for unit in self._units:
            if unit.unit_type not in seen:
                seen.append(unit.unit_type)
        return seen
