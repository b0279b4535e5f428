"""
Recall State
============

What ':' refers to. One RecallCache belongs to one session; every successful
literal resolution overwrites its slot, even if the conversion it was part of
fails later on.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ucon.units import Unit


class Slot(Enum):
    VALUE = "value"
    INPUT = "input"
    OUTPUT = "output"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RecalledUnit:
    """A cached unit and the name it was resolved by."""
    unit: Unit
    alias: str

    @property
    def display_name(self) -> str:
        return self.alias or self.unit.name


@dataclass
class RecallCache:
    last_value: Optional[float] = None
    last_input: Optional[RecalledUnit] = None
    last_output: Optional[RecalledUnit] = None

    def get(self, slot: Slot) -> Optional[RecalledUnit]:
        """Cached unit for the input or output slot."""
        if slot is Slot.INPUT:
            return self.last_input
        if slot is Slot.OUTPUT:
            return self.last_output
        raise ValueError(f"slot {slot} does not hold a unit")

    def remember(self, slot: Slot, unit: Unit, alias: str = "") -> None:
        recalled = RecalledUnit(unit, alias or unit.name)
        if slot is Slot.INPUT:
            self.last_input = recalled
        elif slot is Slot.OUTPUT:
            self.last_output = recalled
        else:
            raise ValueError(f"slot {slot} does not hold a unit")

    def remember_value(self, value: float) -> None:
        self.last_value = value
