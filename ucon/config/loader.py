"""
Unit Definitions Loader
=======================

Reads the line-oriented units file into a UnitRegistry.

    # comment
    [inch]                      # header, the unit's primary name
    aliases     = in, inches    # more names, comma separated
    type        = length
    conv_factor = 25.4          # reference units per inch
    zero_point  = 0             # optional, 'offset' works too
    dimensions  = 1             # optional, 1..255
    inverse     = 0             # optional, non-zero means reciprocal

The characters [ ] = , # and \\ are structural; escape them with '\\' to use
them in a name. Nothing short of an unreadable file stops a load: bad lines,
bad values and incomplete declarations are skipped with a warning, and the
warnings are both logged and returned.

Usage:
    from ucon.config.loader import load_units

    result = load_units("units.cfg")
    for warning in result.warnings:
        print(warning)
    registry = result.registry
"""

import logging
import math
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, TextIO, Tuple, Union

from ucon.config.validator import ConfigMissing
from ucon.parse.number import parse_float
from ucon.parse.scanner import ScanError, Token, tokenize
from ucon.units import MAX_DIMENSIONS, Unit, UnitRegistry, UnitType

logger = logging.getLogger(__name__)

Source = Union[str, Path, TextIO, Iterable[str]]

HEADER_OPEN = "["
HEADER_CLOSE = "]"
ASSIGN = "="
SEPARATOR = ","
DELIMITERS = HEADER_OPEN + HEADER_CLOSE + ASSIGN + SEPARATOR

INTEGER_PATTERN = re.compile(r"[+-]?\d+")

# Keys accepted in a declaration, and the field each one sets
FIELD_KEYS = {
    'aliases': 'aliases',
    'type': 'type',
    'conv_factor': 'conv_factor',
    'zero_point': 'zero_point',
    'offset': 'zero_point',
    'dimensions': 'dimensions',
    'inverse': 'inverse',
}

REQUIRED_FIELDS = ['type', 'conv_factor']


@dataclass(frozen=True)
class ConfigSyntaxWarning:
    """A recoverable problem in the units file."""
    line: int
    message: str

    def __str__(self) -> str:
        return f"line {self.line}: {self.message}"


@dataclass
class LoadResult:
    registry: UnitRegistry
    warnings: List[ConfigSyntaxWarning] = field(default_factory=list)
    source: str = "<units>"


@dataclass
class _Declaration:
    """A unit between its header and the next one."""
    name: str
    line: int
    fields: Dict[str, Any] = field(default_factory=dict)


class _FieldError(ValueError):
    pass


# =============================================================================
# FIELD VALUES
# =============================================================================

def _single(values: List[str], key: str) -> str:
    if len(values) != 1:
        raise _FieldError(f"'{key}' takes one value, got {len(values)}")
    if not values[0]:
        raise _FieldError(f"'{key}' has no value")
    return values[0]


def _number(values: List[str], key: str) -> float:
    text = _single(values, key)
    try:
        number = parse_float(text)
    except ValueError:
        raise _FieldError(f"'{key}' expects a number, got '{text}'") from None
    if not math.isfinite(number):
        raise _FieldError(f"'{key}' must be finite, got '{text}'")
    return number


def _parse_aliases(values: List[str], key: str) -> Tuple[str, ...]:
    return tuple(v for v in values if v)


def _parse_type(values: List[str], key: str) -> UnitType:
    text = _single(values, key)
    try:
        return UnitType.from_name(text)
    except ValueError as e:
        raise _FieldError(str(e)) from None


def _parse_conv_factor(values: List[str], key: str) -> float:
    factor = _number(values, key)
    if factor <= 0:
        raise _FieldError(f"'{key}' must be positive, got {factor:g}")
    return factor


def _parse_zero_point(values: List[str], key: str) -> float:
    return _number(values, key)


def _parse_dimensions(values: List[str], key: str) -> int:
    text = _single(values, key)
    if not INTEGER_PATTERN.fullmatch(text):
        raise _FieldError(f"'{key}' expects an integer, got '{text}'")
    dimensions = int(text)
    if not 1 <= dimensions <= MAX_DIMENSIONS:
        raise _FieldError(f"'{key}' must be within 1..{MAX_DIMENSIONS}, got {dimensions}")
    return dimensions


def _parse_inverse(values: List[str], key: str) -> bool:
    return _number(values, key) != 0


FIELD_PARSERS = {
    'aliases': _parse_aliases,
    'type': _parse_type,
    'conv_factor': _parse_conv_factor,
    'zero_point': _parse_zero_point,
    'dimensions': _parse_dimensions,
    'inverse': _parse_inverse,
}


# =============================================================================
# LOADER
# =============================================================================

class _Loader:
    """Line-by-line state machine: outside any declaration, or inside one."""

    def __init__(self, source_name: str):
        self.source_name = source_name
        self.registry = UnitRegistry()
        self.warnings: List[ConfigSyntaxWarning] = []
        self.current: Optional[_Declaration] = None

    def warn(self, line: int, message: str) -> None:
        warning = ConfigSyntaxWarning(line, message)
        self.warnings.append(warning)
        logger.warning(f"{self.source_name}: {warning}")

    def feed(self, number: int, line: str) -> None:
        try:
            tokens = tokenize(line, DELIMITERS)
        except ScanError as e:
            self.warn(number, f"syntax error, {e}")
            return

        if len(tokens) == 1 and tokens[0].is_blank:
            return

        if tokens[0].is_blank and len(tokens) > 1 and tokens[1].text == HEADER_OPEN:
            self._header(number, tokens)
        elif len(tokens) > 1 and tokens[1].text == ASSIGN:
            self._field(number, tokens)
        else:
            self.warn(number, f"syntax error, expected '[unit name]' or 'key = value': '{line.strip()}'")

    def _header(self, number: int, tokens: List[Token]) -> None:
        # '', '[', name, ']', ''
        # Any header ends the open declaration, even a malformed one
        self.finish()
        if (len(tokens) != 5 or tokens[2].delim or tokens[3].text != HEADER_CLOSE
                or not tokens[4].is_blank):
            self.warn(number, "syntax error in unit header, expected '[unit name]'")
            return

        name = tokens[2].text.strip()
        if not name:
            self.warn(number, "unit header without a name")
            return

        self.current = _Declaration(name, number)

    def _field(self, number: int, tokens: List[Token]) -> None:
        key = tokens[0].text.strip().lower()
        rest = tokens[2:]

        stray = [t.text for t in rest if t.delim and t.text != SEPARATOR]
        if stray or not key:
            self.warn(number, f"syntax error, unexpected '{stray[0] if stray else ASSIGN}'")
            return

        if self.current is None:
            self.warn(number, f"'{key}' outside of a unit declaration, ignored")
            return

        if key not in FIELD_KEYS:
            self.warn(number, f"unknown key '{key}' in [{self.current.name}], ignored")
            return

        field_name = FIELD_KEYS[key]
        if field_name in self.current.fields:
            self.warn(number, f"duplicate '{key}' in [{self.current.name}], keeping the first")
            return

        values = [t.text.strip() for t in rest if not t.delim]
        try:
            self.current.fields[field_name] = FIELD_PARSERS[field_name](values, key)
        except _FieldError as e:
            self.warn(number, f"[{self.current.name}] {e}")

    def finish(self) -> None:
        """Close the open declaration and add its unit."""
        declaration, self.current = self.current, None
        if declaration is None:
            return

        line, fields = declaration.line, declaration.fields
        missing = [f for f in REQUIRED_FIELDS if f not in fields]
        if missing:
            self.warn(line, f"[{declaration.name}] missing {', '.join(missing)}, unit discarded")
            return

        names = [declaration.name]
        for alias in fields.get('aliases', ()):
            if alias in names:
                self.warn(line, f"[{declaration.name}] repeats the name '{alias}'")
            else:
                names.append(alias)

        try:
            unit = Unit(
                names=tuple(names),
                unit_type=fields['type'],
                conversion_factor=fields['conv_factor'],
                zero_offset=fields.get('zero_point', 0.0),
                dimensions=fields.get('dimensions', 1),
                is_inverse=fields.get('inverse', False),
            )
        except ValueError as e:
            self.warn(line, f"[{declaration.name}] {e}, unit discarded")
            return

        taken = self.registry.conflicts(unit)
        if taken:
            self.warn(line, f"[{declaration.name}] name(s) already defined: {', '.join(taken)}")

        if self.registry.add(unit) is None:
            self.warn(line, f"[{declaration.name}] has no names left, unit discarded")


def _source_name(source: Any) -> str:
    if isinstance(source, (str, os.PathLike)):
        return str(source)
    return getattr(source, 'name', '<units>')


def _run(loader: _Loader, lines: Iterable[str]) -> None:
    for number, line in enumerate(lines, start=1):
        loader.feed(number, line)
    loader.finish()


def load_units(source: Source) -> LoadResult:
    """
    Load unit definitions.

    Args:
        source: Path to a units file, an open text stream, or any iterable
            of lines

    Returns:
        LoadResult with the registry and every warning raised on the way

    Raises:
        ConfigMissing: If the file cannot be opened or read
    """
    name = _source_name(source)
    loader = _Loader(name)

    if isinstance(source, (str, os.PathLike)):
        try:
            with open(source, encoding="utf-8-sig") as f:
                _run(loader, f)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigMissing(source, getattr(e, 'strerror', None) or str(e)) from e
    else:
        _run(loader, source)

    logger.info(f"Loaded {len(loader.registry)} units from {name}")
    if loader.warnings:
        logger.info(f"{len(loader.warnings)} warning(s) in {name}")

    return LoadResult(loader.registry, loader.warnings, name)


def load_registry(source: Source) -> UnitRegistry:
    """load_units() without the warnings (they are still logged)."""
    return load_units(source).registry
