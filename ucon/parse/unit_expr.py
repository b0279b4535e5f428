"""
Unit Expressions
================

Decodes a raw unit token into what it asks for, without looking anything up.

    in          literal unit name
    _kg         metric prefix 'k' applied to the literal name 'g'
    :           recall the last unit used in this position
    _k:         recall the last unit, with prefix 'k'
    \\_x, \\:     backslash escapes a character, so these are literal names

Usage:
    >>> from ucon.parse.unit_expr import parse_unit_expr, PrefixedLiteral
    >>> parse_unit_expr("_ug")
    PrefixedLiteral(prefix='u', name='g')
"""

from dataclasses import dataclass
from typing import Dict, Union

from ucon.errors import NoNameAllowed, NoNameGiven, UnknownPrefix

PREFIX_SIGIL = "_"
RECALL_SIGIL = ":"
ESCAPE = "\\"

PREFIXES: Dict[str, float] = {
    'Y': 1e24,   # yotta
    'Z': 1e21,   # zetta
    'E': 1e18,   # exa
    'P': 1e15,   # peta
    'T': 1e12,   # tera
    'G': 1e9,    # giga
    'M': 1e6,    # mega
    'k': 1e3,    # kilo
    'h': 1e2,    # hecto
    'D': 1e1,    # deca
    'd': 1e-1,   # deci
    'c': 1e-2,   # centi
    'm': 1e-3,   # milli
    'u': 1e-6,   # micro
    'n': 1e-9,   # nano
    'p': 1e-12,  # pico
    'f': 1e-15,  # femto
    'a': 1e-18,  # atto
    'z': 1e-21,  # zepto
    'y': 1e-24,  # yocto
}


# =============================================================================
# EXPRESSION TYPES
# =============================================================================

@dataclass(frozen=True)
class Literal:
    name: str


@dataclass(frozen=True)
class PrefixedLiteral:
    prefix: str
    name: str


@dataclass(frozen=True)
class Recall:
    pass


@dataclass(frozen=True)
class PrefixedRecall:
    prefix: str


UnitExpr = Union[Literal, PrefixedLiteral, Recall, PrefixedRecall]


def prefix_multiplier(prefix: str, token: str = "") -> float:
    """Power-of-ten multiplier for a prefix character. Raises UnknownPrefix."""
    try:
        return PREFIXES[prefix]
    except KeyError:
        raise UnknownPrefix(prefix, token or prefix) from None


# =============================================================================
# PARSING
# =============================================================================

def _unescape(text: str, token: str) -> str:
    chars = []
    escaped = False
    for ch in text:
        if escaped:
            chars.append(ch)
            escaped = False
        elif ch == ESCAPE:
            escaped = True
        else:
            chars.append(ch)
    if escaped:
        raise NoNameGiven(token, f"'{token}' ends with an escape")
    name = "".join(chars)
    if not name:
        raise NoNameGiven(token)
    return name


def parse_unit_expr(token: str) -> UnitExpr:
    """
    Parse one unit token.

    Args:
        token: Unit expression as typed, escapes still in place

    Returns:
        Literal, PrefixedLiteral, Recall or PrefixedRecall

    Raises:
        NoNameGiven: Empty token, or a prefix with nothing after it
        UnknownPrefix: '_' followed by a character that is not a metric prefix
        NoNameAllowed: Recall sigil followed by more characters
    """
    if not token:
        raise NoNameGiven(token, "empty unit expression")

    if token == RECALL_SIGIL:
        return Recall()
    if token.startswith(RECALL_SIGIL):
        raise NoNameAllowed(token)

    if not token.startswith(PREFIX_SIGIL):
        return Literal(_unescape(token, token))

    if len(token) == 1:
        raise NoNameGiven(token, f"'{token}' needs a prefix and a unit name")

    prefix = token[1]
    prefix_multiplier(prefix, token)

    body = token[2:]
    if not body:
        raise NoNameGiven(token, f"prefix '{prefix}' needs a unit name or '{RECALL_SIGIL}'")
    if body == RECALL_SIGIL:
        return PrefixedRecall(prefix)
    if body.startswith(RECALL_SIGIL):
        raise NoNameAllowed(token)
    return PrefixedLiteral(prefix, _unescape(body, token))
