"""
ucon - Unit Converter
=====================

Converts values between units described in a plain-text units database.

    TOKENS IN → RESOLVE → CONVERT → FORMAT
    (value, input unit, output unit)

Architecture:
    - config/: units.cfg loader, YAML settings
    - parse/: line scanner, unit and value expressions
    - resolve, convert: unit lookup with prefixes and recall, conversion math
    - session, console, run: entry points for code, batch files and the shell

Usage:
    # Command line
    ucon 63 gr _ug

    # Or from Python
    from ucon.config.loader import load_registry
    from ucon.session import convert_tokens
    from ucon.state import RecallCache
"""

__version__ = "1.0.0"

from . import errors
from . import units
from .config.loader import load_registry, load_units
from .session import Session, convert_tokens
from .state import RecallCache

__all__ = [
    'errors', 'units',
    'load_registry', 'load_units',
    'Session', 'convert_tokens', 'RecallCache',
    '__version__',
]
