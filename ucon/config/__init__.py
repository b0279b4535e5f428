"""
ucon.config - Unit definitions and settings
===========================================

    loader      - units.cfg into a UnitRegistry
    settings    - YAML settings and file search
    validator   - configuration errors and settings validation
"""

from .validator import ConfigMissing, ConfigurationError, validate_settings
from .loader import ConfigSyntaxWarning, LoadResult, load_registry, load_units
from .settings import Settings, find_units_file, load_settings

__all__ = [
    'ConfigMissing', 'ConfigurationError', 'validate_settings',
    'ConfigSyntaxWarning', 'LoadResult', 'load_registry', 'load_units',
    'Settings', 'find_units_file', 'load_settings',
]
