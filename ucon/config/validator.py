"""
ucon Configuration Validator

Checks the settings file before anything uses it. Every problem becomes a
ConfigurationError with a message that says which file and which key.

Usage:
    from ucon.config.validator import ConfigurationError, validate_settings

    # In load_settings():
    validate_settings(settings, config_path)
"""

from pathlib import Path
from typing import Any, Optional, Union


class ConfigurationError(Exception):
    """
    Raised when the settings file is unusable.

    Fatal at startup only: the CLI reports it and exits with status 1.
    """
    pass


class ConfigMissing(ConfigurationError):
    """Raised when a settings or units file cannot be opened or read."""

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"unable to read configuration file {self.path}{detail}")


FORMAT_NAMES = ['simple', 'descriptive', 'verbose']
PRECISION_RANGE = (1, 17)

# Accepted keys and the YAML types each may take
SETTINGS_FIELDS = {
    'units_file': (str,),
    'format': (str,),
    'precision': (int,),
}


def _banner(title: str, body: str, config_path: Optional[Path]) -> str:
    location = f"File: {config_path}\n" if config_path else ""
    return (
        f"\n{'='*60}\n"
        f"CONFIGURATION ERROR: {title}\n"
        f"{'='*60}\n"
        f"{location}\n"
        f"{body}\n"
        f"{'='*60}"
    )


def validate_settings(settings: Any, config_path: Optional[Path] = None) -> None:
    """
    Validate a parsed settings mapping.

    Args:
        settings: Result of yaml.safe_load on the settings file
        config_path: Path to the settings file (for error message)

    Raises:
        ConfigurationError: Not a mapping, unknown keys, wrong types or
            out-of-range values
    """
    if not isinstance(settings, dict):
        raise ConfigurationError(_banner(
            "Settings must be a mapping",
            f"Got {type(settings).__name__} instead of key: value pairs.",
            config_path,
        ))

    unknown = [k for k in settings if k not in SETTINGS_FIELDS]
    if unknown:
        raise ConfigurationError(_banner(
            "Unknown settings",
            f"Unknown keys:\n"
            f"{''.join(f'  - {k}' + chr(10) for k in unknown)}\n"
            f"Allowed keys:\n"
            f"{''.join(f'  - {k}' + chr(10) for k in SETTINGS_FIELDS)}",
            config_path,
        ))

    for key, types in SETTINGS_FIELDS.items():
        if key not in settings or settings[key] is None:
            continue
        value = settings[key]
        # bool is an int subclass; 'precision: yes' is still a mistake
        if isinstance(value, bool) or not isinstance(value, types):
            raise ConfigurationError(_banner(
                f"{key} has the wrong type",
                f"Expected {' or '.join(t.__name__ for t in types)}, "
                f"got {type(value).__name__}: {value!r}",
                config_path,
            ))

    fmt = settings.get('format')
    if fmt is not None and fmt.strip().lower() not in FORMAT_NAMES:
        raise ConfigurationError(_banner(
            "Unknown output format",
            f"format: {fmt}\n\nUse one of: {', '.join(FORMAT_NAMES)}",
            config_path,
        ))

    precision = settings.get('precision')
    low, high = PRECISION_RANGE
    if precision is not None and not low <= precision <= high:
        raise ConfigurationError(_banner(
            "precision out of range",
            f"precision: {precision}\n\nSignificant digits must be within {low}..{high}.",
            config_path,
        ))

