"""
ucon Settings
=============

Optional YAML settings file and the search for the units file.

    units_file: /path/to/units.cfg
    format: descriptive
    precision: 12

Settings file, first found:
    1. --config PATH
    2. $UCON_CONFIG
    3. ~/.ucon/config.yaml

Units file, first found:
    1. --units PATH
    2. $UCON_UNITS
    3. units_file from the settings file
    4. ~/.ucon/units.cfg
    5. the units.cfg shipped in ucon/data

$UCON_HOME replaces ~/.ucon. A path named explicitly (flag, environment or
settings) must exist; the home-directory files are used only when present.

Usage:
    from ucon.config.settings import load_settings, find_units_file

    settings = load_settings()
    units_path = find_units_file(settings=settings)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

import yaml

from ucon.config.validator import ConfigMissing, ConfigurationError, validate_settings
from ucon.formatting import DEFAULT_PRECISION, OutputStyle

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

CONFIG_ENV = "UCON_CONFIG"
UNITS_ENV = "UCON_UNITS"
HOME_ENV = "UCON_HOME"

SETTINGS_FILENAME = "config.yaml"
UNITS_FILENAME = "units.cfg"

PACKAGED_UNITS = Path(__file__).resolve().parent.parent / "data" / UNITS_FILENAME


@dataclass
class Settings:
    units_file: Optional[Path] = None
    style: OutputStyle = OutputStyle.SIMPLE
    precision: int = DEFAULT_PRECISION
    source: Optional[Path] = None       # File the settings came from


def user_home(environ: Optional[Mapping[str, str]] = None) -> Path:
    """The per-user configuration directory."""
    environ = os.environ if environ is None else environ
    if environ.get(HOME_ENV):
        return Path(environ[HOME_ENV]).expanduser()
    return Path.home() / ".ucon"


def find_settings_file(
    path: Optional[PathLike] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """
    Locate the settings file.

    Returns:
        Path to read, or None when no settings file is in use

    Raises:
        ConfigMissing: If a file named by flag or environment does not exist
    """
    environ = os.environ if environ is None else environ

    explicit = path or environ.get(CONFIG_ENV)
    if explicit:
        explicit = Path(explicit).expanduser()
        if not explicit.is_file():
            raise ConfigMissing(explicit, "no such file")
        return explicit

    default = user_home(environ) / SETTINGS_FILENAME
    if default.is_file():
        return default
    return None


def read_settings(config_path: Path) -> Settings:
    """
    Read and validate one settings file.

    Raises:
        ConfigMissing: File cannot be read
        ConfigurationError: Invalid YAML or invalid settings
    """
    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigMissing(config_path, e.strerror or str(e)) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML in {config_path}: {e}") from e

    # An empty file is an empty mapping
    if raw is None:
        raw = {}

    validate_settings(raw, config_path)

    settings = Settings(source=config_path)
    if raw.get('units_file'):
        units_file = Path(raw['units_file']).expanduser()
        # Relative to the settings file, not the working directory
        if not units_file.is_absolute():
            units_file = config_path.parent / units_file
        settings.units_file = units_file
    if raw.get('format'):
        settings.style = OutputStyle.from_name(raw['format'])
    if raw.get('precision') is not None:
        settings.precision = raw['precision']
    return settings


def load_settings(
    path: Optional[PathLike] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Find and read the settings file, or return defaults if there is none.

    Args:
        path: Settings file given on the command line
        environ: Environment to consult (os.environ by default)
    """
    config_path = find_settings_file(path, environ)
    if config_path is None:
        logger.debug("no settings file, using defaults")
        return Settings()

    logger.info(f"Settings: {config_path}")
    return read_settings(config_path)


def find_units_file(
    path: Optional[PathLike] = None,
    settings: Optional[Settings] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    """
    Locate the unit definitions file.

    Returns:
        Path of the units file to load

    Raises:
        ConfigMissing: If a file named by flag, environment or settings
            does not exist
    """
    environ = os.environ if environ is None else environ

    explicit = path or environ.get(UNITS_ENV) or (settings.units_file if settings else None)
    if explicit:
        explicit = Path(explicit).expanduser()
        if not explicit.is_file():
            raise ConfigMissing(explicit, "no such file")
        return explicit

    user_units = user_home(environ) / UNITS_FILENAME
    if user_units.is_file():
        return user_units

    return PACKAGED_UNITS
