"""
Test Settings and File Search
=============================
"""

import pytest

from ucon.config.settings import (
    PACKAGED_UNITS,
    find_settings_file,
    find_units_file,
    load_settings,
)
from ucon.config.validator import ConfigMissing, ConfigurationError, validate_settings
from ucon.formatting import OutputStyle


@pytest.fixture
def home(tmp_path):
    """An empty UCON_HOME so the real home directory is never read."""
    path = tmp_path / "home"
    path.mkdir()
    return path


def _env(home, **extra):
    env = {'UCON_HOME': str(home)}
    env.update(extra)
    return env


def test_defaults_without_settings_file(home):
    settings = load_settings(environ=_env(home))

    assert settings.source is None
    assert settings.style is OutputStyle.SIMPLE
    assert settings.precision == 10
    assert settings.units_file is None


def test_settings_from_home(home):
    (home / "config.yaml").write_text("format: descriptive\nprecision: 6\n")
    settings = load_settings(environ=_env(home))

    assert settings.source == home / "config.yaml"
    assert settings.style is OutputStyle.DESCRIPTIVE
    assert settings.precision == 6


def test_explicit_path_wins(home, tmp_path):
    (home / "config.yaml").write_text("format: descriptive\n")
    explicit = tmp_path / "mine.yaml"
    explicit.write_text("format: verbose\n")

    assert load_settings(explicit, environ=_env(home)).style is OutputStyle.VERBOSE
    env = _env(home, UCON_CONFIG=str(explicit))
    assert load_settings(environ=env).style is OutputStyle.VERBOSE


def test_explicit_missing_file(home, tmp_path):
    with pytest.raises(ConfigMissing):
        find_settings_file(tmp_path / "missing.yaml", environ=_env(home))


def test_empty_settings_file(home):
    (home / "config.yaml").write_text("")
    assert load_settings(environ=_env(home)).precision == 10


def test_units_file_relative_to_settings(home):
    (home / "config.yaml").write_text("units_file: extra/units.cfg\n")
    settings = load_settings(environ=_env(home))

    assert settings.units_file == home / "extra" / "units.cfg"


def test_invalid_yaml(home):
    (home / "config.yaml").write_text("format: [unclosed\n")

    with pytest.raises(ConfigurationError, match="invalid YAML"):
        load_settings(environ=_env(home))


@pytest.mark.parametrize("settings, message", [
    (["a", "list"], "must be a mapping"),
    ({'colour': 'red'}, "Unknown settings"),
    ({'precision': 'high'}, "wrong type"),
    ({'precision': True}, "wrong type"),
    ({'precision': 40}, "out of range"),
    ({'format': 'fancy'}, "Unknown output format"),
    ({'units_file': 3}, "wrong type"),
])
def test_validate_settings(settings, message):
    with pytest.raises(ConfigurationError, match=message):
        validate_settings(settings)


def test_validate_settings_accepts_nulls():
    validate_settings({'units_file': None, 'format': None, 'precision': None})


def test_units_file_search_order(home, tmp_path):
    flag = tmp_path / "flag.cfg"
    env_file = tmp_path / "env.cfg"
    for path in (flag, env_file):
        path.write_text("")

    env = _env(home, UCON_UNITS=str(env_file))
    assert find_units_file(flag, environ=env) == flag
    assert find_units_file(environ=env) == env_file


def test_units_file_from_settings(home, tmp_path):
    from ucon.config.settings import Settings

    units = tmp_path / "s.cfg"
    units.write_text("")

    assert find_units_file(settings=Settings(units_file=units), environ=_env(home)) == units


def test_units_file_home_then_packaged(home):
    assert find_units_file(environ=_env(home)) == PACKAGED_UNITS
    assert PACKAGED_UNITS.is_file()

    (home / "units.cfg").write_text("")
    assert find_units_file(environ=_env(home)) == home / "units.cfg"


def test_units_file_named_but_missing(home, tmp_path):
    with pytest.raises(ConfigMissing):
        find_units_file(tmp_path / "gone.cfg", environ=_env(home))
