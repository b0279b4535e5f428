"""
Test Command Line
=================
"""

import io

import pytest

from ucon.run import main


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep the user's own settings and units out of every run."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("UCON_HOME", str(home))
    monkeypatch.delenv("UCON_CONFIG", raising=False)
    monkeypatch.delenv("UCON_UNITS", raising=False)
    return home


def test_single_conversion(capsys):
    assert main(["1", "in", "mm"]) == 0
    assert capsys.readouterr().out == "25.4\n"


def test_negative_value(capsys):
    assert main(["-40", "C", "F"]) == 0
    assert capsys.readouterr().out == "-40\n"


@pytest.mark.parametrize("flag, expected", [
    ("-s", "5.7354724\n"),
    ("-d", "5.7354724 L\n"),
    ("-v", "350 cid = 5.7354724 L\n"),
])
def test_style_flags(capsys, flag, expected):
    assert main([flag, "350", "cid", "L"]) == 0
    assert capsys.readouterr().out == expected


def test_precision_flag(capsys):
    assert main(["--precision", "3", "350", "cid", "L"]) == 0
    assert capsys.readouterr().out == "5.74\n"


def test_failed_conversion(capsys):
    assert main(["1", "newton", "metre"]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "incompatible unit types" in captured.err


def test_usage_errors():
    with pytest.raises(SystemExit) as excinfo:
        main(["--precision", "0", "1", "in", "mm"])
    assert excinfo.value.code == 2

    with pytest.raises(SystemExit) as excinfo:
        main(["-b", "file.txt", "-s", "1", "in", "mm"])
    assert excinfo.value.code == 2


def test_batch_file(tmp_path, capsys):
    batch = tmp_path / "batch.txt"
    batch.write_text("# conversions\n1 in mm\nformat d\n63 gr _ug\n24 : _m:\n")

    assert main(["-b", str(batch)]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "25.4", "Okay.", "4082331.33 ug", "1555.17384 mg",
    ]


def test_batch_with_failures(tmp_path, capsys):
    batch = tmp_path / "batch.txt"
    batch.write_text("1 in mm\n1 in furlong\n")

    assert main(["-b", str(batch)]) == 1
    assert "converting to unknown unit" in capsys.readouterr().err


def test_batch_from_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("2 ft in\n"))

    assert main(["-b"]) == 0
    assert capsys.readouterr().out == "24\n"


def test_batch_missing_file(tmp_path, capsys):
    assert main(["-b", str(tmp_path / "none.txt")]) == 1
    assert "cannot read" in capsys.readouterr().err


def test_output_file_and_quiet(tmp_path, capsys):
    results = tmp_path / "results.txt"

    assert main(["-q", "-o", str(results), "1", "in", "mm"]) == 0
    assert capsys.readouterr().out == ""
    assert results.read_text() == "25.4\n"


def test_interactive(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("1 in mm\nexit\n"))

    assert main([]) == 0
    assert capsys.readouterr().out == "> 25.4\n> "


def test_list_units(capsys):
    assert main(["--list-units", "torque"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "torque:",
        "  pound-foot (lbft, lb-ft)",
        "  newton-metre (newton-meter, Nm, N-m)",
    ]


def test_list_all_units(capsys):
    assert main(["--list-units"]) == 0
    assert capsys.readouterr().out.startswith("length:\n  inch (in)\n")


def test_custom_units_file(tmp_path, capsys, fixtures_dir):
    assert main(["--units", str(fixtures_dir / "small.cfg"), "30", "mpg", "L/100km"]) == 0
    assert capsys.readouterr().out == "7.840486111\n"


def test_missing_units_file(tmp_path, capsys):
    assert main(["--units", str(tmp_path / "none.cfg"), "1", "in", "mm"]) == 1
    assert "unable to read configuration file" in capsys.readouterr().err


def test_settings_file(tmp_path, capsys):
    config = tmp_path / "config.yaml"
    config.write_text("format: descriptive\nprecision: 4\n")

    assert main(["--config", str(config), "350", "cid", "L"]) == 0
    assert capsys.readouterr().out == "5.735 L\n"


def test_flags_override_settings(tmp_path, capsys):
    config = tmp_path / "config.yaml"
    config.write_text("format: descriptive\n")

    assert main(["--config", str(config), "-s", "1", "in", "mm"]) == 0
    assert capsys.readouterr().out == "25.4\n"


def test_bad_settings_file(tmp_path, capsys):
    config = tmp_path / "config.yaml"
    config.write_text("precision: 99\n")

    assert main(["--config", str(config), "1", "in", "mm"]) == 1
    assert "CONFIGURATION ERROR" in capsys.readouterr().err


def test_version(capsys):
    from ucon import __version__

    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == f"ucon {__version__}"
