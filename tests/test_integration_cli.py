"""Integration tests for CLI functionality."""

import json
import logging
import os
import subprocess
import sys

import pytest

from stepcalc_pkg import config
from stepcalc_pkg.cli import catalogue, main_entry, parse_assignments


@pytest.fixture(autouse=True)
def isolate_cli_state(monkeypatch):
    """main_entry installs log handlers and may change the display precision."""
    monkeypatch.setattr(config, "OUTPUT_PRECISION", config.OUTPUT_PRECISION)
    yield
    logging.getLogger("stepcalc").handlers.clear()


def test_cli_version(capsys):
    assert main_entry(["--version"]) == 0
    assert capsys.readouterr().out.strip() == config.VERSION


def test_cli_human_output(capsys):
    code = main_entry(["number-theory", "gcd-lcm", "a=48", "b=18"])
    out = capsys.readouterr().out
    assert code == 0
    assert out.startswith("Result: (6, 144)")
    assert "1. Start the Euclidean algorithm" in out


def test_cli_json_output(capsys):
    code = main_entry(["algebra", "linear-inequality", "expression=-2x + 3 > 7", "--format", "json"])
    data = json.loads(capsys.readouterr().out)
    assert code == 0
    assert data["value"]["text"] == "x < -2"
    assert data["domain"] == "algebra"


def test_cli_geometry_shape_params(capsys):
    code = main_entry(["geometry", "calculate", "shape=cube", "a=2", "--format", "json"])
    data = json.loads(capsys.readouterr().out)
    assert code == 0
    assert data["value"]["volume"] == 8


def test_cli_error_exit_code(capsys):
    code = main_entry(["trigonometry", "inverse", "function=asin", "value=2"])
    out = capsys.readouterr().out
    assert code == 1
    assert "INVERSE_DOMAIN" in out


def test_cli_unknown_operation(capsys):
    assert main_entry(["algebra", "integrate", "f=x"]) == 2
    assert "Unknown operation" in capsys.readouterr().err


def test_cli_unknown_domain(capsys):
    assert main_entry(["calculus", "derivative"]) == 2
    assert "Unknown domain" in capsys.readouterr().err


def test_cli_bad_assignment(capsys):
    assert main_entry(["algebra", "factorial", "5"]) == 2
    assert "key=value" in capsys.readouterr().err


def test_cli_missing_operation(capsys):
    assert main_entry(["algebra"]) == 2


def test_cli_precision_override(capsys):
    main_entry(["trigonometry", "to-radians", "degrees=180", "--precision", "3"])
    out = capsys.readouterr().out
    assert out.startswith("Result: 3.142")


def test_cli_list(capsys):
    assert main_entry(["--list"]) == 0
    out = capsys.readouterr().out
    assert "linear-inequality" in out
    assert "shape=frustum r1 r2 h" in out


def test_catalogue_entries():
    entries = catalogue()
    geometry = [e for e in entries if e["domain"] == "geometry"]
    assert geometry[0]["shapes"]["torus"] == ["R", "r"]


def test_parse_assignments():
    assert parse_assignments(["a=1", "expression=x + 1 > 2"]) == {
        "a": "1",
        "expression": "x + 1 > 2",
    }
    with pytest.raises(ValueError):
        parse_assignments(["=3"])


def test_cli_module_subprocess():
    """Smoke test the installed module entry point."""
    result = subprocess.run(
        [sys.executable, "-m", "stepcalc_pkg", "number-theory", "primality", "n=360"],
        capture_output=True,
        encoding="utf-8",
        env={**os.environ, "PYTHONIOENCODING": "utf-8"},
        timeout=60,
    )
    assert result.returncode == 0
    assert "360 = 2³·3²·5 (composite)" in result.stdout
