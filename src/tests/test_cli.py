"""
Tests para la línea de comandos `pseudocheck`.
"""

import json

import pytest

from cli import execute_cli, EXIT_OK, EXIT_USAGE, EXIT_INVALID


@pytest.fixture
def write(tmp_path):
    def _write(name, text):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)
    return _write


def test_valid_program(write, capsys):
    path = write("ok.pseudo", "DECLARE x : INTEGER\nx ← 5\nOUTPUT x\n")
    assert execute_cli([path]) == EXIT_OK
    out = capsys.readouterr().out
    assert "No se encontraron errores ✅" in out


def test_invalid_program(write, capsys):
    path = write("bad.pseudo", "DECLARE x : INTEGER\nx = 5\n")
    assert execute_cli([path]) == EXIT_INVALID
    out = capsys.readouterr().out
    assert "línea 2 [error] E010: Use ← for assignment instead of = (Cambridge rule)" in out


def test_json_output(write, capsys):
    path = write("p.pseudo", "y ← 5")
    assert execute_cli([path, "--json"]) == EXIT_INVALID
    payload = json.loads(capsys.readouterr().out)
    assert payload["isValid"] is False
    assert payload["diagnostics"][0]["message"] == "Variable 'y' must be declared before use"


def test_auto_replace(write, capsys):
    path = write("p.pseudo", "DECLARE x : INTEGER\nx <-- 5\n")
    assert execute_cli([path, "--auto-replace"]) == EXIT_OK


def test_symbols_listing(write, capsys):
    path = write("p.pseudo", "DECLARE total : REAL\n")
    execute_cli([path, "--symbols"])
    out = capsys.readouterr().out
    assert "=== Tabla de Símbolos ===" in out
    assert "total (var) : REAL" in out


def test_config_file(write, capsys):
    path = write("p.pseudo", "DECLARE x : INTEGER\n  x ← 1\n")
    cfg = write("cfg.json", '{"indent_unit": 2}')
    assert execute_cli([path, "--config", cfg, "--json"]) == EXIT_OK
    assert json.loads(capsys.readouterr().out)["diagnostics"] == []


def test_bad_config(write, capsys):
    path = write("p.pseudo", "OUTPUT 1\n")
    cfg = write("cfg.json", '{"indent_unit": -1}')
    assert execute_cli([path, "--config", cfg]) == EXIT_USAGE
    assert "indent_unit" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    assert execute_cli([str(tmp_path / "nope.pseudo")]) == EXIT_USAGE
    assert "No se pudo leer" in capsys.readouterr().err
