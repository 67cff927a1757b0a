"""Test the command-line interface."""

import json
import subprocess
import sys

import pytest

import previewtest
from crosspreview.__main__ import main


SOURCE = previewtest.view_source('VStack(spacing: 12) {\n    Text("Hello")\n}')


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "Preview.swift"
    path.write_text(SOURCE, encoding="utf-8")
    return path


def test_cli_html_stdout(source_file, capsys):
    assert main([str(source_file)]) == 0
    out, err = capsys.readouterr()
    assert out.startswith("<!DOCTYPE html>")
    assert ">Hello</span>" in out
    assert err == ""


def test_cli_output_file(source_file, tmp_path, capsys):
    target = tmp_path / "preview.html"
    assert main([str(source_file), "-o", str(target), "--title", "Demo"]) == 0
    assert capsys.readouterr().out == ""
    page = target.read_text(encoding="utf-8")
    assert "<title>Demo</title>" in page


def test_cli_tree(capsys):
    assert main([SOURCE, "--text", "--tree", "--backend", "fallback"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["backend"] == "fallback"
    assert data["errors"] == []
    assert data["root"]["kind"] == "VStack"
    assert data["root"]["props"] == {"spacing": 12}
    assert data["root"]["children"][0]["props"] == {"text": "Hello"}


def test_cli_no_view(capsys):
    assert main(["struct Plain {}", "--text"]) == 1
    out, err = capsys.readouterr()
    assert "sp-errors" in out
    assert "warning: No struct conforming to View found" in err


def test_cli_partial_warnings(capsys):
    source = previewtest.view_source('VStack {\n    Text("a")\n    someHelper\n}')
    assert main([source, "--text", "--backend", "fallback"]) == 0
    err = capsys.readouterr().err
    assert "warning: Unsupported view expression: someHelper (line 6)" in err


def test_cli_lark(source_file, capsys):
    assert main([str(source_file), "--lark"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("start:")
    assert "type_decl:" in out


def test_cli_lark_error(capsys):
    assert main(["struct A: View { let x = a & b }", "--text", "--lark"]) == 1
    assert capsys.readouterr().err.startswith("Error: ")


def test_cli_tree_and_lark_conflict(source_file):
    with pytest.raises(SystemExit) as info:
        main([str(source_file), "--tree", "--lark"])
    assert info.value.code == 2


def test_cli_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as info:
        main([str(tmp_path / "missing.swift")])
    assert info.value.code == 2
    assert "cannot read" in capsys.readouterr().err


def test_cli_bad_backend(source_file):
    with pytest.raises(SystemExit):
        main([str(source_file), "--backend", "fastest"])


def test_cli_module(source_file):
    """Test running the package as a module."""
    result = subprocess.run(
        [sys.executable, "-m", "crosspreview", str(source_file), "--tree"],
        capture_output=True,
        text=True
    )
    assert result.returncode == 0, f"CLI failed: {result.stderr}"
    assert json.loads(result.stdout)["root"]["kind"] == "VStack"
