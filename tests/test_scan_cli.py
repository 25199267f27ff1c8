from __future__ import annotations

import json
from pathlib import Path

import pytest

import pdfshelf.cli as cli
from pdfshelf.scan import scan_documents
from pdfshelf.tree import build_tree, count_nodes


def _make_root(tmp_path: Path) -> Path:
    root = tmp_path / "docs"
    (root / "beta").mkdir(parents=True)
    (root / "Alpha").mkdir()
    (root / ".hidden").mkdir()
    (root / "Alpha" / "Quarterly Report.PDF").write_bytes(b"x" * 3000)
    (root / "beta" / "notes.txt").write_text("skip", encoding="utf-8")
    (root / ".hidden" / "ghost.pdf").write_bytes(b"x")
    (root / "cover.pdf").write_bytes(b"x" * 12)
    return root


def test_scan_emits_sorted_relative_tree(tmp_path: Path) -> None:
    payload = scan_documents(_make_root(tmp_path))
    tree = payload["tree"]
    assert tree["name"] == "root"
    assert tree["path"] == "."
    assert [child["name"] for child in tree["children"]] == ["Alpha", "beta", "cover.pdf"]
    alpha = tree["children"][0]
    assert alpha["children"] == [
        {"type": "pdf", "name": "Quarterly Report.PDF", "path": "Alpha/Quarterly Report.PDF", "size": 3000}
    ]
    assert tree["children"][1]["children"] == []
    assert count_nodes(build_tree(payload)) == 5


def test_scan_missing_root_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        scan_documents(tmp_path / "missing")


def test_cli_scan_writes_default_data_file(tmp_path: Path, capsys) -> None:
    root = _make_root(tmp_path)
    assert cli.main(["scan", str(root)]) == 0
    data = json.loads((root / "data.json").read_text(encoding="utf-8"))
    assert data["tree"]["path"] == "."
    assert "data.json" in capsys.readouterr().out


def test_cli_search_prints_matches(tmp_path: Path, capsys) -> None:
    root = _make_root(tmp_path)
    output = tmp_path / "tree.json"
    assert cli.main(["scan", str(root), "-o", str(output)]) == 0
    capsys.readouterr()

    assert cli.main(["search", str(output), "report"]) == 0
    out = capsys.readouterr().out
    assert "Quarterly" in out
    assert "2.93 KB" in out

    assert cli.main(["search", str(output), "nothing-here"]) == 1
    assert "No matches" in capsys.readouterr().out


def test_cli_search_missing_data_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["search", str(tmp_path / "data.json"), "x"])
    assert "pdfshelf scan" in str(excinfo.value)


def test_cli_web_builds_app_and_runs_uvicorn(monkeypatch, tmp_path: Path) -> None:
    root = _make_root(tmp_path)
    calls: dict[str, object] = {}

    def _fake_run(app, **kwargs):
        calls["app"] = app
        calls.update(kwargs)

    monkeypatch.setattr(cli.uvicorn, "run", _fake_run)
    monkeypatch.setenv(cli.DEBUG_ENV, "0")
    assert cli.main(["web", str(root), "--scan", "--port", "8123"]) == 0
    assert calls["port"] == 8123
    assert calls["log_level"] == "info"
    assert (root / "data.json").exists()
    assert calls["app"].state.shelf.state.loaded
    formatter = calls["log_config"]["formatters"]["access"]["()"]
    assert formatter == "pdfshelf.logging_utils.DecodedPathAccessFormatter"


def test_no_arguments_prints_help(capsys) -> None:
    assert cli.main([]) == 0
    assert "pdfshelf" in capsys.readouterr().out
