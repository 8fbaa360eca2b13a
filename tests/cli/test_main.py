from __future__ import annotations

import io

import pytest

from src.cli import main as cli


def test_perft_command_prints_nodes(capsys) -> None:
    assert cli.main(["perft", "--depth", "1"]) == 0
    out = capsys.readouterr().out
    assert "nodes=20 depth=1" in out


def test_perft_divide(capsys) -> None:
    assert cli.main(["perft", "--depth", "1", "--divide"]) == 0
    out = capsys.readouterr().out
    assert "e2e4: 1" in out
    assert "nodes=20" in out


def test_invalid_position_exit_code() -> None:
    assert cli.main(["perft", "--position", "not-a-board"]) == 2


def test_play_reads_keys_from_stdin(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("q\n"))
    assert cli.main(["play", "--no-color"]) == 0
    out = capsys.readouterr().out
    assert "♔" in out


def test_serve_runs_uvicorn_factory(monkeypatch) -> None:
    calls = {}

    def fake_run(target, **kwargs):
        calls["target"] = target
        calls.update(kwargs)

    monkeypatch.setattr(cli.uvicorn, "run", fake_run)
    assert cli.main(["serve", "--port", "9001"]) == 0
    assert calls["target"] == "src.protocol.http.app:create_app"
    assert calls["factory"] is True
    assert calls["port"] == 9001


def test_command_is_required() -> None:
    with pytest.raises(SystemExit):
        cli.main([])


def test_blank_position_exit_code() -> None:
    assert cli.main(["perft", "--position", " "]) == 2


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(SystemExit):
        cli.main(["--log-level", "foo", "perft", "--depth", "0"])


def test_log_level_is_case_insensitive(capsys) -> None:
    assert cli.main(["--log-level", "debug", "perft", "--depth", "0"]) == 0
    assert "nodes=1 depth=0" in capsys.readouterr().out
