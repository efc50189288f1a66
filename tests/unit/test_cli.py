"""Unit tests for the command-line entry point."""

import pytest
from fastapi import FastAPI

from crewlink.board import __main__ as cli

REQUIRED_ENV = {
    "MONDAY_TOKEN": "token",
    "CONTRACTORS_BOARD_ID": "1",
    "CONTRACTORS_EMAIL_COLUMN_ID": "email",
    "JOBS_BOARD_ID": "2",
}


@pytest.fixture
def runs(monkeypatch):
    calls = []
    monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    return calls


def test_parser_defaults():
    args = cli.build_parser().parse_args([])
    assert args.host == "0.0.0.0"
    assert args.port is None
    assert args.log_level == "info"


def test_parser_rejects_unknown_level():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--log-level", "loud"])


def test_main_serves_on_settings_port(monkeypatch, runs):
    """Test the port falls back to $PORT."""
    for name, value in REQUIRED_ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.setenv("PORT", "8081")

    assert cli.main([]) == 0

    app, kwargs = runs[0]
    assert isinstance(app, FastAPI)
    assert kwargs == {"host": "0.0.0.0", "port": 8081, "log_level": "info"}


def test_main_port_flag_wins(monkeypatch, runs):
    for name, value in REQUIRED_ENV.items():
        monkeypatch.setenv(name, value)
    assert cli.main(["--port", "9000", "--host", "127.0.0.1"]) == 0
    assert runs[0][1]["port"] == 9000
    assert runs[0][1]["host"] == "127.0.0.1"


def test_main_configuration_error(monkeypatch, runs, capsys):
    """Test a missing variable exits with status 2 and never serves."""
    for name, value in REQUIRED_ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.delenv("MONDAY_TOKEN")

    assert cli.main([]) == 2
    assert runs == []
    assert "MONDAY_TOKEN" in capsys.readouterr().err
