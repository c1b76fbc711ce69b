"""Tests for the shiftclock CLI."""

import json
from pathlib import Path

import pytest

from shiftclock.cli import main
from shiftclock.web import app as web_app


@pytest.fixture
def data_file(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.delenv("SHIFTCLOCK_WEBHOOK_URL", raising=False)
    return tmp_path / "clockin-data.json"


def run(data_file: Path, *args: str) -> int:
    return main(["--data-file", str(data_file), *args])


KEY_ARGS = ("--guild", "g1", "--user", "u1", "--department", "d1")


class TestClockCommands:
    def test_shift(self, data_file, capsys):
        assert run(data_file, "clock-in", *KEY_ARGS, "--at", "0") == 0
        assert "Clocked in" in capsys.readouterr().out

        assert run(data_file, "break", *KEY_ARGS, "--at", "1000") == 0
        assert run(data_file, "break", *KEY_ARGS, "--at", "4000") == 0
        assert run(data_file, "clock-out", *KEY_ARGS, "--at", "10000") == 0
        assert "Worked: **0h 0m 7s**" in capsys.readouterr().out

        session = json.loads(data_file.read_text())["sessions"][0]
        assert session["duration"] == 7_000
        assert session["totalBreak"] == 3_000

    def test_rejection(self, data_file, capsys):
        assert run(data_file, "clock-out", *KEY_ARGS) == 1
        assert "You are not clocked in." in capsys.readouterr().err

    def test_double_clock_in(self, data_file, capsys):
        run(data_file, "clock-in", *KEY_ARGS, "--at", "0")
        assert run(data_file, "clock-in", *KEY_ARGS, "--at", "5") == 1
        assert "Already clocked in!" in capsys.readouterr().err


class TestReportCommands:
    def test_my_hours(self, data_file, capsys):
        assert run(data_file, "my-hours", "--guild", "g1", "--user", "u1", "-w", "2") == 0
        out = capsys.readouterr().out
        assert "Week 0 (current)" in out
        assert "Week 1" in out
        assert "Week 2" not in out

    def test_my_hours_zero_weeks(self, data_file, capsys):
        assert run(data_file, "my-hours", "--guild", "g1", "--user", "u1", "-w", "0") == 0
        out = capsys.readouterr().out
        assert "Week 0" not in out
        assert "All-Time Total" in out

    def test_my_hours_negative_weeks(self, data_file, capsys):
        assert run(data_file, "my-hours", "--guild", "g1", "--user", "u1", "-w", "-1") == 1
        assert "--weeks must be non-negative" in capsys.readouterr().err

    def test_department_hours(self, data_file, capsys):
        assert run(data_file, "department-hours", "--guild", "g1", "-d", "d1") == 0
        assert "_No hours this week._" in capsys.readouterr().out


def test_no_command(capsys):
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()


class TestServeCommand:
    @pytest.fixture(autouse=True)
    def reset_web_config(self, monkeypatch):
        monkeypatch.setattr(web_app, "_configured", None)
        yield
        web_app.get_config.cache_clear()
        web_app.get_service.cache_clear()

    def test_serve_uses_cli_overrides(self, data_file, monkeypatch):
        calls = []
        monkeypatch.setattr(
            "shiftclock.web.uvicorn.run", lambda app, **kwargs: calls.append(kwargs)
        )
        monkeypatch.setenv("SHIFTCLOCK_DATA_FILE", "/elsewhere/ignored.json")
        for name in ("PORT", "SHIFTCLOCK_PORT", "SHIFTCLOCK_HOST"):
            monkeypatch.delenv(name, raising=False)

        assert run(data_file, "--timezone", "UTC", "serve") == 0

        assert calls == [{"host": "0.0.0.0", "port": 10000}]
        assert web_app.get_config().data_file == str(data_file)
        assert web_app.get_service().store.path == data_file
