"""
Tests para la CLI (click).

Cubre:
- emit en modo plano y JSON, con atributos KEY=VALUE
- Umbral por opción y por variable de entorno
- emit --at fatal → exit 1
- --add-source apunta a cli.py (el frame que llama a la fachada)
- demo
"""

import json
import re

import pytest
from click.testing import CliRunner

from prettylog.cli import main
from prettylog.config import ENV_ADD_SOURCE, ENV_JSON, ENV_LEVEL

TIME_RE = r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (ENV_LEVEL, ENV_ADD_SOURCE, ENV_JSON):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def fake_exit(monkeypatch):
    """os._exit terminaría pytest: lo convierte en SystemExit para CliRunner."""

    def _exit(code: int) -> None:
        raise SystemExit(code)

    monkeypatch.setattr("prettylog.logger.os._exit", _exit)


class TestEmit:
    """Tests para prettylog emit."""

    def test_plain(self, runner):
        result = runner.invoke(main, ["emit", "disk full", "--at", "error", "--no-color"])
        assert result.exit_code == 0
        assert re.fullmatch(TIME_RE + r" ERROR disk full\n", result.output)

    def test_json_with_attrs(self, runner):
        result = runner.invoke(main, ["emit", "deployed", "--json", "version=1.4.2", "env=prod"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["level"] == "INFO"
        assert data["attrs"] == {"version": "1.4.2", "env": "prod"}

    def test_below_threshold_prints_nothing(self, runner):
        result = runner.invoke(main, ["emit", "chatty", "--at", "debug", "--level", "warn"])
        assert result.exit_code == 0
        assert result.output == ""

    def test_env_threshold(self, runner, monkeypatch):
        monkeypatch.setenv(ENV_LEVEL, "error")
        result = runner.invoke(main, ["emit", "hidden"])
        assert result.output == ""

    def test_unknown_threshold_means_info(self, runner):
        result = runner.invoke(main, ["emit", "shown", "--level", "loud", "--no-color"])
        assert result.output.endswith(" INFO shown\n")

    def test_fatal_exits_1(self, runner, fake_exit):
        result = runner.invoke(main, ["emit", "boom", "--at", "fatal", "--no-color"])
        assert result.exit_code == 1
        assert " FATAL boom" in result.output

    def test_add_source_points_at_cli(self, runner):
        result = runner.invoke(main, ["emit", "here", "--add-source", "--no-color"])
        assert result.exit_code == 0
        assert re.fullmatch(TIME_RE + r" INFO cli\.py:\d+ here\n", result.output)

    def test_add_source_json(self, runner):
        result = runner.invoke(main, ["emit", "here", "--add-source", "--json"])
        assert json.loads(result.output)["source"].startswith("cli.py:")

    def test_bad_attr(self, runner):
        result = runner.invoke(main, ["emit", "x", "novalue"])
        assert result.exit_code == 2

    def test_invalid_at_level(self, runner):
        result = runner.invoke(main, ["emit", "x", "--at", "INFO"])
        assert result.exit_code == 2


class TestDemo:
    """Tests para prettylog demo."""

    def test_demo_default_threshold(self, runner):
        result = runner.invoke(main, ["demo", "--json"])
        assert result.exit_code == 0
        levels = [json.loads(line)["level"] for line in result.output.splitlines()]
        assert levels == ["INFO", "WARN", "ERROR"]

    def test_demo_all_levels_with_fatal(self, runner, fake_exit):
        result = runner.invoke(main, ["demo", "--json", "--level", "trace", "--fatal"])
        assert result.exit_code == 1
        records = [json.loads(line) for line in result.output.splitlines()]
        assert [r["level"] for r in records] == ["TRACE", "DEBUG", "INFO", "WARN", "ERROR", "FATAL"]
        assert records[0]["attrs"] == {"message": "trace message"}

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "prettylog" in result.output
