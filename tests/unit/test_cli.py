"""Tests for the catalog command-line interface."""

from sqlalchemy import inspect
from typer.testing import CliRunner

from src.catalog.cli import main as cli
from src.catalog.runtime.config.config_data import ConfigData, DatabaseConfig
from src.catalog.runtime.context import with_context

runner = CliRunner()


def test_init_db_creates_tables(tmp_path):
    url = f"sqlite:///{tmp_path / 'catalog.db'}"

    with with_context(ConfigData(database=DatabaseConfig(url=url))):
        result = runner.invoke(cli.app, ["init-db"])

    assert result.exit_code == 0, result.output
    assert "Database tables created" in result.output

    from sqlmodel import create_engine

    assert "products" in inspect(create_engine(url)).get_table_names()


def test_init_db_fails_when_database_unreachable(tmp_path):
    url = f"sqlite:///{tmp_path / 'missing' / 'catalog.db'}"

    with with_context(ConfigData(database=DatabaseConfig(url=url))):
        result = runner.invoke(cli.app, ["init-db"])

    assert result.exit_code == 1
    assert "not reachable" in result.output


def test_serve_runs_uvicorn_factory(monkeypatch):
    calls = {}

    def fake_run(target, **kwargs):
        calls["target"] = target
        calls.update(kwargs)

    monkeypatch.setattr(cli.uvicorn, "run", fake_run)

    result = runner.invoke(cli.app, ["serve", "--port", "9001"])

    assert result.exit_code == 0, result.output
    assert calls["target"] == "src.catalog.api.http.app:create_app"
    assert calls["factory"] is True
    assert calls["port"] == 9001
