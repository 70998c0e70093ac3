"""Tests for the clinic CLI."""

from collections.abc import Generator
from contextlib import contextmanager
from datetime import date
from pathlib import Path

import pytest
from sqlalchemy.orm import Session
from typer.testing import CliRunner

import config
import db.connection
from clinic.cli.main import app
from config import Settings
from db.sample_data import seed

runner: CliRunner = CliRunner()


@pytest.fixture()
def cli_env(session: Session, settings: Settings, monkeypatch: pytest.MonkeyPatch) -> Session:
    """Point the CLI at the test session and settings."""

    @contextmanager
    def _session() -> Generator[Session, None, None]:
        yield session

    monkeypatch.setattr(db.connection, "get_session", _session)
    monkeypatch.setattr(db.connection, "init_database", lambda engine=None: [])
    monkeypatch.setattr(config, "get_settings", lambda: settings)
    return session


class TestExportCommand:
    def test_writes_csv(self, cli_env: Session, tmp_path: Path) -> None:
        seed(cli_env, today=date(2026, 3, 10))
        out: Path = tmp_path / "out"

        result = runner.invoke(app, ["export", "patients", "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert "pacientes.csv" in result.output
        assert (out / "pacientes.csv").read_text(encoding="utf-8").startswith("Nome,Email")

    def test_defaults_to_settings_export_dir(self, cli_env: Session, settings: Settings) -> None:
        seed(cli_env, today=date(2026, 3, 10))
        result = runner.invoke(
            app,
            ["export", "financial", "--type", "income", "--filename", "receitas"],
        )
        assert result.exit_code == 0, result.output
        assert len((settings.export_dir / "receitas.csv").read_text(encoding="utf-8").splitlines()) == 3

    def test_period_options(self, cli_env: Session, tmp_path: Path) -> None:
        seed(cli_env, today=date(2026, 3, 10))
        result = runner.invoke(
            app,
            [
                "export", "cash-flow",
                "-s", "2026-03-01", "-e", "2026-03-31", "-t", "month",
                "-o", str(tmp_path),
            ],
        )
        assert result.exit_code == 0, result.output
        assert (tmp_path / "financeiro_março_de_2026.csv").exists()

    def test_nothing_to_export(self, cli_env: Session, tmp_path: Path) -> None:
        out: Path = tmp_path / "out"
        result = runner.invoke(app, ["export", "appointments", "-o", str(out)])
        assert result.exit_code == 0
        assert "Nothing to export" in result.output
        assert not out.exists()

    def test_bad_period(self, cli_env: Session) -> None:
        result = runner.invoke(app, ["export", "appointments", "--start", "2026-03-01"])
        assert result.exit_code == 2

    def test_filename_outside_output_dir(self, cli_env: Session, tmp_path: Path) -> None:
        seed(cli_env, today=date(2026, 3, 10))
        out: Path = tmp_path / "out"

        result = runner.invoke(app, ["export", "patients", "-o", str(out), "--filename", "../x"])

        assert result.exit_code == 2
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert not (tmp_path / "x.csv").exists()

    def test_unknown_kind(self, cli_env: Session) -> None:
        result = runner.invoke(app, ["export", "invoices"])
        assert result.exit_code == 2


class TestOtherCommands:
    def test_statuses(self) -> None:
        result = runner.invoke(app, ["statuses"])
        assert result.exit_code == 0
        assert "Agendado" in result.output
        assert "scheduled" in result.output

    def test_seed_is_idempotent(self, cli_env: Session) -> None:
        first = runner.invoke(app, ["seed"])
        assert first.exit_code == 0, first.output
        assert "Seeded 11 rows" in first.output

        second = runner.invoke(app, ["seed"])
        assert "already present" in second.output
