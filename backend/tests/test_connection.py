"""Tests for db.connection schema helpers and model defaults."""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from db.connection import REQUIRED_TABLES, init_database, table_status
from db.models import Patients


def test_table_status_empty_database() -> None:
    eng: Engine = create_engine("sqlite:///:memory:")
    present, missing = table_status(eng)
    assert present == []
    assert missing == list(REQUIRED_TABLES)
    eng.dispose()


def test_init_database_is_idempotent() -> None:
    eng: Engine = create_engine("sqlite:///:memory:")

    created: list[str] = init_database(eng)
    assert created == list(REQUIRED_TABLES)
    assert table_status(eng)[1] == []

    assert init_database(eng) == []
    eng.dispose()


def test_table_status_on_fixture_engine(engine: Engine) -> None:
    present, missing = table_status(engine)
    assert set(REQUIRED_TABLES) <= set(present)
    assert missing == []


def test_models_fill_ids_and_timestamps(session: Session) -> None:
    patient: Patients = Patients(name="Ana")
    session.add(patient)
    session.flush()

    assert len(patient.id) == 36
    assert patient.created_at.endswith("+00:00")
    assert patient.updated_at >= patient.created_at
