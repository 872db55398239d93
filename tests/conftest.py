import importlib
import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from alembic import command
from alembic.config import Config

from tests.db_utils import provision_database

ROOT_DIR = Path(__file__).resolve().parents[1]
BASE_DATABASE_URL = os.getenv("DATABASE_URL", "")


def _setup_app(database_url: str):
    os.environ["DATABASE_URL"] = database_url

    import app.sockstock.core.config as config
    import app.sockstock.core.metrics as metrics
    import app.sockstock.db.session as session
    import app.main as main

    importlib.reload(config)
    importlib.reload(session)
    importlib.reload(main)
    metrics.metrics.reset()

    return main.create_app(), session


def _run_migrations(database_url: str):
    os.environ["DATABASE_URL"] = database_url
    config = Config(str(ROOT_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT_DIR / "migrations"))
    config.set_main_option("sqlalchemy.url", database_url)
    config.attributes["configure_logger"] = False
    command.upgrade(config, "head")


@pytest.fixture()
def client(tmp_path: Path):
    database_url, cleanup = provision_database(BASE_DATABASE_URL, tmp_path)

    _run_migrations(database_url)
    app, session = _setup_app(database_url)

    with TestClient(app) as client:
        yield client

    session.engine.dispose()
    if cleanup:
        cleanup()


@pytest.fixture()
def db_session(client):
    from app.sockstock.db.session import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def session_factory(client):
    from app.sockstock.db.session import SessionLocal

    opened = []

    def factory():
        db = SessionLocal()
        opened.append(db)
        return db

    yield factory
    for db in opened:
        db.close()
