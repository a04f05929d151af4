import importlib
import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from alembic import command
from alembic.config import Config

from tests.bulk_helpers import ADMIN_KEY, ADMIN_NAME

os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["ADMIN_ACCOUNT_NAME"] = ADMIN_NAME
os.environ["ADMIN_ACCOUNT_KEY"] = ADMIN_KEY


def _setup_app(database_url: str):
    os.environ["DATABASE_URL"] = database_url

    import app.novabulk.core.config as config
    import app.novabulk.db.session as session
    import app.main as main

    importlib.reload(config)
    importlib.reload(session)
    importlib.reload(main)

    return main.create_app(), session


def _run_migrations(database_url: str):
    os.environ["DATABASE_URL"] = database_url
    config = Config("alembic.ini")
    config.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(config, "head")


@pytest.fixture()
def client(tmp_path: Path):
    database_url = f"sqlite+pysqlite:///{tmp_path / 'test.db'}"
    _run_migrations(database_url)
    app, session = _setup_app(database_url)

    from app.novabulk.db.seed import run_seed

    seed_db = session.SessionLocal()
    try:
        run_seed(seed_db)
    finally:
        seed_db.close()

    with TestClient(app) as client:
        yield client

    session.engine.dispose()


@pytest.fixture()
def db_session(client):
    from app.novabulk.core.config import settings

    # plain pysqlite transactions: reads here never hold a lock across app requests
    engine = create_engine(settings.DATABASE_URL, future=True)
    db = sessionmaker(bind=engine, expire_on_commit=False, future=True)()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture()
def auth_headers():
    return {"X-Account-Name": ADMIN_NAME, "X-Account-Key": ADMIN_KEY}
