import os
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, func, inspect, select
from sqlalchemy.orm import sessionmaker

from app.novabulk.core.security import verify_account_key
from app.novabulk.db.models import Account
from app.novabulk.db.seed import run_seed

from tests.bulk_helpers import ADMIN_KEY


def _run_migrations(database_url: str):
    os.environ["DATABASE_URL"] = database_url
    config = Config("alembic.ini")
    config.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(config, "head")


def test_migrations_apply(tmp_path: Path):
    database_url = f"sqlite+pysqlite:///{tmp_path / 'migrations.db'}"
    _run_migrations(database_url)

    inspector = inspect(create_engine(database_url, future=True))
    tables = set(inspector.get_table_names())

    assert {
        "Products",
        "Inventory",
        "Inventory_Transactions",
        "ChangeBatch",
        "ChangeAudit",
        "accounts",
        "idempotency_records",
        "audit_events",
    } <= tables

    inventory_columns = {column["name"] for column in inspector.get_columns("Inventory")}
    assert {"InventoryID", "LocationID", "ProductID", "Quantity", "DesiredQuantity", "MinimumQuantity", "Version"} == inventory_columns
    unique_names = [constraint["name"] for constraint in inspector.get_unique_constraints("Inventory")]
    assert "uq_inventory_product_location" in unique_names


def test_seed_is_idempotent(tmp_path: Path):
    database_url = f"sqlite+pysqlite:///{tmp_path / 'seed.db'}"
    _run_migrations(database_url)

    SessionLocal = sessionmaker(bind=create_engine(database_url, future=True), future=True)

    with SessionLocal() as db:
        account = run_seed(db)
        run_seed(db)
        assert db.scalar(select(func.count()).select_from(Account)) == 1
        assert account.is_active is True
        assert verify_account_key(ADMIN_KEY, account.hashed_key)
