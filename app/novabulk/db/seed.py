import logging

from sqlalchemy import select

from app.novabulk.core.config import settings
from app.novabulk.core.security import get_account_key_hash
from app.novabulk.db.models import Account

logger = logging.getLogger(__name__)


def _get_or_create_admin(db) -> Account:
    account = (
        db.execute(select(Account).where(Account.account_name == settings.ADMIN_ACCOUNT_NAME))
        .scalars()
        .first()
    )
    if account:
        return account
    account = Account(
        account_name=settings.ADMIN_ACCOUNT_NAME,
        hashed_key=get_account_key_hash(settings.ADMIN_ACCOUNT_KEY),
        is_active=True,
    )
    db.add(account)
    db.flush()
    logger.info("Seeded admin account %s", account.account_name)
    return account


def run_seed(db) -> Account:
    account = _get_or_create_admin(db)
    db.commit()
    return account


if __name__ == "__main__":
    from app.novabulk.core.logging import configure_logging
    from app.novabulk.db.session import SessionLocal

    configure_logging()
    session = SessionLocal()
    try:
        run_seed(session)
    finally:
        session.close()
