from sqlalchemy import select

from app.novabulk.db.models import Account


class AccountRepository:
    def __init__(self, db):
        self.db = db

    def get_by_name(self, account_name: str):
        stmt = select(Account).where(Account.account_name == account_name)
        return self.db.execute(stmt).scalars().first()

    def create(self, account: Account) -> Account:
        self.db.add(account)
        self.db.commit()
        self.db.refresh(account)
        return account
