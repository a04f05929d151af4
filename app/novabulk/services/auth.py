from app.novabulk.core.error_catalog import AppError, ErrorCatalog
from app.novabulk.core.security import create_account_access_token, verify_account_key
from app.novabulk.repos.accounts import AccountRepository


class AccountAuthService:
    def __init__(self, db):
        self.repo = AccountRepository(db)

    def authenticate(self, account_name: str | None, account_key: str | None):
        if not account_name or not account_key:
            raise AppError(ErrorCatalog.AUTHENTICATION_REQUIRED)
        account = self.repo.get_by_name(account_name.strip())
        if account is None or not verify_account_key(account_key, account.hashed_key):
            raise AppError(ErrorCatalog.INVALID_CREDENTIALS)
        self.ensure_active(account)
        return account

    def login(self, account_name: str | None, account_key: str | None):
        account = self.authenticate(account_name, account_key)
        return account, create_account_access_token(account)

    def get_active(self, account_name: str):
        account = self.repo.get_by_name(account_name)
        if account is None:
            raise AppError(ErrorCatalog.INVALID_TOKEN)
        self.ensure_active(account)
        return account

    @staticmethod
    def ensure_active(account) -> None:
        if not account.is_active:
            raise AppError(ErrorCatalog.ACCOUNT_INACTIVE)
