from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi.security import APIKeyHeader, HTTPBearer
from jose import jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from app.novabulk.core.config import settings

ACCOUNT_NAME_HEADER = "X-Account-Name"
ACCOUNT_KEY_HEADER = "X-Account-Key"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
account_name_scheme = APIKeyHeader(name=ACCOUNT_NAME_HEADER, auto_error=False)
account_key_scheme = APIKeyHeader(name=ACCOUNT_KEY_HEADER, auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)


class TokenData(BaseModel):
    sub: str
    employee_id: int | None = None


def verify_account_key(plain_key: str, hashed_key: str) -> bool:
    return pwd_context.verify(plain_key, hashed_key)


def get_account_key_hash(account_key: str) -> str:
    return pwd_context.hash(account_key)


def create_access_token(data: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def create_account_access_token(account, expires_delta: Optional[timedelta] = None) -> str:
    return create_access_token(
        {"sub": account.account_name, "employee_id": account.employee_id},
        expires_delta=expires_delta,
    )
