from __future__ import annotations

from ..models import LoginResponse, VerifyResponse
from .base import BaseClient


class AuthClient(BaseClient):
    def login(self, account_name: str, account_key: str) -> LoginResponse:
        payload = {"accountName": account_name, "accountKey": account_key}
        data = self.http.request("POST", "/api/auth/login", json_body=payload)
        token = LoginResponse.model_validate(data)
        self.access_token = token.token
        return token

    def verify(self) -> VerifyResponse:
        data = self._request("POST", "/api/auth/verify")
        return VerifyResponse.model_validate(data)

    def logout(self) -> bool:
        data = self._request("POST", "/api/auth/logout") or {}
        self.access_token = None
        return bool(data.get("success"))
