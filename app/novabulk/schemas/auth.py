from pydantic import Field

from app.novabulk.schemas.common import CamelModel


class LoginRequest(CamelModel):
    model_config = {
        "json_schema_extra": {
            "example": {
                "accountName": "admin",
                "accountKey": "change-me",
            }
        }
    }

    account_name: str = Field(min_length=1, max_length=150)
    account_key: str = Field(min_length=1)


class LoginResponse(CamelModel):
    success: bool
    message: str
    token: str
    token_type: str = "bearer"
    trace_id: str


class VerifyResponse(CamelModel):
    valid: bool
    account_name: str
    employee_id: int | None = None


class LogoutResponse(CamelModel):
    success: bool
    message: str
