from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    model_config = {
        "json_schema_extra": {
            "example": {
                "code": "VALIDATION_ERROR",
                "message": "Validation error",
                "details": {"issues": [{"idx": 0, "row": 2, "field": "Quantity", "type": "err", "msg": "Must be numeric"}]},
                "trace_id": "trace-123",
            }
        }
    }

    code: str
    message: str
    details: Any | None = None
    trace_id: str
