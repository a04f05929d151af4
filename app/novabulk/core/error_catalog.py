from dataclasses import dataclass
from fastapi import status


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int


class ErrorCatalog:
    AUTHENTICATION_REQUIRED = ErrorDefinition(
        "AUTHENTICATION_REQUIRED",
        "Please provide account name and key",
        status.HTTP_401_UNAUTHORIZED,
    )
    INVALID_CREDENTIALS = ErrorDefinition(
        "INVALID_CREDENTIALS",
        "Invalid account name or key",
        status.HTTP_401_UNAUTHORIZED,
    )
    INVALID_TOKEN = ErrorDefinition("INVALID_TOKEN", "Invalid token", status.HTTP_401_UNAUTHORIZED)
    ACCOUNT_INACTIVE = ErrorDefinition(
        "ACCOUNT_INACTIVE",
        "Account is inactive",
        status.HTTP_403_FORBIDDEN,
    )
    UNSUPPORTED_FILE = ErrorDefinition(
        "UNSUPPORTED_FILE",
        "File could not be read as UTF-8 CSV",
        status.HTTP_400_BAD_REQUEST,
    )
    UNKNOWN_ENTITY = ErrorDefinition(
        "UNKNOWN_ENTITY",
        "Unknown bulk entity",
        status.HTTP_404_NOT_FOUND,
    )
    PRODUCT_NOT_FOUND = ErrorDefinition(
        "PRODUCT_NOT_FOUND",
        "Product not found",
        status.HTTP_404_NOT_FOUND,
    )
    INVENTORY_NOT_FOUND = ErrorDefinition(
        "INVENTORY_NOT_FOUND",
        "Inventory record not found",
        status.HTTP_404_NOT_FOUND,
    )
    BATCH_NOT_FOUND = ErrorDefinition(
        "BATCH_NOT_FOUND",
        "Change batch not found",
        status.HTTP_404_NOT_FOUND,
    )
    BULK_ROW_FAILED = ErrorDefinition(
        "BULK_ROW_FAILED",
        "Bulk apply failed; all changes were rolled back",
        status.HTTP_409_CONFLICT,
    )
    BATCH_ALREADY_ROLLED_BACK = ErrorDefinition(
        "BATCH_ALREADY_ROLLED_BACK",
        "Change batch was already rolled back",
        status.HTTP_409_CONFLICT,
    )
    BATCH_ROLLBACK_CONFLICT = ErrorDefinition(
        "BATCH_ROLLBACK_CONFLICT",
        "Records changed after the batch was applied",
        status.HTTP_409_CONFLICT,
    )
    DB_UNAVAILABLE = ErrorDefinition(
        "DB_UNAVAILABLE",
        "Database unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )
    LOCK_TIMEOUT = ErrorDefinition(
        "LOCK_TIMEOUT",
        "Lock wait timeout",
        status.HTTP_409_CONFLICT,
    )
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Validation error",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    IDEMPOTENCY_KEY_REUSED_WITH_DIFFERENT_PAYLOAD = ErrorDefinition(
        "IDEMPOTENCY_KEY_REUSED_WITH_DIFFERENT_PAYLOAD",
        "Idempotency key reused with different payload",
        status.HTTP_409_CONFLICT,
    )
    IDEMPOTENCY_REQUEST_IN_PROGRESS = ErrorDefinition(
        "IDEMPOTENCY_REQUEST_IN_PROGRESS",
        "Idempotency request already in progress",
        status.HTTP_409_CONFLICT,
    )
    IDEMPOTENCY_REPLAY = ErrorDefinition(
        "IDEMPOTENCY_REPLAY",
        "Idempotent replay",
        status.HTTP_200_OK,
    )


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None):
        self.error = error
        self.details = details
        super().__init__(error.message)
