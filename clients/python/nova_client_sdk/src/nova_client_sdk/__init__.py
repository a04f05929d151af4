from .bulk_validation import ClientValidationError, LocalValidation, ParsedFile, ValidationIssue, parse_csv, validate_rows
from .clients import AuditClient, AuthClient, InventoryClient, ProductsClient
from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    NotFoundError,
    PermissionError,
    ServerError,
    TransportError,
    ValidationError,
)
from .http_client import HttpClient
from .models import BulkOptions, BulkResponse, DiffResponse, RollbackResponse, ValidateResponse
from .tracing import TraceContext

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "AuditClient",
    "AuthClient",
    "AuthError",
    "BulkOptions",
    "BulkResponse",
    "ClientConfig",
    "ClientValidationError",
    "ConfigError",
    "ConflictError",
    "DiffResponse",
    "HttpClient",
    "InventoryClient",
    "LocalValidation",
    "NotFoundError",
    "ParsedFile",
    "PermissionError",
    "ProductsClient",
    "RollbackResponse",
    "ServerError",
    "TraceContext",
    "TransportError",
    "ValidateResponse",
    "ValidationError",
    "ValidationIssue",
    "load_config",
    "parse_csv",
    "validate_rows",
]
