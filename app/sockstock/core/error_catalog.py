from dataclasses import dataclass
from fastapi import status


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int


class ErrorCatalog:
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Validation failed: incorrect data",
        status.HTTP_400_BAD_REQUEST,
    )
    STOCK_NOT_FOUND = ErrorDefinition(
        "STOCK_NOT_FOUND",
        "No socks with these parameters",
        status.HTTP_400_BAD_REQUEST,
    )
    INSUFFICIENT_STOCK = ErrorDefinition(
        "INSUFFICIENT_STOCK",
        "Not enough socks",
        status.HTTP_400_BAD_REQUEST,
    )
    INVALID_COMPARISON = ErrorDefinition(
        "INVALID_COMPARISON",
        "Invalid comparison",
        status.HTTP_400_BAD_REQUEST,
    )
    DUPLICATE_STOCK_LOT = ErrorDefinition(
        "DUPLICATE_STOCK_LOT",
        "Another lot already has this color and cotton percentage",
        status.HTTP_400_BAD_REQUEST,
    )
    QUANTITY_LIMIT_EXCEEDED = ErrorDefinition(
        "QUANTITY_LIMIT_EXCEEDED",
        "Quantity exceeds the maximum stock per lot",
        status.HTTP_400_BAD_REQUEST,
    )
    EMPTY_BATCH = ErrorDefinition(
        "EMPTY_BATCH",
        "File is empty",
        status.HTTP_400_BAD_REQUEST,
    )
    INVALID_BATCH_HEADER = ErrorDefinition(
        "INVALID_BATCH_HEADER",
        "CSV header must be: color,cottonPercentage,quantity",
        status.HTTP_400_BAD_REQUEST,
    )
    INVALID_BATCH_ROW = ErrorDefinition(
        "INVALID_BATCH_ROW",
        "Invalid data in CSV file",
        status.HTTP_400_BAD_REQUEST,
    )
    BATCH_TOO_LARGE = ErrorDefinition(
        "BATCH_TOO_LARGE",
        "File exceeds the maximum upload size",
        status.HTTP_400_BAD_REQUEST,
    )
    STOCK_CONFLICT = ErrorDefinition(
        "STOCK_CONFLICT",
        "Conflict detected: another transaction updated the data.",
        status.HTTP_409_CONFLICT,
    )
    LOCK_TIMEOUT = ErrorDefinition(
        "LOCK_TIMEOUT",
        "Lock wait timeout",
        status.HTTP_409_CONFLICT,
    )
    BATCH_READ_FAILED = ErrorDefinition(
        "BATCH_READ_FAILED",
        "Failed to process file",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    DB_UNAVAILABLE = ErrorDefinition(
        "DB_UNAVAILABLE",
        "Database unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None):
        self.error = error
        self.details = details
        super().__init__(error.message)


class InvalidInputError(AppError):
    """Malformed request, unknown comparison, missing lot or insufficient stock."""


class ConflictError(AppError):
    """Optimistic version mismatch; the caller should re-read and retry."""


class InternalError(AppError):
    """Unexpected I/O failure outside the caller's control."""
