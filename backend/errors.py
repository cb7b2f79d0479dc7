"""Application error taxonomy for the flashcard API."""


class AppError(Exception):
    """Base exception class for application-specific errors."""

    status_code = 500

    def __init__(self, message: str, error_code: str, details: dict | None = None) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message, "error": self.error_code, "details": self.details}


class ValidationError(AppError):
    """A required field is missing or a value is outside its allowed set."""

    status_code = 400

    def __init__(self, message: str, field: str, details: dict | None = None) -> None:
        super().__init__(message, "VALIDATION_ERROR", {"field": field, **(details or {})})


class NotFoundError(AppError):
    """Operation on an id that does not exist."""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found",
            "NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class StoreError(AppError):
    """Persistence layer failure."""

    status_code = 500

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Error {operation}",
            "STORE_ERROR",
            {"operation": operation, "reason": reason},
        )
