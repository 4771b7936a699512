"""Domain exceptions for the audio catalog.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class CatalogException(Exception):
    """Base exception for all audio catalog errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body used by the API."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(CatalogException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(CatalogException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'category', 'audio').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class CategoryValidationException(CatalogException):
    """Raised when a category write fails hierarchy validation.

    Carries every collected error (code, message, field) and the
    non-blocking warnings so clients can render field-level feedback.
    """

    def __init__(
        self,
        errors: list[dict[str, Any]],
        warnings: list[str] | None = None,
        message: str = "Category validation failed",
    ) -> None:
        """Initialize with serialized validation errors and warnings.

        Args:
            errors: Error dicts with at least code and message.
            warnings: Optional warning strings.
            message: Summary message.
        """
        self.errors = errors
        self.warnings = warnings or []
        super().__init__(
            message,
            "CATEGORY_VALIDATION_ERROR",
            {"errors": errors, "warnings": self.warnings},
        )


class CategoryDeleteRestrictedException(CatalogException):
    """Raised when deleting a category that still has children or audio."""

    def __init__(self, category_id: str, children_count: int, audio_count: int) -> None:
        reasons = []
        if children_count:
            reasons.append(f"{children_count} subcategories")
        if audio_count:
            reasons.append(f"{audio_count} audio records")
        super().__init__(
            f"Category {category_id} still has {' and '.join(reasons)}; "
            "pass force=true to delete anyway",
            "DELETE_RESTRICTED",
            {
                "category_id": category_id,
                "children_count": children_count,
                "audio_count": audio_count,
            },
        )


class DataInconsistencyException(CatalogException):
    """Raised when an audio category reference cannot be repaired automatically."""

    def __init__(self, audio_id: str, issues: list[str]) -> None:
        """Initialize with the audio id and the unrepairable issues.

        Args:
            audio_id: Audio record whose reference is broken.
            issues: Human-readable issue descriptions.
        """
        super().__init__(
            f"Audio {audio_id} has unrepairable category references: {'; '.join(issues)}",
            "DATA_INCONSISTENCY",
            {"audio_id": audio_id, "issues": issues},
        )

