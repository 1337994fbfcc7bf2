# src/domain/exceptions.py

from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from .models import Violation


class SearchError(Exception):
    """
    Root of every error raised by the search layer.

    Args:
        message: Human-readable description.
        detail:  Extra context, safe to log or return in an API response.
    """

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.detail: Dict[str, Any] = detail or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error":   type(self).__name__,
            "message": self.message,
            "detail":  self.detail,
        }


class InvalidSchemaError(SearchError):
    """A record type (or an id it produced) cannot form a valid schema."""


class InvalidPropertyError(SearchError):
    """A record type declares its fields in a way the compiler cannot use."""


class ValidationFailedError(SearchError):
    """A record violates its declared constraints."""

    def __init__(self, record: Any, violations: List["Violation"]):
        self.record = record
        self.violations = violations
        summary = "; ".join(f"{v.property_path}: {v.message}" for v in violations)
        super().__init__(
            f"{type(record).__name__} failed validation: {summary}",
            detail={"violations": {v.property_path: v.message for v in violations}},
        )


class ObjectNotFoundError(SearchError):
    """The backend has no document (or collection) for the given identifier."""


class ObjectAlreadyExistsError(SearchError):
    """The backend already holds an object with this name."""


class SearchBackendError(SearchError):
    """Any other failure talking to the search backend."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, detail)
        self.status_code = status_code


class UnknownCollectionError(SearchError, KeyError):
    """A record type or schema name was never registered."""

    def __str__(self) -> str:
        return self.message
