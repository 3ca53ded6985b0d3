"""Custom exception hierarchy for the Fn client."""

from __future__ import annotations


class FnClientError(Exception):
    """Base exception for client failures."""


class ValidationError(FnClientError):
    """Raised when a caller hands a store or controller invalid input."""


class OutOfRangeError(ValidationError, IndexError):
    """Raised when a cell index falls outside the board."""


class InvalidShapeError(ValidationError):
    """Raised when a replacement board does not hold exactly 81 cells."""


class InvalidCellValueError(ValidationError):
    """Raised when a cell value is not a single digit."""


class InvalidOptionError(ValidationError):
    """Raised when the minimum word size is not one of the offered options."""


class PageNotMountedError(FnClientError):
    """Raised when page state is used while the page is not mounted."""


class DispatchError(FnClientError):
    """Base class for failures of an in-flight request."""


class NetworkError(DispatchError):
    """Raised when the transport fails (connection, DNS, timeout)."""


class ServiceError(DispatchError):
    """Raised when the service answers with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(DispatchError):
    """Raised when a response body does not match the wire contract."""
