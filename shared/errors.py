"""
STOREFRONT ERRORS

Every failure a caller can see is one of these. Each carries the HTTP status
and the notice title shown to the shopper, so routers never have to
translate them by hand.
"""
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError


class BakeryError(Exception):
    """Base exception for all storefront failures."""

    status_code: int = 400
    title: str = "Error"

    def __init__(self, detail: str, *, title: str | None = None, fields: list[str] | None = None):
        super().__init__(detail)
        self.detail = detail
        if title is not None:
            self.title = title
        self.fields = fields or []

    def to_notice(self) -> dict:
        notice = {"title": self.title, "detail": self.detail}
        if self.fields:
            notice["fields"] = self.fields
        return notice


class ValidationFailed(BakeryError):
    """Raised before any network call when input is incomplete or malformed."""

    status_code = 400
    title = "Validation Error"


class LoginRequired(BakeryError):
    """Raised when an operation needs an authenticated identity and has none."""

    status_code = 401
    title = "Login required"


class PermissionDenied(BakeryError):
    """Raised when the access policy rejects a write."""

    status_code = 403
    title = "Permission Error"


class NotFound(BakeryError):
    status_code = 404
    title = "Not Found"


class BackendFailure(BakeryError):
    """Raised when a data store call fails. Carries the driver message."""

    status_code = 502
    title = "Database Error"


@contextmanager
def backend_call(action: str) -> Iterator[None]:
    """Re-raise data store errors from the wrapped block as BackendFailure."""
    try:
        yield
    except SQLAlchemyError as exc:
        raise BackendFailure(f"Failed to {action}: {exc}") from exc
