"""
Error taxonomy for account and authentication failures.

Every error carries a stable ``code`` and the HTTP status the boundary
handler in ``api.error_handlers`` renders it with.  Routes and services
raise these and never translate them locally.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, TypeVar

T = TypeVar("T")


class AccountError(Exception):
    code = "ACCOUNT_ERROR"
    http_status = 500
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None, *, http_status: Optional[int] = None):
        self.message = message or self.default_message
        if http_status is not None:
            self.http_status = http_status
        super().__init__(self.message)

    def to_response(self) -> Dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message}}


class BadParamsError(AccountError):
    code = "BAD_PARAMS"
    http_status = 400
    default_message = "A required parameter was omitted or invalid"


class BadCredentialsError(AccountError):
    code = "BAD_CREDENTIALS"
    http_status = 401
    default_message = "The provided email or password is incorrect"


class NotFoundError(AccountError):
    code = "NOT_FOUND"
    http_status = 404
    default_message = "The requested resource was not found"


class OwnershipError(AccountError):
    code = "NOT_OWNER"
    http_status = 401
    default_message = "The provided token does not match the owner of this document"


class StoreError(AccountError):
    """Persistence failure.  422 for constraint violations, 500 otherwise."""

    code = "STORE_ERROR"
    http_status = 500
    default_message = "The document store rejected the operation"


def handle_404(record: Optional[T]) -> T:
    if record is None:
        raise NotFoundError()
    return record


def require_ownership(caller: Any, record: Any) -> None:
    """Raise ``OwnershipError`` unless ``caller`` owns ``record``."""
    if record.owner_id is None or record.owner_id != caller.id:
        raise OwnershipError()
