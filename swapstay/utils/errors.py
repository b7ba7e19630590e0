"""Error handling utilities."""

from typing import Any, Optional


class SwapStayError(Exception):
    """Base exception for SwapStay backend."""
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Serialize for a JSON error body."""
        return {"success": False, "error": self.code, "message": self.message}


class AuthenticationError(SwapStayError):
    """Caller identity missing from the request."""
    status_code = 401
    code = "unauthenticated"


class ValidationError(SwapStayError):
    """Missing or malformed field for the given request type."""
    status_code = 400
    code = "validation_error"


class NotFoundError(SwapStayError):
    """Listing, user or swap request does not exist."""
    status_code = 404
    code = "not_found"


class ConflictError(SwapStayError):
    """Self-request, duplicate pending request, or wrong acting user."""
    status_code = 409
    code = "conflict"


class StateError(SwapStayError):
    """Transition attempted from a non-PENDING or expired request."""
    status_code = 409
    code = "invalid_state"

    EXPIRED = "expired"
    ALREADY_RESPONDED = "already_responded"

    def __init__(self, message: str, reason: str):
        super().__init__(message)
        self.reason = reason

    @property
    def is_expired(self) -> bool:
        return self.reason == self.EXPIRED

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["reason"] = self.reason
        return body


class StoreError(SwapStayError):
    """Storage operation error."""
    code = "store_error"


class DuplicatePendingRequestError(StoreError):
    """A PENDING request already exists for this requester and listing."""
    code = "duplicate_pending_request"
