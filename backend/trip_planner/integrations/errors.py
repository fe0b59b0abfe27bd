from enum import Enum
from typing import Dict, Optional, Tuple


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    RATE_LIMITED = "rate_limited"
    PAYMENT_REQUIRED = "payment_required"
    UPSTREAM = "upstream"
    MALFORMED_RESPONSE = "malformed_response"
    INVALID_REQUEST = "invalid_request"


class TripPlanError(Exception):
    """Base class for every failure surfaced by the trip planner."""

    kind: ErrorKind = ErrorKind.UPSTREAM
    public_message: str = "Failed to generate trip plan"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message)


class IntegrationError(TripPlanError):
    """Raised when an internal integration is misconfigured or unavailable."""


class ConfigurationError(IntegrationError):
    kind = ErrorKind.CONFIGURATION
    public_message = "AI_GATEWAY_API_KEY is not configured"


class UpstreamAPIError(TripPlanError):
    """Raised when the upstream gateway call fails or returns unusable data."""


class RateLimited(UpstreamAPIError):
    kind = ErrorKind.RATE_LIMITED
    public_message = "Rate limit exceeded. Please try again later."


class PaymentRequired(UpstreamAPIError):
    kind = ErrorKind.PAYMENT_REQUIRED
    public_message = "Payment required. Please add credits to your workspace."


class UpstreamError(UpstreamAPIError):
    kind = ErrorKind.UPSTREAM

    def __init__(self, status_code: Optional[int] = None, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        label = status_code if status_code is not None else "no response"
        super().__init__(f"AI gateway error: {label}")


class MalformedResponse(UpstreamAPIError):
    kind = ErrorKind.MALFORMED_RESPONSE
    public_message = "AI returned an invalid trip plan"

    def __init__(self, raw_text: str, reason: str = ""):
        # raw_text is for server-side diagnostics only
        self.raw_text = raw_text
        self.reason = reason
        super().__init__(f"Could not parse trip plan: {reason}" if reason else None)


class InvalidTripRequest(TripPlanError):
    kind = ErrorKind.INVALID_REQUEST
    public_message = "Invalid trip request"


STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.CONFIGURATION: 500,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.PAYMENT_REQUIRED: 402,
    ErrorKind.UPSTREAM: 500,
    ErrorKind.MALFORMED_RESPONSE: 500,
    ErrorKind.INVALID_REQUEST: 400,
}


def error_response(error: Exception) -> Tuple[int, Dict[str, str]]:
    """Map an error to the (status, body) pair returned to API clients.

    Only InvalidTripRequest exposes its own message; every other kind returns a
    fixed public message so upstream status codes and raw model output stay in
    the server logs.
    """
    if not isinstance(error, TripPlanError):
        return 500, {"error": TripPlanError.public_message}
    if isinstance(error, InvalidTripRequest):
        return STATUS_BY_KIND[error.kind], {"error": str(error)}
    return STATUS_BY_KIND[error.kind], {"error": error.public_message}
