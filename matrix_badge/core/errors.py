# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Error taxonomy — every failure the pipeline can surface.

Each error carries an ``ErrorKind`` tag, the short message shown on an
error badge, and the HTTP status used by the JSON API.
"""

from enum import Enum


class ErrorKind(str, Enum):
    DISCOVERY_FAILED = "discovery_failed"
    AUTH_FAILED = "auth_failed"
    GUESTS_FORBIDDEN = "guests_forbidden"
    RATE_LIMITED = "rate_limited"
    MALFORMED_REQUEST = "malformed_request"
    BAD_AUTH_TOKEN = "bad_auth_token"
    PRIVACY_DENIED = "privacy_denied"
    INVALID_RESPONSE = "invalid_response"
    UPSTREAM_ERROR = "upstream_error"
    UPSTREAM_UNREACHABLE = "upstream_unreachable"


class MatrixBadgeError(Exception):
    """Base class for every error raised by the resolution pipeline."""

    kind: ErrorKind = ErrorKind.UPSTREAM_ERROR
    message: str = "inaccessible"
    http_status: int = 502

    def __init__(self, message: str | None = None, *, detail: str | None = None) -> None:
        if message is not None:
            self.message = message
        self.detail = detail
        super().__init__(self.message if detail is None else f"{self.message}: {detail}")


# ── Discovery ──

class DiscoveryInfraError(MatrixBadgeError):
    kind = ErrorKind.DISCOVERY_FAILED
    message = "host discovery failed"
    http_status = 502


# ── Registration ──

class AuthError(MatrixBadgeError):
    kind = ErrorKind.AUTH_FAILED
    message = "auth failed"
    http_status = 502


class ForbiddenError(MatrixBadgeError):
    kind = ErrorKind.GUESTS_FORBIDDEN
    message = "guests not allowed"
    http_status = 403


class RateLimitedError(MatrixBadgeError):
    kind = ErrorKind.RATE_LIMITED
    message = "rate limited by rooms host"
    http_status = 429


# ── Room state ──

class MalformedRequestError(MatrixBadgeError):
    kind = ErrorKind.MALFORMED_REQUEST
    message = "unknown request"
    http_status = 400


class BadAuthTokenError(MatrixBadgeError):
    kind = ErrorKind.BAD_AUTH_TOKEN
    message = "bad auth token"
    http_status = 502


class PrivacyDeniedError(MatrixBadgeError):
    kind = ErrorKind.PRIVACY_DENIED
    message = "room not world readable or is invalid"
    http_status = 403


# ── Transport / payload ──

class SchemaValidationError(MatrixBadgeError):
    kind = ErrorKind.INVALID_RESPONSE
    message = "invalid response data"
    http_status = 502


class UpstreamError(MatrixBadgeError):
    """Non-2xx status the caller did not map to a specific error."""

    kind = ErrorKind.UPSTREAM_ERROR
    message = "inaccessible"
    http_status = 502

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        self.status_code = status_code
        super().__init__(detail=detail or f"upstream returned HTTP {status_code}")


class UpstreamUnreachableError(MatrixBadgeError):
    kind = ErrorKind.UPSTREAM_UNREACHABLE
    message = "inaccessible"
    http_status = 504
