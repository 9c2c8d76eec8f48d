# errors.py — session error taxonomy + 401/412 classification (NO state mutation)
from __future__ import annotations

from typing import Any, Dict, Optional, Type

__all__ = [
    "SessionError",
    "SettingsError",
    "ValidationError",
    "NetworkError",
    "ApiError",
    "LoginSessionExpired",
    "MpinSessionExpired",
    "ApiCallError",
    "LOGIN_EXPIRED_CODE",
    "MPIN_EXPIRED_CODE",
    "NETWORK_ERROR_MSG",
    "network_error_response",
    "status_code_of",
    "classify_response",
    "error_kind",
]

LOGIN_EXPIRED_CODE = 401
MPIN_EXPIRED_CODE = 412

NETWORK_ERROR_MSG = "Network error"


class SessionError(RuntimeError):
    """Base for every error the session core surfaces."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class SettingsError(SessionError):
    pass


class ValidationError(SessionError):
    """Client-side input problem, raised before any network call."""


class NetworkError(SessionError):
    default_message = NETWORK_ERROR_MSG


class ApiError(SessionError):
    default_message = "Request failed"


class LoginSessionExpired(ApiError):
    default_message = "Session expired. Please login again."


class MpinSessionExpired(ApiError):
    default_message = "MPIN session expired. Please enter your MPIN again."


class ApiCallError(RuntimeError):
    """
    Raised by the gateway for HTTP error responses and transport failures.
    Carries the normalized response so callers can treat it like a returned one.
    """

    def __init__(self, response: Dict[str, Any]):
        self.response = response
        super().__init__(response.get("msg") or NETWORK_ERROR_MSG)

    @property
    def status_code(self) -> Optional[int]:
        return status_code_of(self.response)


def network_error_response() -> Dict[str, Any]:
    return {"status": False, "result": None, "msg": NETWORK_ERROR_MSG, "status_code": None}


def status_code_of(response: Any) -> Optional[int]:
    """Pull status_code (or statusCode) off a response dict, as an int."""
    if not isinstance(response, dict):
        return None
    raw = response.get("status_code")
    if raw is None:
        raw = response.get("statusCode")
    try:
        return int(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None


def classify_response(response: Any) -> Optional[Type[ApiError]]:
    """
    Map a normalized response to its expiry class.

    401 -> LoginSessionExpired, 412 -> MpinSessionExpired, anything else -> None
    (an ordinary success or failure carrying msg).
    """
    code = status_code_of(response)
    if code == LOGIN_EXPIRED_CODE:
        return LoginSessionExpired
    if code == MPIN_EXPIRED_CODE:
        return MpinSessionExpired
    return None


_KINDS = {
    SessionError: "store",
    ValidationError: "validation",
    NetworkError: "network",
    ApiError: "api",
    LoginSessionExpired: "login_expired",
    MpinSessionExpired: "mpin_expired",
}


def error_kind(cls: Type[SessionError]) -> str:
    """Snake-case tag used in controller result dicts."""
    return _KINDS.get(cls, "api")
