from __future__ import annotations
from typing import Any, Dict, List, Optional, Union

FieldErrors = Dict[str, Union[str, List[str]]]

INSUFFICIENT_BALANCE_MESSAGE = "Insufficient balance. Please top up your account."
RATE_LIMIT_MESSAGE = "Too many requests. Please slow down and retry later."
NOT_FOUND_MESSAGE = "Resource not found."


class KyaSmsError(Exception):
    """Base exception for every error raised by the client."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(KyaSmsError):
    pass


class AuthenticationError(KyaSmsError):
    def __init__(self, message: str = "Invalid or missing API key"):
        super().__init__(message)


class ValidationError(KyaSmsError):
    """Field-level rejection (HTTP 422)."""

    def __init__(self, message: str, errors: Optional[FieldErrors] = None):
        super().__init__(message)
        self.errors: FieldErrors = errors if errors is not None else {}

    def get_errors(self) -> FieldErrors:
        return self.errors

    def get_error(self, field: str) -> Union[str, List[str], None]:
        return self.errors.get(field)


class ApiError(KyaSmsError):
    """Remote rejection carrying the HTTP status and an optional provider code."""

    def __init__(self, message: str, status_code: int, error_code: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code

    def is_rate_limit_error(self) -> bool:
        return self.status_code == 429

    def is_server_error(self) -> bool:
        return self.status_code >= 500

    def is_insufficient_balance(self) -> bool:
        return self.status_code == 402

    def __repr__(self) -> str:
        return f"ApiError(status_code={self.status_code}, message={self.message!r})"


class NetworkError(KyaSmsError):
    """No response reached the client (DNS, refused connection, timeout)."""

    def __init__(self, message: str = "Network error occurred", original_error: Optional[BaseException] = None):
        super().__init__(message)
        self.original_error = original_error


def classify_error(status: Optional[int], body: Any, fallback_message: str) -> KyaSmsError:
    """
    Map a failed response to exactly one typed error.

    `body` is the decoded error payload ({"message": ..., "errors": {...}});
    anything that is not a dict is treated as missing. Statuses with a fixed
    message (402, 429, 404) ignore the body message.
    """
    data: Dict[str, Any] = body if isinstance(body, dict) else {}
    body_message = data.get("message")
    message = body_message if isinstance(body_message, str) and body_message else fallback_message

    if status is None:
        return KyaSmsError(fallback_message)
    if status == 401:
        if isinstance(body_message, str) and body_message:
            return AuthenticationError(body_message)
        return AuthenticationError()
    if status == 422:
        errors = data.get("errors")
        return ValidationError(message, errors if isinstance(errors, dict) else {})
    if status == 402:
        return ApiError(INSUFFICIENT_BALANCE_MESSAGE, status)
    if status == 429:
        return ApiError(RATE_LIMIT_MESSAGE, status)
    if status == 404:
        return ApiError(NOT_FOUND_MESSAGE, status)
    error_code = data.get("error_code")
    return ApiError(message, status, str(error_code) if error_code is not None else None)
