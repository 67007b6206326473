"""Failures the capacity planning client reports; none of them are retried."""
from typing import Any, Optional

NETWORK_ERROR_MESSAGE = "Unable to connect to the server. Please check your connection and try again."


class ApiError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NetworkError(ApiError):
    """The request never produced a response (connection failure or timeout)."""

    def __init__(self, message: str = NETWORK_ERROR_MESSAGE):
        super().__init__(message)


class ServerValidationError(ApiError):
    """The server answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int, payload: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class NotFound(ServerValidationError):
    pass


class LookupFailed(ApiError):
    pass


class ScheduleCreationFailed(ApiError):
    pass
