"""
History Client Domain Exceptions

All exceptions raised by the patch history client.
"""
from typing import Any, Optional


class HistoryClientError(Exception):
    """Base exception for history client errors"""
    pass


class TransportError(HistoryClientError):
    """
    Raised when the HTTP exchange itself fails.

    Either the backend answered with a non-success status (status_code and
    status_text set; 4xx and 5xx are not distinguished) or the request never
    completed (network failure or timeout; status_code is None).
    """

    def __init__(self, message: str, status_code: Optional[int] = None, status_text: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text


class ApplicationError(HistoryClientError):
    """Raised when the transport succeeded but the backend's embedded code signals failure"""

    def __init__(self, message: str, code: Any = None):
        super().__init__(message)
        self.code = code


class InvalidResponseError(HistoryClientError):
    """Raised when a success response body is not valid JSON"""
    pass
