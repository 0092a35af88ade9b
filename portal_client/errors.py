from typing import Optional


class ClientError(Exception):
    """Base class for portal client errors"""


class SourceUnavailable(ClientError):
    """The API could not be reached (connection refused, timeout, DNS, ...)"""


class ApiError(ClientError):
    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        self.message = message or f"Request failed with status {status_code}"
        super().__init__(self.message)


class SessionExpired(ClientError):
    """The server rejected the stored token; the session has been cleared"""


class ReadOnlySource(ClientError):
    """Writes are not possible against offline fixture data"""
