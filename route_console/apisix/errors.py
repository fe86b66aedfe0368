"""
APISIX Console Errors
Exceptions raised by the request layer and the route manager
"""

from typing import Any, Optional


class ConsoleError(Exception):
    """Base class for errors surfaced to the operator"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationMissing(ConsoleError):
    """Admin API base URL or API key is not configured"""

    def __init__(self, message: str = "API Base URL or API Key is not configured. Please configure it in Settings."):
        super().__init__(message)


class TransportFailure(ConsoleError):
    """Network or HTTP level failure talking to the Admin API"""

    def __init__(self, message: str, status: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.status = status
        self.data = data

    def __repr__(self) -> str:
        return f"TransportFailure(status={self.status!r}, message={self.message!r})"


class UnexpectedResponseShape(ConsoleError):
    """Admin API response does not match the endpoint's contract"""

    def __init__(self, message: str = "Received an unexpected response format from the server.", data: Any = None):
        super().__init__(message)
        self.data = data


class RouteValidationError(ConsoleError):
    """Route payload rejected before it is sent to the Admin API"""
