"""
APISIX Admin API Module for the Route Console
Request layer, route form mapping and route management
"""

from .client import ApiClient, NO_CONTENT
from .errors import (
    ConsoleError,
    ConfigurationMissing,
    TransportFailure,
    UnexpectedResponseShape,
    RouteValidationError
)
from .form import from_wire, to_payload, validate_payload
from .models import (
    APISIXRoute,
    RouteNode,
    RouteListPage,
    DeleteStatus,
    DeleteWorkflowState
)
from .routes import RouteManager

__all__ = [
    "ApiClient",
    "NO_CONTENT",
    "ConsoleError",
    "ConfigurationMissing",
    "TransportFailure",
    "UnexpectedResponseShape",
    "RouteValidationError",
    "from_wire",
    "to_payload",
    "validate_payload",
    "APISIXRoute",
    "RouteNode",
    "RouteListPage",
    "DeleteStatus",
    "DeleteWorkflowState",
    "RouteManager"
]
