"""
APISIX Data Models
Pydantic models for the editable route and the console's view state
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

HTTP_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS", "CONNECT", "TRACE", "PURGE"]

PAGE_SIZE_OPTIONS = [10, 20, 50, 100]

# Array field -> the singular wire field APISIX also accepts for it
ARRAY_FIELDS = {
    "uris": "uri",
    "hosts": "host",
    "remote_addrs": "remote_addr",
}


def as_list(value: Any) -> List[str]:
    """Wrap a bare scalar; ``None`` is the empty list"""
    if value is None:
        return []
    if isinstance(value, list):
        return [str(v) for v in value]
    return [str(value)]


class APISIXRoute(BaseModel):
    """
    Editable APISIX route

    Array fields are always lists here, whatever shape the Admin API used.
    Fields the console does not edit (plugins, labels, ...) are kept as
    extras so saving an edited route does not drop them.
    """
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: Optional[str] = None
    desc: Optional[str] = None
    uris: List[str] = Field(default_factory=list)
    hosts: List[str] = Field(default_factory=list)
    remote_addrs: List[str] = Field(default_factory=list)
    methods: List[str] = Field(default_factory=list)  # empty matches any method
    priority: int = 0
    status: int = 1
    upstream_id: Optional[str] = None
    service_id: Optional[str] = None
    plugin_config_id: Optional[str] = None
    enable_websocket: bool = False

    @model_validator(mode="before")
    @classmethod
    def _fold_singular_fields(cls, data: Any) -> Any:
        """``uri``/``host``/``remote_addr`` become the array fields; a non-empty array wins"""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for plural, singular in ARRAY_FIELDS.items():
            if plural not in data and singular not in data:
                continue
            items = as_list(data.get(plural))
            single = data.pop(singular, None)
            if not items and single:
                items = [str(single)]
            data[plural] = items
        return data

    @field_validator("id", "name", "desc", "upstream_id", "service_id", "plugin_config_id", mode="before")
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        # APISIX may hand back numeric ids
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("methods")
    @classmethod
    def _known_methods(cls, value: List[str]) -> List[str]:
        methods = []
        for method in value:
            upper = method.strip().upper()
            if upper not in HTTP_METHODS:
                raise ValueError(f"unsupported HTTP method: {method!r}")
            if upper not in methods:
                methods.append(upper)
        return methods

    @field_validator("status")
    @classmethod
    def _binary_status(cls, value: int) -> int:
        if value not in (0, 1):
            raise ValueError("status must be 0 (disabled) or 1 (enabled)")
        return value

    @property
    def label(self) -> str:
        """Name if set, otherwise the id"""
        return self.name or self.id or ""


class RouteNode(BaseModel):
    """One entry of the Admin API route listing"""
    key: str
    value: APISIXRoute
    modifiedIndex: Optional[int] = None
    createdIndex: Optional[int] = None


class RouteListPage(BaseModel):
    """One page of routes as shown to the operator"""
    items: List[RouteNode] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 10
    error: Optional[str] = None


class DeleteStatus(str, Enum):
    """Delete confirmation dialog status"""
    CLOSED = "closed"
    OPEN = "open"
    DELETING = "deleting"


class DeleteWorkflowState(BaseModel):
    """Closed | Open(target) | Deleting(target), plus the last error"""
    status: DeleteStatus = DeleteStatus.CLOSED
    target: Optional[APISIXRoute] = None
    error: Optional[str] = None

    def describe(self) -> Dict[str, Any]:
        """Confirmation text for the dialog"""
        if self.target is None:
            return {"title": "Delete Route", "description": ""}
        name = f' "{self.target.name}"' if self.target.name else ""
        return {
            "title": "Delete Route",
            "description": f"Are you sure you want to delete the route{name} (ID: {self.target.id or ''})?",
        }
