"""
APISIX Route Form Model
Maps between the editable route and the Admin API wire payload
"""

import logging
from typing import Any, Callable, Dict, List

from .errors import RouteValidationError
from .models import ARRAY_FIELDS, APISIXRoute, as_list

logger = logging.getLogger(__name__)

OPTIONAL_STRING_FIELDS = ("name", "desc", "upstream_id", "service_id", "plugin_config_id")
ALWAYS_SENT_FIELDS = ("priority", "status", "enable_websocket")

# Never sent back: the path carries the id, the server owns the timestamps
READ_ONLY_FIELDS = ("id", "create_time", "update_time")

# Only ever sent through the array fields they fold into
SINGULAR_FIELDS = tuple(ARRAY_FIELDS.values())


def new_route() -> APISIXRoute:
    """Blank route for the create form"""
    return APISIXRoute(uris=["/"])


def _non_blank(values: List[str]) -> List[str]:
    return [v for v in values if v.strip() != ""]


def uri_fields(route: APISIXRoute) -> Dict[str, Any]:
    """A single URI collapses to ``uri``; several are sent as ``uris``"""
    uris = route.uris
    if not uris:
        return {}
    if len(uris) == 1:
        if uris[0] == "":
            return {}
        return {"uri": uris[0]}

    filtered = _non_blank(uris)
    return {"uris": filtered} if filtered else {}


def match_fields(route: APISIXRoute) -> Dict[str, Any]:
    """``hosts`` and ``remote_addrs`` without blanks, omitted when empty"""
    fields = {}
    for name in ("hosts", "remote_addrs"):
        values = _non_blank(getattr(route, name))
        if values:
            fields[name] = values
    return fields


def method_fields(route: APISIXRoute) -> Dict[str, Any]:
    """No methods means any method, which APISIX reads from an absent field"""
    return {"methods": list(route.methods)} if route.methods else {}


def optional_string_fields(route: APISIXRoute) -> Dict[str, Any]:
    fields = {}
    for name in OPTIONAL_STRING_FIELDS:
        value = getattr(route, name)
        if value:
            fields[name] = value
    return fields


def always_sent_fields(route: APISIXRoute) -> Dict[str, Any]:
    return {name: getattr(route, name) for name in ALWAYS_SENT_FIELDS}


PAYLOAD_STEPS: List[Callable[[APISIXRoute], Dict[str, Any]]] = [
    uri_fields,
    match_fields,
    method_fields,
    optional_string_fields,
    always_sent_fields,
]


def to_payload(route: APISIXRoute) -> Dict[str, Any]:
    """
    Build the wire payload for a route

    Returns a new dict and leaves the route untouched. Fields the console
    does not edit are carried over first; the normalization steps then
    contribute their fields in order.
    """
    payload: Dict[str, Any] = {
        key: value
        for key, value in (route.model_extra or {}).items()
        if key not in READ_ONLY_FIELDS and key not in SINGULAR_FIELDS
    }
    for step in PAYLOAD_STEPS:
        payload.update(step(route))
    return payload


def validate_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Reject payloads that would reach APISIX without any URI to match"""
    if "uri" not in payload and "uris" not in payload:
        raise RouteValidationError("At least one URI is required for a route.")
    return payload


def from_wire(value: Dict[str, Any]) -> APISIXRoute:
    """
    Build the editable route from an Admin API route object

    Array fields become lists even when APISIX returned the singular field,
    a bare scalar, or nothing (the model folds those); scalars fall back to
    their defaults.
    """
    data = dict(value)

    data["methods"] = as_list(data.get("methods"))

    for name in ("priority", "status", "enable_websocket"):
        if data.get(name) is None:
            data.pop(name, None)

    return APISIXRoute.model_validate(data)
