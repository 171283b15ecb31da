"""Translation of aiohttp requests into canonical events."""

from typing import Any

from aiohttp import web
from multidict import MultiMapping

from http_event_source.auth import USER_KEY
from http_event_source.models import Actor, CanonicalEvent

BODY_KEY = web.RequestKey("body", object)
PARAMS_KEY = web.RequestKey("params", dict)


def flatten_multidict(values: MultiMapping[Any]) -> dict[str, Any]:
    """Collapse a multidict: single values stay scalar, repeated keys become lists."""
    result: dict[str, Any] = {}
    for key in dict.fromkeys(values.keys()):
        items = values.getall(key)
        result[key] = items[0] if len(items) == 1 else list(items)
    return result


def request_headers(request: web.Request) -> dict[str, str]:
    """Lower-cased header names; repeated headers are joined with ', '."""
    names = dict.fromkeys(name.lower() for name in request.headers.keys())
    return {name: ", ".join(request.headers.getall(name)) for name in names}


def request_properties(request: web.Request) -> dict[str, Any]:
    """
    Project the request onto the fields an event carries.

    This is an allow-list: sockets, transports, the response and the
    application never end up in the event.
    """
    properties: dict[str, Any] = {
        "method": request.method,
        "url": request.path_qs,
        "path": request.path,
        "hostname": request.url.host,
        "ip": request.remote,
        "protocol": request.scheme,
        "params": dict(request.get(PARAMS_KEY, {})),
        "query": flatten_multidict(request.query),
        "body": request.get(BODY_KEY, {}),
    }
    claims = request.get(USER_KEY)
    if claims is not None:
        properties["user"] = claims
    return properties


def create_actor(claims: dict[str, Any] | None) -> Actor:
    if not claims:
        return Actor()
    subject = claims.get("sub")
    return Actor(
        id=str(subject) if subject is not None else None,
        name=claims.get("name"),
        data=claims,
    )


def create_event(request: web.Request, endpoint: str) -> CanonicalEvent:
    """Build the canonical event for a request routed to ``endpoint``."""
    data = {**request_properties(request), "headers": request_headers(request)}

    return CanonicalEvent(
        type=endpoint,
        data=data,
        actor=create_actor(request.get(USER_KEY)),
        metadata={},
    )
