"""Route key parsing and path template translation."""

import re

from http_event_source.errors import RouteKeyError
from http_event_source.models import RouteKey

PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")

# OPTIONS is answered by the CORS preflight handler.
SUPPORTED_METHODS = frozenset({"get", "post", "put", "patch", "delete", "head"})


def parse_route_key(event_route: str) -> RouteKey:
    """
    Split ``<protocol>.<method>.<path template>`` into its parts.

    Only the first two dots separate segments, so the template itself may
    contain dots (``http.get./files/{name}.json``).

    Raises:
        RouteKeyError: If the key or its template is malformed
    """
    segments = event_route.split(".", 2)
    if len(segments) != 3 or not all(segments):
        raise RouteKeyError(event_route, "expected '<protocol>.<method>.<path>'")

    protocol, method, template = segments
    method = method.lower()
    if method not in SUPPORTED_METHODS:
        raise RouteKeyError(event_route, f"unsupported HTTP method {method!r}")
    if not template.startswith("/"):
        raise RouteKeyError(event_route, "path template must start with '/'")

    params = tuple(PLACEHOLDER.findall(template))
    leftover = PLACEHOLDER.sub("", template)
    if "{" in leftover or "}" in leftover:
        raise RouteKeyError(event_route, "placeholders must look like '{name}'")
    if len(set(params)) != len(params):
        raise RouteKeyError(event_route, "duplicate placeholder names")

    return RouteKey(
        raw=event_route,
        protocol=protocol,
        method=method.upper(),
        template=template,
        endpoint=to_endpoint(template),
        router_path=template,
        params=params,
    )


def to_endpoint(template: str) -> str:
    """Rewrite every ``{name}`` placeholder as ``:name``."""
    return PLACEHOLDER.sub(r":\1", template)
