"""Request dispatching for subscribed event routes."""

from collections.abc import Mapping
from typing import Any

from aiohttp import web
from pydantic import TypeAdapter

from http_event_source.auth import BearerTokenAuthenticator, authn_gate
from http_event_source.errors import ConfigurationError
from http_event_source.events import PARAMS_KEY, create_event
from http_event_source.logging import get_logger
from http_event_source.models import RouteDescriptor, StatusResult

logger = get_logger(__name__)

ROUTE_KEY = web.RequestKey("route", RouteDescriptor)

_JSON_DATA = TypeAdapter(Any)


class RouteDispatcher:
    """
    Routes requests to the event routes subscribed after the server started.

    aiohttp freezes the application router once the server is running, so
    subscribed routes live in a separate ``UrlDispatcher`` that a single
    catch-all handler resolves against.
    """

    def __init__(self, authenticator: BearerTokenAuthenticator | None = None):
        self._router = web.UrlDispatcher()
        self._routes: dict[Any, RouteDescriptor] = {}
        self._registered: set[tuple[str, str]] = set()
        self._authenticator = authenticator

    def add(self, descriptor: RouteDescriptor) -> None:
        """
        Register one route.

        GET routes also answer HEAD unless HEAD was registered first.

        Raises:
            ConfigurationError: If the route needs authentication without JWT
                settings, or the same method and path are already registered
        """
        key = descriptor.key
        handler = authn_gate(descriptor.authn, self._authenticator)(self.handle_event)

        if (key.method, key.router_path) in self._registered:
            raise ConfigurationError(f"Route {key.method} {key.endpoint} is already registered")

        methods = [key.method]
        if key.method == "GET" and ("HEAD", key.router_path) not in self._registered:
            methods.append("HEAD")

        resource = self._router.add_resource(key.router_path)
        for method in methods:
            route = resource.add_route(method, handler)
            self._routes[route] = descriptor
            self._registered.add((method, key.router_path))

    async def dispatch(self, request: web.Request) -> web.StreamResponse:
        """Catch-all entry point used by the aiohttp router."""
        match_info = await self._router.resolve(request)
        if match_info.http_exception is not None:
            raise match_info.http_exception

        request[ROUTE_KEY] = self._routes[match_info.route]
        request[PARAMS_KEY] = dict(match_info)

        return await match_info.handler(request)

    async def handle_event(self, request: web.Request) -> web.Response:
        """Build the event, await the processor and write its status."""
        descriptor: RouteDescriptor = request[ROUTE_KEY]
        event = create_event(request, descriptor.key.endpoint)

        logger.debug(f"Dispatching event {event.id} for {descriptor.key.raw}")

        status = await descriptor.process_event(event, descriptor.context())

        return build_http_response(status)


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def build_http_response(status: StatusResult | Mapping[str, Any] | None) -> web.Response:
    """
    Translate a processor status into an HTTP response.

    Integer data is sent as its decimal string so it never reads as a status
    code; strings go out as HTML, bytes as an octet stream and everything
    else as JSON.
    """
    if not isinstance(status, StatusResult):
        status = StatusResult.model_validate(status or {}, from_attributes=True)

    code = status.code or 200
    data = status.data

    if data is None:
        return web.Response(status=code)
    if _is_integer(data):
        return web.Response(text=str(int(data)), status=code, content_type="text/html")
    if isinstance(data, str):
        return web.Response(text=data, status=code, content_type="text/html")
    if isinstance(data, bytes | bytearray):
        return web.Response(body=bytes(data), status=code, content_type="application/octet-stream")

    return web.json_response(_JSON_DATA.dump_python(data, mode="json"), status=code)
