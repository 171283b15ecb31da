"""HTTP event source built on aiohttp."""

from collections.abc import Mapping
from typing import Any

import aiohttp_cors
from aiohttp import web

from http_event_source.auth import BearerTokenAuthenticator
from http_event_source.base import EventSource
from http_event_source.config import HttpEventSourceConfig, load_config
from http_event_source.errors import ConfigurationError
from http_event_source.handlers import RouteDispatcher
from http_event_source.logging import get_logger, setup_logging
from http_event_source.middleware import body_parser_middleware
from http_event_source.models import EventProcessor, RouteDescriptor
from http_event_source.routing import parse_route_key

logger = get_logger(__name__)

DISPATCHER_KEY = web.AppKey("event_routes", RouteDispatcher)

DISPATCH_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE")


class HttpEventSource(EventSource):
    """Turns inbound HTTP requests into canonical events."""

    config: HttpEventSourceConfig

    def __init__(
        self,
        config: Mapping[str, Any] | HttpEventSourceConfig | None = None,
        datasources: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(load_config(config), datasources)
        self._runner: web.AppRunner | None = None

    def setup_routes(self, app: web.Application, dispatcher: RouteDispatcher) -> None:
        """Install the catch-all route behind a permissive CORS policy."""
        cors = aiohttp_cors.setup(
            app,
            defaults={
                "*": aiohttp_cors.ResourceOptions(
                    allow_credentials=False,
                    expose_headers="*",
                    allow_headers="*",
                    allow_methods="*",
                )
            },
        )

        resource = cors.add(app.router.add_resource("/{tail:.*}"))
        for method in DISPATCH_METHODS:
            cors.add(resource.add_route(method, dispatcher.dispatch))

    async def init_client(self) -> web.Application:
        """Build the application and start listening on the configured port."""
        settings = self.config
        if settings.log_level:
            setup_logging(settings.log_level)

        authenticator = BearerTokenAuthenticator(settings.jwt) if settings.jwt else None
        dispatcher = RouteDispatcher(authenticator)

        app = web.Application(
            client_max_size=max(settings.request_body_limit, settings.file_size_limit),
            middlewares=[body_parser_middleware(settings.request_body_limit, settings.file_size_limit)],
        )
        app[DISPATCHER_KEY] = dispatcher
        self.setup_routes(app, dispatcher)

        runner = web.AppRunner(app)
        await runner.setup()

        site = web.TCPSite(runner, settings.host, settings.port)
        await site.start()
        self._runner = runner

        logger.info(f"HTTP event source listening on http://{settings.host}:{settings.port}")
        if authenticator is not None:
            logger.info("Bearer token authentication enabled")

        return app

    async def subscribe_to_event(
        self,
        event_route: str,
        event_config: Mapping[str, Any],
        process_event: EventProcessor,
        event: Mapping[str, Any] | None = None,
    ) -> None:
        """
        Register ``process_event`` for the route described by ``event_route``.

        Raises:
            RouteKeyError: If the route key is malformed
            ConfigurationError: If the client is not running, the route needs
                authentication without JWT settings, or it is already registered
        """
        if self.client is None:
            raise ConfigurationError("init() must complete before routes are subscribed")

        descriptor = RouteDescriptor(
            key=parse_route_key(event_route),
            config=dict(event_config or {}),
            authn=bool((event or {}).get("authn", False)),
            process_event=process_event,
        )
        self.client[DISPATCHER_KEY].add(descriptor)

        logger.info(
            f"Registered {descriptor.key.method} {descriptor.key.endpoint} (authn={descriptor.authn})"
        )

    async def close(self) -> None:
        """Stop listening and release the socket."""
        if self._runner is None:
            return
        await self._runner.cleanup()
        self._runner = None
        self.client = None
        logger.info("HTTP event source stopped")
