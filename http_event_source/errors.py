"""Exceptions raised by the HTTP event source."""


class EventSourceError(Exception):
    """Base class for event source errors."""


class ConfigurationError(EventSourceError):
    """The adapter or a route is configured in a way that cannot work."""


class RouteKeyError(EventSourceError):
    """A route key or its path template cannot be parsed."""

    def __init__(self, route_key: str, reason: str):
        self.route_key = route_key
        self.reason = reason
        super().__init__(f"Invalid route key {route_key!r}: {reason}")
