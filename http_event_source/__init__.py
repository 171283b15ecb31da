"""HTTP event source: inbound HTTP requests as canonical events."""

from http_event_source.base import EventSource
from http_event_source.config import HttpEventSourceConfig, JwtSettings
from http_event_source.errors import ConfigurationError, EventSourceError, RouteKeyError
from http_event_source.events import create_event
from http_event_source.models import Actor, CanonicalEvent, RouteDescriptor, RouteKey, StatusResult
from http_event_source.server import HttpEventSource

__all__ = [
    "Actor",
    "CanonicalEvent",
    "ConfigurationError",
    "EventSource",
    "EventSourceError",
    "HttpEventSource",
    "HttpEventSourceConfig",
    "JwtSettings",
    "RouteDescriptor",
    "RouteKey",
    "RouteKeyError",
    "StatusResult",
    "create_event",
]
