"""Data models for the HTTP event source."""

from collections.abc import Awaitable, Callable, Mapping
from datetime import UTC, datetime
from typing import Annotated, Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Actor(BaseModel):
    """Who triggered an event."""

    type: Annotated[str, Field(description="Actor kind")] = "user"
    id: Annotated[str | None, Field(description="Principal identifier, if known")] = None
    name: Annotated[str | None, Field(description="Display name, if known")] = None
    data: Annotated[dict[str, Any], Field(description="Verified token claims")] = {}


class CanonicalEvent(BaseModel):
    """Framework-neutral envelope for one inbound request."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="Unique event identifier")
    type: Annotated[str, Field(description="Endpoint the request was routed to")]
    time: datetime = Field(default_factory=lambda: datetime.now(UTC), description="When the event was built")
    source: Annotated[str, Field(description="Transport tag")] = "http"
    specversion: Annotated[str, Field(description="Envelope version")] = "1.0"
    data: Annotated[dict[str, Any], Field(description="Request properties and headers")] = {}
    channel: Annotated[str, Field(description="Channel tag")] = "REST"
    actor: Actor = Field(default_factory=Actor, description="Triggering actor")
    metadata: Annotated[dict[str, Any], Field(description="Free-form metadata")] = {}


class StatusResult(BaseModel):
    """Processor verdict for one request.

    Only ``code`` and ``data`` shape the HTTP response; any other keys the
    host puts on its status object are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    code: Annotated[int | None, Field(description="HTTP status code")] = None
    data: Annotated[Any, Field(description="Response payload")] = None


EventProcessor = Callable[[CanonicalEvent, dict[str, Any]], Awaitable[StatusResult | Mapping[str, Any]]]


class RouteKey(BaseModel):
    """Parsed ``<protocol>.<method>.<path template>`` route key."""

    model_config = ConfigDict(frozen=True)

    raw: Annotated[str, Field(description="Route key as declared")]
    protocol: Annotated[str, Field(description="Protocol tag, e.g. 'http'")]
    method: Annotated[str, Field(description="Upper-case HTTP method")]
    template: Annotated[str, Field(description="Path template with {name} placeholders")]
    endpoint: Annotated[str, Field(description="Template in :name form")]
    router_path: Annotated[str, Field(description="Template in the form aiohttp routes on")]
    params: Annotated[tuple[str, ...], Field(description="Placeholder names in order")] = ()


class RouteDescriptor(BaseModel):
    """One registered endpoint, looked up when a request matches it."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: RouteKey
    config: Annotated[dict[str, Any], Field(description="Route configuration")] = {}
    authn: Annotated[bool, Field(description="Whether a bearer token is required")] = False
    process_event: EventProcessor

    def context(self) -> dict[str, Any]:
        """Second argument handed to the processor."""
        return {"key": self.key.raw, **self.config}
