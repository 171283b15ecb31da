"""Abstract base class for event sources."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from http_event_source.errors import ConfigurationError
from http_event_source.models import EventProcessor


class EventSource(ABC):
    """Interface the host framework drives every event source through."""

    def __init__(self, config: Any, datasources: Mapping[str, Any] | None = None):
        """
        Initialize the event source.

        Args:
            config: Source configuration
            datasources: Datasources the host makes available to the source
        """
        self.config = config
        self.datasources = dict(datasources or {})
        self.client: Any = None

    async def init(self) -> None:
        """Create the client handle; called once by the host at startup."""
        if self.client is not None:
            raise ConfigurationError(f"{type(self).__name__}.init() has already run")
        self.client = await self.init_client()

    @abstractmethod
    async def init_client(self) -> Any:
        """
        Create and start the underlying client.

        Returns:
            The client handle kept for the source's lifetime
        """
        pass

    @abstractmethod
    async def subscribe_to_event(
        self,
        event_route: str,
        event_config: Mapping[str, Any],
        process_event: EventProcessor,
        event: Mapping[str, Any] | None = None,
    ) -> None:
        """
        Register a handler for one declared route.

        Args:
            event_route: Route key, e.g. ``http.get./orders/{orderId}``
            event_config: Route configuration merged into the processor context
            process_event: Coroutine that turns an event into a status
            event: Route metadata, e.g. ``{"authn": True}``
        """
        pass
