# messaging client: start/stop, and event handler registration

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from loguru import logger

EVENTS = ("message", "scan", "login", "logout", "error")

EventHandler = Callable[..., Any]


class BaseMessagingClient(ABC):
    """A chat backend that delivers events to registered handlers.

    Subclasses translate backend events into the arguments each handler
    expects and call ``_emit()``; ``message`` handlers always receive an
    ``InboundMessage``.
    """

    name: str = "base"

    def __init__(self) -> None:
        self._running = False
        self._handlers: dict[str, list[EventHandler]] = {}

    def on(self, event: str, handler: EventHandler) -> None:
        """Register ``handler`` (sync or async) for ``event``."""
        if event not in EVENTS:
            raise ValueError(f"Unknown event '{event}', expected one of {EVENTS}")
        self._handlers.setdefault(event, []).append(handler)

    @abstractmethod
    async def start(self):
        """Connect to the backend and begin delivering events."""
        pass

    @abstractmethod
    async def stop(self):
        """Disconnect from the backend."""
        pass

    async def _emit(self, event: str, *args: Any) -> None:
        """Call every handler for ``event`` in registration order."""
        for handler in self._handlers.get(event, []):
            try:
                result = handler(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                logger.error(f"Error in '{event}' handler on {self.name}: {exc}")

    @property
    def is_running(self) -> bool:
        """Return True if the client is running, False otherwise."""
        return self._running
