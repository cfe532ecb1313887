"""Application bootstrap: wires the messaging client to the handlers.

This is the single place that loads configuration and connects the
MessageResponder and LifecycleHandlers to a messaging client, then runs
until the backend fails to start or a shutdown signal arrives.
"""

from __future__ import annotations

import asyncio
import signal

from loguru import logger

from libot.config import BotConfig, load_config
from libot.handler.channels.base import BaseMessagingClient
from libot.handler.lifecycle import LifecycleHandlers
from libot.handler.responder import MessageResponder


class BotStartupError(RuntimeError):
    """The messaging backend could not be initialized or logged in."""


def _default_client(config: BotConfig) -> BaseMessagingClient:
    from libot.handler.channels.wechaty import WechatyClient

    return WechatyClient(config)


class Application:
    """Top-level application that owns all major components.

    Architecture:
        BaseMessagingClient (wechaty puppet)
            ├── message  → MessageResponder.handle
            └── scan / login / logout / error → LifecycleHandlers
    """

    def __init__(
        self,
        config: BotConfig | None = None,
        client: BaseMessagingClient | None = None,
    ) -> None:
        self.config = config or load_config()
        self.client = client or _default_client(self.config)

        self.responder = MessageResponder(self.config)
        self.lifecycle = LifecycleHandlers(self.config)

        self.client.on("message", self.responder.handle)
        self.client.on("scan", self.lifecycle.on_scan)
        self.client.on("login", self.lifecycle.on_login)
        self.client.on("logout", self.lifecycle.on_logout)
        self.client.on("error", self.lifecycle.on_error)

        self._shutdown_event = asyncio.Event()

    async def start(self) -> None:
        """Start the client and run until shutdown.

        Raises:
            BotStartupError: if the client fails to start.
        """
        logger.info(
            f"{self.config.bot_name} starting up (puppet={self.config.puppet})..."
        )

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self.shutdown)

        # Some backends return from start(), others keep running inside it
        client_task = asyncio.create_task(self.client.start(), name="messaging-client")
        shutdown_task = asyncio.create_task(
            self._shutdown_event.wait(), name="shutdown-wait"
        )

        done, _ = await asyncio.wait(
            {client_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED
        )

        if client_task in done:
            exc = client_task.exception()
            if exc is not None:
                shutdown_task.cancel()
                logger.error(f"Failed to start bot: {exc}")
                await self.client.stop()
                raise BotStartupError(str(exc)) from exc

            logger.info(f"{self.config.bot_name} started, waiting for messages...")
            await shutdown_task
        else:
            client_task.cancel()
            try:
                await client_task
            except asyncio.CancelledError:
                pass

        logger.info("Shutting down...")
        await self.client.stop()
        logger.info(f"{self.config.bot_name} stopped.")

    def shutdown(self) -> None:
        """Handle SIGINT/SIGTERM by setting the shutdown event."""
        logger.info("Shutdown signal received")
        self._shutdown_event.set()

    def run(self) -> None:
        """Synchronous entry point; creates event loop and runs the app."""
        asyncio.run(self.start())
