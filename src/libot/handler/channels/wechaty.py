"""Wechaty client: runs a Wechaty puppet and feeds its events to handlers.

Converts every wechaty ``Message`` into an ``InboundMessage`` up front, so
handlers never call backend accessors that might raise.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from loguru import logger
from wechaty import Contact, Message, Wechaty, WechatyOptions
from wechaty_puppet import MessageType, PuppetOptions

from libot.config import BotConfig
from libot.handler.messages import ContactHandle, InboundMessage, MessageKind

from .base import BaseMessagingClient


def _safe(accessor: Callable[[], Any], default: Any = None) -> Any:
    """Call ``accessor``, returning ``default`` if it raises."""
    try:
        return accessor()
    except Exception as exc:
        logger.debug(f"Accessor failed, using default: {exc}")
        return default


class WechatyContact(ContactHandle):
    """ContactHandle backed by a wechaty Contact."""

    def __init__(self, contact: Contact) -> None:
        self._contact = contact

    @property
    def name(self) -> str:
        name = _safe(lambda: self._contact.name)
        if name:
            return str(name)
        return str(_safe(lambda: self._contact.contact_id, "unknown") or "unknown")

    def is_self(self) -> bool:
        return bool(self._contact.is_self())

    async def say(self, text: str):
        await self._contact.say(text)

    def __str__(self) -> str:
        return self.name


class WechatyClient(BaseMessagingClient):
    """Messaging client using the Wechaty SDK.

    Responsibilities:
        - Build the Wechaty bot from BotConfig (name, puppet, endpoint, token)
        - Forward scan / login / logout / error events as-is
        - Convert messages into InboundMessage before handing them on
    """

    name = "wechaty"

    def __init__(self, config: BotConfig) -> None:
        super().__init__()
        self._config = config
        self._bot: Wechaty | None = None

    def _build_options(self) -> WechatyOptions:
        return WechatyOptions(
            name=self._config.bot_name,
            puppet=self._config.puppet,
            puppet_options=PuppetOptions(
                end_point=self._config.endpoint,
                token=self._config.puppet_token,
            ),
        )

    # ------------------------------------------------------------------
    # BaseMessagingClient interface
    # ------------------------------------------------------------------

    async def start(self):
        """Build the Wechaty bot, wire its events, and start the puppet."""
        if self._running:
            logger.warning("WechatyClient.start() called while already running")
            return

        self._bot = Wechaty(self._build_options())
        self._bot.on("scan", self._on_scan)
        self._bot.on("login", self._on_login)
        self._bot.on("logout", self._on_logout)
        self._bot.on("error", self._on_error)
        self._bot.on("message", self._on_message)

        self._running = True
        try:
            await self._bot.start()
        except Exception:
            self._running = False
            raise

    async def stop(self):
        """Stop the puppet."""
        if not self._running or self._bot is None:
            return

        try:
            await self._bot.stop()
        except Exception as exc:
            logger.error(f"Error during Wechaty stop: {exc}")
        finally:
            self._running = False
            logger.info("Wechaty client stopped")

    # ------------------------------------------------------------------
    # Event bridge
    # ------------------------------------------------------------------

    async def _on_scan(self, qr_code: str, status: Any, *_: Any):
        await self._emit("scan", qr_code, int(status))

    async def _on_login(self, contact: Contact, *_: Any):
        await self._emit("login", WechatyContact(contact))

    async def _on_logout(self, contact: Contact, *_: Any):
        await self._emit("logout", WechatyContact(contact))

    async def _on_error(self, error: Any, *_: Any):
        await self._emit("error", error)

    async def _on_message(self, message: Message):
        try:
            inbound = self.to_inbound(message)
        except Exception:
            logger.exception(
                f"Could not read inbound message {getattr(message, 'message_id', '?')}"
            )
            return
        await self._emit("message", inbound)

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    @staticmethod
    def to_inbound(message: Message) -> InboundMessage:
        """Snapshot a wechaty Message into an InboundMessage."""
        msg_type = _safe(message.type)
        kind = (
            MessageKind.TEXT
            if msg_type == MessageType.MESSAGE_TYPE_TEXT
            else MessageKind.OTHER
        )
        type_name = getattr(msg_type, "name", None) or str(msg_type)

        return InboundMessage(
            sender=WechatyContact(message.talker()),
            kind=kind,
            room=message.room(),
            type_name=type_name,
            payload=_safe(lambda: message.payload),
            text=_safe(message.text, "") or "",
            rendering=_safe(lambda: str(message), "") or "",
            message_id=_safe(lambda: message.message_id),
        )
