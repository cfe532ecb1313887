"""Message classifier & responder: the bot's whole reply pipeline.

For each inbound message, in order:
    1. Drop messages sent by the bot itself
    2. Drop group (room) messages
    3. Pick the best available text
    4. Log what arrived
    5. Save the first link, or dump non-text payloads that had none
    6. Send the fixed reply
    7. Log the reply

Nothing escapes ``handle()``: a broken message is logged and the next
one is handled as usual.
"""

from __future__ import annotations

from loguru import logger

from libot.config import BotConfig
from libot.constants import NO_TEXT_PLACEHOLDER, URL_PATTERN
from libot.handler.artifacts import append_link, append_raw_dump, payload_json
from libot.handler.messages import InboundMessage, MessageKind


def extract_first_url(text: str) -> str | None:
    """Return the first http(s) token in ``text``, or None.

    Later links in the same message are ignored.
    """
    match = URL_PATTERN.search(text or "")
    return match.group(0) if match else None


class MessageResponder:
    """Replies to direct messages with a fixed text and records links."""

    def __init__(self, config: BotConfig) -> None:
        self._config = config

    @property
    def reply_text(self) -> str:
        return self._config.fixed_reply

    async def handle(self, msg: InboundMessage) -> None:
        """Process one inbound message. Never raises."""
        try:
            if msg.sender.is_self():
                return
            if not msg.is_direct:
                return

            contact = msg.sender
            text = msg.best_text()

            logger.info(
                f"Message from {contact.name} (type {msg.type_name or msg.kind.value}): "
                f"{text or NO_TEXT_PLACEHOLDER}"
            )

            url = extract_first_url(text)
            if url:
                self._save_link(contact.name, url)
            elif msg.kind is not MessageKind.TEXT:
                self._dump_raw(msg)

            # replied to regardless of what was saved above
            await contact.say(self._config.fixed_reply)
            logger.info(f"Replied to {contact.name}")
        except Exception:
            logger.exception("Failed to handle message")

    # ------------------------------------------------------------------
    # Side effects
    # ------------------------------------------------------------------

    def _save_link(self, sender_name: str, url: str) -> None:
        links_file = self._config.links_file
        try:
            append_link(links_file, sender_name, url)
            logger.info(f"Link saved: {url} -> {links_file}")
        except Exception as exc:
            logger.error(f"Failed to save link to {links_file}: {exc}")

    def _dump_raw(self, msg: InboundMessage) -> None:
        try:
            raw_file = self._config.raw_dump_file(msg.message_id)
            append_raw_dump(raw_file, msg.payload)
            logger.info(f"Raw message saved for debugging: {raw_file}")

            try:
                logger.info(f"Non-text message payload:\n{payload_json(msg.payload)}")
            except (TypeError, ValueError, RecursionError) as exc:
                logger.warning(f"Could not serialize payload: {exc}")
        except Exception as exc:
            logger.warning(f"Failed to save or print raw message: {exc}")
