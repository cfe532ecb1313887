"""Tests for BaseMessagingClient and Application wiring (no real backend)."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from libot.app import Application, BotStartupError
from libot.config import BotConfig
from libot.handler.channels.base import BaseMessagingClient
from libot.handler.messages import InboundMessage, MessageKind


class FakeClient(BaseMessagingClient):
    name = "fake"

    def __init__(self, start_error: Exception | None = None) -> None:
        super().__init__()
        self.start_error = start_error
        self.stopped = False

    async def start(self):
        if self.start_error is not None:
            raise self.start_error
        self._running = True

    async def stop(self):
        self._running = False
        self.stopped = True


@pytest.fixture
def config(tmp_path):
    return BotConfig(bot_name="TestBot", fixed_reply="auto reply", base_dir=tmp_path)


def _make_contact(name="Alice"):
    contact = MagicMock()
    contact.name = name
    contact.is_self.return_value = False
    contact.say = AsyncMock()
    return contact


class TestBaseMessagingClient:
    def test_unknown_event_rejected(self):
        with pytest.raises(ValueError, match="Unknown event"):
            FakeClient().on("friendship", lambda *_: None)

    @pytest.mark.asyncio
    async def test_emit_calls_sync_and_async_handlers(self):
        client = FakeClient()
        sync_handler = MagicMock()
        async_handler = AsyncMock()
        client.on("login", sync_handler)
        client.on("login", async_handler)

        await client._emit("login", "Alice")

        sync_handler.assert_called_once_with("Alice")
        async_handler.assert_awaited_once_with("Alice")

    @pytest.mark.asyncio
    async def test_handler_failure_does_not_stop_others(self):
        client = FakeClient()
        later = MagicMock()
        client.on("error", MagicMock(side_effect=RuntimeError("boom")))
        client.on("error", later)

        await client._emit("error", "e")

        later.assert_called_once_with("e")


class TestApplication:
    def test_registers_all_handlers(self, config):
        client = FakeClient()
        Application(config=config, client=client)

        assert set(client._handlers) == {"message", "scan", "login", "logout", "error"}

    @pytest.mark.asyncio
    async def test_message_event_reaches_responder(self, config):
        client = FakeClient()
        Application(config=config, client=client)
        contact = _make_contact()

        await client._emit(
            "message",
            InboundMessage(sender=contact, kind=MessageKind.TEXT, text="hi"),
        )

        contact.say.assert_awaited_once_with("auto reply")

    @pytest.mark.asyncio
    async def test_group_message_event_ignored(self, config):
        client = FakeClient()
        Application(config=config, client=client)
        contact = _make_contact()

        await client._emit(
            "message",
            InboundMessage(
                sender=contact, kind=MessageKind.TEXT, text="hi", room=MagicMock()
            ),
        )

        contact.say.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_startup_failure_raises_and_stops_client(self, config):
        client = FakeClient(start_error=ConnectionError("puppet unreachable"))
        app = Application(config=config, client=client)

        with pytest.raises(BotStartupError, match="puppet unreachable"):
            await app.start()

        assert client.stopped is True

    @pytest.mark.asyncio
    async def test_runs_until_shutdown(self, config):
        client = FakeClient()
        app = Application(config=config, client=client)

        asyncio.get_running_loop().call_later(0.05, app.shutdown)
        await asyncio.wait_for(app.start(), timeout=5.0)

        assert client.stopped is True
        assert client.is_running is False

    @pytest.mark.asyncio
    async def test_shutdown_while_client_still_starting(self, config):
        class BlockingClient(FakeClient):
            async def start(self):
                self._running = True
                await asyncio.Event().wait()

        client = BlockingClient()
        app = Application(config=config, client=client)

        asyncio.get_running_loop().call_later(0.05, app.shutdown)
        await asyncio.wait_for(app.start(), timeout=5.0)

        assert client.stopped is True
