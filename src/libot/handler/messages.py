# inbound messages and the contact/status types the handlers see

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any


class MessageKind(Enum):
    TEXT = "text"
    OTHER = "other"  # image, file, mini-program, share card, ...


class ScanStatus(IntEnum):
    """Login QR status, numbered like the puppet's own enum."""

    UNKNOWN = 0
    CANCEL = 1
    WAITING = 2
    SCANNED = 3
    CONFIRMED = 4
    TIMEOUT = 5


class ContactHandle(ABC):
    """A message sender the bot can reply to."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name. Must not raise."""
        pass

    @abstractmethod
    def is_self(self) -> bool:
        """True if this contact is the logged-in bot account."""
        pass

    @abstractmethod
    async def say(self, text: str):
        """Send a text message to this contact."""
        pass


@dataclass(frozen=True)
class InboundMessage:
    sender: ContactHandle
    kind: MessageKind
    room: Any | None = None  # set for group messages
    type_name: str = ""  # backend's label, for logs only
    payload: Any = None  # opaque, for debug dumps only
    text: str = ""  # primary text accessor, "" if it failed
    rendering: str = ""  # str() of the backend message, "" if it failed
    message_id: str | None = None

    @property
    def is_direct(self) -> bool:
        return self.room is None

    def best_text(self) -> str:
        """Primary text, else the string rendering, else ""."""
        return self.text or self.rendering or ""
