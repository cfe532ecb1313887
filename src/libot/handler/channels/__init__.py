from .base import BaseMessagingClient

__all__ = ["BaseMessagingClient"]
