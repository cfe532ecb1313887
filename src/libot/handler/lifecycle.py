"""Login lifecycle callbacks: scan, login, logout, error.

These only report to the operator. Login handshakes, session storage and
reconnects all belong to the puppet.
"""

from __future__ import annotations

import sys
from typing import Any, TextIO
from urllib.parse import quote

import qrcode
from loguru import logger

from libot.config import BotConfig
from libot.constants import QR_VIEWER_URL
from libot.handler.messages import ScanStatus

_SHOW_QR = (ScanStatus.WAITING, ScanStatus.TIMEOUT)


def qr_viewer_url(token: str) -> str:
    """Web URL that renders ``token`` as a QR image."""
    return QR_VIEWER_URL + quote(token, safe="")


def render_qr(token: str, out: TextIO | None = None) -> None:
    """Print ``token`` as an ASCII QR code."""
    qr = qrcode.QRCode(border=1)
    qr.add_data(token)
    qr.make(fit=True)
    qr.print_ascii(out=out or sys.stdout, invert=True)


def _status_name(status: int) -> str:
    try:
        return ScanStatus(status).name
    except ValueError:
        return "UNKNOWN"


class LifecycleHandlers:
    """Stateless operator-facing callbacks for puppet lifecycle events."""

    def __init__(self, config: BotConfig, qr_out: TextIO | None = None) -> None:
        self._config = config
        self._qr_out = qr_out

    def on_scan(self, qrcode_token: str, status: int) -> None:
        name = _status_name(status)
        if status in _SHOW_QR:
            try:
                render_qr(qrcode_token, self._qr_out)
            except Exception as exc:
                logger.warning(f"Could not render QR code in terminal: {exc}")
            logger.info(
                f"Scan QR code to log in: {qr_viewer_url(qrcode_token)} "
                f"({name}, {int(status)})"
            )
        else:
            logger.info(f"Scan status: {name} ({int(status)})")

    def on_login(self, user: Any) -> None:
        logger.info(
            f"{user} logged in - memory-card file: {self._config.memory_card_file}"
        )

    def on_logout(self, user: Any) -> None:
        logger.info(f"{user} logged out")

    def on_error(self, error: Any) -> None:
        logger.error(f"Bot error: {error}")
