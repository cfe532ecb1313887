"""Compile-time constants for the libot package.

These are values baked into code that change only on code updates,
NOT between environments. For runtime settings, see config.py.
"""

import re

# ──────────────────────────────────────────────────────────────────────
# Bot Defaults (fallbacks when the environment leaves a key unset)
# ──────────────────────────────────────────────────────────────────────
# The Python SDK only drives puppet-service; wechat4u is reached through a gateway
DEFAULT_PUPPET = "wechaty-puppet-service"
DEFAULT_BOT_NAME = "WechatLiBot"
DEFAULT_REPLY = "这是自动回复：我现在有事，稍后回复你。"
DEFAULT_LOG_LEVEL = "INFO"

# ──────────────────────────────────────────────────────────────────────
# Environment keys
# ──────────────────────────────────────────────────────────────────────
ENV_PUPPET = "PUPPET"
ENV_ENDPOINT = "CHROME_BIN"
ENV_PUPPET_TOKEN = "PUPPET_TOKEN"
ENV_BOT_NAME = "BOT_NAME"
ENV_FIXED_REPLY = "FIXED_REPLY"
ENV_LOG_LEVEL = "LOG_LEVEL"

# ──────────────────────────────────────────────────────────────────────
# Artifacts (relative to the working directory)
# ──────────────────────────────────────────────────────────────────────
LINKS_FILENAME = "{bot_name}-links.txt"
RAW_DUMP_FILENAME = "{bot_name}-raw-{suffix}.log"
MEMORY_CARD_FILENAME = "{bot_name}.memory-card.json"
RAW_DUMP_HEADER = "\n=== RAW MSG {timestamp} ===\n"

# First http(s) token, up to whitespace or a quote
URL_PATTERN = re.compile(r"https?://[^\s'\"]+")

# ──────────────────────────────────────────────────────────────────────
# Login
# ──────────────────────────────────────────────────────────────────────
QR_VIEWER_URL = "https://api.qrserver.com/v1/create-qr-code/?data="
NO_TEXT_PLACEHOLDER = "[no text]"
