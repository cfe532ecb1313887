"""Runtime configuration loader for libot.

Reads the bot settings from the process environment once (after
populating it from ``.env``) and freezes them into a ``BotConfig``.
The config object is passed explicitly to the components that need
it; nothing inside the message pipeline reads ``os.environ``.

Empty values count as unset, so ``FIXED_REPLY=`` in ``.env`` falls
back to the built-in reply exactly like a missing key does.
"""

from __future__ import annotations

import os
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from libot.constants import (
    DEFAULT_BOT_NAME,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PUPPET,
    DEFAULT_REPLY,
    ENV_BOT_NAME,
    ENV_ENDPOINT,
    ENV_FIXED_REPLY,
    ENV_LOG_LEVEL,
    ENV_PUPPET,
    ENV_PUPPET_TOKEN,
    LINKS_FILENAME,
    MEMORY_CARD_FILENAME,
    RAW_DUMP_FILENAME,
)


def env_or_default(
    env: Mapping[str, str], name: str, fallback: str | None
) -> str | None:
    """Return ``env[name]`` unless it is missing or empty."""
    value = env.get(name)
    return value if value else fallback


@dataclass(frozen=True)
class BotConfig:
    """Immutable bot settings, loaded once at startup."""

    puppet: str = DEFAULT_PUPPET
    endpoint: str | None = None
    puppet_token: str | None = None
    bot_name: str = DEFAULT_BOT_NAME
    fixed_reply: str = DEFAULT_REPLY
    log_level: str = DEFAULT_LOG_LEVEL
    base_dir: Path = field(default_factory=Path.cwd)

    @property
    def links_file(self) -> Path:
        """Append-only log of URLs seen in direct messages."""
        return self.base_dir / LINKS_FILENAME.format(bot_name=self.bot_name)

    @property
    def memory_card_file(self) -> Path:
        """Where the puppet keeps its login session (never touched here)."""
        return self.base_dir / MEMORY_CARD_FILENAME.format(bot_name=self.bot_name)

    def raw_dump_file(self, message_id: str | None = None) -> Path:
        """Debug dump path for one message, keyed by id or epoch millis."""
        suffix = message_id or str(int(time.time() * 1000))
        return self.base_dir / RAW_DUMP_FILENAME.format(
            bot_name=self.bot_name, suffix=suffix
        )


def parse_config(
    env: Mapping[str, str], base_dir: Path | None = None
) -> BotConfig:
    """Build a BotConfig from an environment mapping."""
    return BotConfig(
        puppet=env_or_default(env, ENV_PUPPET, DEFAULT_PUPPET),
        endpoint=env_or_default(env, ENV_ENDPOINT, None),
        puppet_token=env_or_default(env, ENV_PUPPET_TOKEN, None),
        bot_name=env_or_default(env, ENV_BOT_NAME, DEFAULT_BOT_NAME),
        fixed_reply=env_or_default(env, ENV_FIXED_REPLY, DEFAULT_REPLY),
        log_level=env_or_default(env, ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper(),
        base_dir=(base_dir or Path.cwd()).resolve(),
    )


def load_config(*, dotenv: bool = True) -> BotConfig:
    """Load the BotConfig from the process environment.

    Args:
        dotenv: Populate os.environ from a ``.env`` file first
                (existing variables win).
    """
    if dotenv:
        from dotenv import load_dotenv

        load_dotenv()

    config = parse_config(os.environ)
    logger.debug(
        f"Config loaded: bot={config.bot_name}, puppet={config.puppet}, "
        f"endpoint={'set' if config.endpoint else 'unset'}"
    )
    return config
