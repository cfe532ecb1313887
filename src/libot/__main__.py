"""``python -m libot`` / ``wechat-libot`` entry point."""

import sys

from loguru import logger

from libot.app import Application
from libot.config import load_config


def main() -> None:
    config = load_config()

    logger.remove()
    logger.add(sys.stderr, level=config.log_level)

    try:
        Application(config).run()
    except Exception as exc:
        logger.error(f"Failed to start {config.bot_name}: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
