import logging
import sys
from typing import Optional

from launchspec.local.config import effective_settings as config

LOG_FORMAT = '%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s'


class MainFormatter(logging.Formatter):
    """A formatter that keeps console lines short for the console's own logger."""

    def format(self, record):
        # The console logger talks to the user; skip the timestamp noise.
        if record.name == 'console':
            return f"{record.levelname}: {record.getMessage()}"
        return super().format(record)


def _console_handler() -> Optional[logging.Handler]:
    for handler in logging.getLogger().handlers:
        if getattr(handler, 'name', None) == 'console':
            return handler
    return None


def set_console_level(level: int) -> None:
    """Changes the level of the console handler installed by setup_logging."""
    handler = _console_handler()
    if handler is not None:
        handler.setLevel(level)


def setup_logging(console_level: int = logging.INFO) -> None:
    """
    Configures the root logger for the tooling.
    This sets up a console handler and optionally a file handler,
    clearing any previously configured handlers to prevent duplication.

    :param console_level: The logging level for the console output (e.g., logging.INFO).
    """
    root_logger = logging.getLogger()
    # Set root level to lowest to capture all messages for handler filtering
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers to prevent re-adding them on re-runs
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    # --- Console Handler ---
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name('console')
    console_handler.setLevel(console_level)
    console_handler.setFormatter(MainFormatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    # --- File Handler (conditional) ---
    if config.LOG_TO_FILE:
        try:
            config.LOG_FILE_PATH.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(config.LOG_FILE_PATH, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.error(f"Failed to initialize file logging handler: {e}. Logging to file will be disabled.")
