# Centralized logging configuration for the rocketgate_dispatch package.

import logging
import sys

from rocketgate_dispatch.core.events import EVENTS_LOGGER_NAME
from rocketgate_dispatch.settings import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Default level if LOG_LEVEL env var is not set
DEFAULT_LOG_LEVEL = "INFO"

# Gateway events include base64 response bodies; they stay hidden unless asked for.
DEFAULT_EVENT_LOG_LEVEL = "WARNING"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# httpx logs every request line at INFO
NOISY_LIBRARIES = ["httpx", "httpcore"]


def _checked_level(level_name: str, variable: str, default: str) -> str:
    if level_name in VALID_LOG_LEVELS:
        return level_name
    print(
        f"WARNING: Invalid {variable} '{level_name}'. "
        f"Defaulting to {default}. "
        f"Valid levels are: {', '.join(VALID_LOG_LEVELS)}",
        file=sys.stderr,
    )
    return default


def setup_logging():
    """
    Configures logging for the gateway client.

    The root level comes from LOG_LEVEL (default INFO) and the gateway event
    logger's level from ROCKETGATE_EVENT_LOG_LEVEL (default WARNING). Invalid
    values fall back to the defaults with a warning on stderr. Logs go to
    stderr, and httpx/httpcore are held at WARNING.
    """
    settings = Settings()
    log_level_name = _checked_level(
        settings.get_log_level(default=DEFAULT_LOG_LEVEL), "LOG_LEVEL", DEFAULT_LOG_LEVEL
    )
    event_level_name = _checked_level(
        settings.get_event_log_level(default=DEFAULT_EVENT_LOG_LEVEL),
        "ROCKETGATE_EVENT_LOG_LEVEL",
        DEFAULT_EVENT_LOG_LEVEL,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.getLevelName(log_level_name))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    for lib_name in NOISY_LIBRARIES:
        logging.getLogger(lib_name).setLevel(logging.WARNING)

    logging.getLogger(EVENTS_LOGGER_NAME).setLevel(logging.getLevelName(event_level_name))

    logging.getLogger(__name__).info(
        f"Logging configured with level {log_level_name} (gateway events at {event_level_name})."
    )
