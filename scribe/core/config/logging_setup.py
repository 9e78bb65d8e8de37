# File: scribe/core/config/logging_setup.py

import logging
from .settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = None) -> None:
    """Root logging setup for entry points (workers, scripts)."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    # Chatty third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
