import logging
from ..domain.interfaces import INotifier

logger = logging.getLogger(__name__)

class LoggingNotifier(INotifier):
    """Writes notifications to the log. Used when no bot is configured."""

    def notify(self, user_id: str, message: str) -> None:
        logger.info(f"[notify {user_id}] {message}")
