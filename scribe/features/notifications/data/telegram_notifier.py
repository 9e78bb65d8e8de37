import logging
import requests
from typing import Optional

from scribe.core.config.settings import settings
from ..domain.interfaces import INotifier

logger = logging.getLogger(__name__)

class TelegramNotifier(INotifier):
    """
    Sends messages through the Telegram Bot API. user_id is the chat id.
    """

    def __init__(self, token: Optional[str] = None, api_url: Optional[str] = None,
                 timeout_seconds: float = 15, session: Optional[requests.Session] = None):
        self.token = token or settings.TELEGRAM_BOT_TOKEN
        if not self.token:
            raise ValueError("TELEGRAM_BOT_TOKEN is not configured.")
        self.api_url = (api_url or settings.TELEGRAM_API_URL).rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def notify(self, user_id: str, message: str) -> None:
        response = self.session.post(
            f"{self.api_url}/bot{self.token}/sendMessage",
            json={"chat_id": user_id, "text": message},
            timeout=self.timeout_seconds
        )
        response.raise_for_status()
        logger.debug(f"Telegram message delivered to {user_id} ({len(message)} chars)")
