import logging
from concurrent.futures import ThreadPoolExecutor, Future, wait
from threading import Lock
from typing import List

from ..domain.interfaces import INotifier

logger = logging.getLogger(__name__)

class NotificationDispatcher:
    """
    Fire-and-forget delivery.
    Messages go out on a single background worker, so per-user order is kept,
    and a failing notifier never affects the run that sent the message.
    """

    def __init__(self, notifier: INotifier, max_workers: int = 1):
        self.notifier = notifier
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notify")
        self._pending: List[Future] = []
        self._lock = Lock()

    def send(self, user_id: str, message: str) -> Future:
        future = self._executor.submit(self._deliver, user_id, message)
        with self._lock:
            self._pending = [f for f in self._pending if not f.done()]
            self._pending.append(future)
        return future

    def send_many(self, user_id: str, messages: List[str]) -> None:
        for message in messages:
            self.send(user_id, message)

    def _deliver(self, user_id: str, message: str) -> bool:
        try:
            self.notifier.notify(user_id, message)
            return True
        except Exception as e:
            logger.warning(f"Notification to {user_id} failed: {e}")
            return False

    def flush(self, timeout: float = 30) -> None:
        """Blocks until every message sent so far was attempted."""
        with self._lock:
            pending = list(self._pending)
        wait(pending, timeout=timeout)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
