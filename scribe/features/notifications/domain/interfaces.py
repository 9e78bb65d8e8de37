from abc import ABC, abstractmethod

class INotifier(ABC):
    """
    Contract for delivering a text message to a user (chat bot, log, e-mail...).
    Implementations may raise; callers treat delivery as best-effort.
    """
    @abstractmethod
    def notify(self, user_id: str, message: str) -> None:
        pass
