import pytest
from scribe.features.notifications.domain import messages
from scribe.features.notifications.data.telegram_notifier import TelegramNotifier
from scribe.features.notifications.service.dispatcher import NotificationDispatcher
from fakes import RecordingNotifier


def test_dispatcher_delivers_in_order():
    notifier = RecordingNotifier()
    dispatcher = NotificationDispatcher(notifier)

    dispatcher.send("42", "first")
    dispatcher.send_many("42", ["second", "third"])
    dispatcher.flush()

    assert notifier.messages == [("42", "first"), ("42", "second"), ("42", "third")]
    dispatcher.shutdown()

def test_dispatcher_swallows_notifier_failures():
    """
    A broken chat platform must never surface to the caller.
    """
    dispatcher = NotificationDispatcher(RecordingNotifier(fail=True))

    future = dispatcher.send("42", "hello")
    dispatcher.flush()

    assert future.result() is False
    dispatcher.shutdown()

def test_split_text_respects_limit_and_words():
    text = " ".join(["word"] * 3000)  # 14999 chars
    parts = messages.split_text(text, limit=4000)

    assert len(parts) == 4
    assert all(len(p) <= 4000 for p in parts)
    assert " ".join(parts) == text

def test_split_text_hard_cuts_unbroken_runs():
    parts = messages.split_text("x" * 9000, limit=4000)
    assert [len(p) for p in parts] == [4000, 4000, 1000]

def test_split_text_edge_cases():
    assert messages.split_text("   ") == []
    assert messages.split_text("short") == ["short"]
    with pytest.raises(ValueError):
        messages.split_text("a", limit=0)

def test_user_facing_texts_carry_numbers():
    text = messages.insufficient_funds(required=100, available=50)
    assert "100" in text and "50" in text
    assert "3" in messages.split_into_parts(3)
    assert "2 of 3" in messages.processing_part(2, 3)
    assert "audio_abc" in messages.completed("audio_abc", "en")


class FakeResponse:
    def __init__(self, status=200):
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise RuntimeError(f"HTTP {self.status}")


class FakeSession:
    def __init__(self, status=200):
        self.status = status
        self.posts = []

    def post(self, url, json=None, timeout=None):
        self.posts.append((url, json))
        return FakeResponse(self.status)


def test_telegram_send_message():
    session = FakeSession()
    TelegramNotifier(token="123:abc", api_url="https://tg.example/", session=session).notify("777", "hi")

    assert session.posts == [("https://tg.example/bot123:abc/sendMessage", {"chat_id": "777", "text": "hi"})]

def test_telegram_errors_propagate_to_dispatcher():
    notifier = TelegramNotifier(token="123:abc", session=FakeSession(status=500))
    with pytest.raises(RuntimeError):
        notifier.notify("777", "hi")

    dispatcher = NotificationDispatcher(notifier)
    assert dispatcher.send("777", "hi").result() is False
    dispatcher.shutdown()
