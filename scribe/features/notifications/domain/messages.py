# File: scribe/features/notifications/domain/messages.py
"""
User-facing texts sent during a transcription run.
"""

from typing import List

# Chat platforms cap a single message at 4096 characters
MAX_MESSAGE_LENGTH = 4000


def started() -> str:
    return "🎧 Starting audio transcription..."


def charged(amount: int, balance: int) -> str:
    return f"💰 Charged {amount} credits. Remaining balance: {balance}."


def split_into_parts(count: int) -> str:
    return f"✂️ The audio is long, so it was split into {count} parts."


def processing_part(number: int, total: int) -> str:
    return f"⏳ Processing part {number} of {total}..."


def insufficient_funds(required: int, available: int) -> str:
    return (
        f"❌ Insufficient funds: this transcription costs {required} credits, "
        f"your balance is {available}. Please top up and try again."
    )


def failed(reason: str) -> str:
    return f"❌ An error occurred while processing the audio: {reason}"


def cancelled() -> str:
    return "🛑 Transcription cancelled."


def completed(task_id: str, language: str) -> str:
    return f"✅ Transcription complete (language: {language}, task: {task_id})."


def split_text(text: str, limit: int = MAX_MESSAGE_LENGTH) -> List[str]:
    """
    Cuts a long transcript into messages of at most `limit` characters,
    preferring whitespace boundaries.
    """
    if limit <= 0:
        raise ValueError(f"Message limit must be positive: {limit}")

    text = text.strip()
    if not text:
        return []

    parts = []
    while len(text) > limit:
        cut = text.rfind(" ", 0, limit + 1)
        if cut <= 0:
            cut = limit
        parts.append(text[:cut].rstrip())
        text = text[cut:].lstrip()
    if text:
        parts.append(text)
    return parts
