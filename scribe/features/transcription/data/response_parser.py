# File: scribe/features/transcription/data/response_parser.py
"""
Tagged-union parser for speech-to-text payloads.

Shapes are tried in a fixed priority order and the first match wins:

    1. "text"
    2. ["text", "text", ...]
    3. {"output": <any shape>}
    4. {"text": "...", "segments"?: [...], "language"?: "..."}
    5. {"segments": [...]}

Anything else raises ResponseShapeError. Nothing is coerced silently.
"""

import logging
import math
from typing import Any, List, Optional, Tuple

from scribe.core.errors import ResponseShapeError
from ..domain.models import Segment, Transcript

logger = logging.getLogger(__name__)

MAX_DEPTH = 4


def parse_transcript(payload: Any) -> Transcript:
    return _parse(payload, depth=0, root=payload)


def _parse(payload: Any, depth: int, root: Any) -> Transcript:
    if depth > MAX_DEPTH:
        raise ResponseShapeError(root)

    # 1. Plain string
    if isinstance(payload, str):
        return Transcript(text=payload.strip())

    # 2. Array of strings
    if isinstance(payload, list) and payload and all(isinstance(p, str) for p in payload):
        return Transcript(text=" ".join(p.strip() for p in payload if p.strip()))

    if isinstance(payload, dict):
        language = _language(payload)

        # 3. Wrapped output
        if "output" in payload and payload["output"] is not None:
            inner = _parse(payload["output"], depth + 1, root)
            if language and inner.language == "unknown":
                return Transcript(text=inner.text, segments=inner.segments, language=language)
            return inner

        # 4. Text with optional segments
        if isinstance(payload.get("text"), str):
            segments = _segments(payload.get("segments"), root) if payload.get("segments") else []
            return Transcript(text=payload["text"].strip(), segments=segments, language=language or "unknown")

        # 5. Segments only
        if isinstance(payload.get("segments"), list):
            segments = _segments(payload["segments"], root)
            text = " ".join(s.text for s in segments if s.text)
            return Transcript(text=text, segments=segments, language=language or "unknown")

    raise ResponseShapeError(root)


def _language(payload: dict) -> Optional[str]:
    lang = payload.get("language")
    if isinstance(lang, str) and lang.strip():
        return lang.strip()
    return None


def _segments(raw: Any, root: Any) -> List[Segment]:
    if not isinstance(raw, list):
        raise ResponseShapeError(root)

    segments = []
    dropped = 0
    for item in raw:
        bounds = _bounds(item)
        if bounds is None:
            raise ResponseShapeError(root)

        start, end = bounds
        if end <= start:
            dropped += 1
            continue
        segments.append(Segment(start=start, end=end, text=str(item.get("text", "")).strip()))

    if dropped:
        logger.warning(f"Dropped {dropped} zero-length or inverted segment(s) from provider response.")
    return segments


def _bounds(item: Any) -> Optional[Tuple[float, float]]:
    if not isinstance(item, dict):
        return None
    try:
        start, end = float(item["start"]), float(item["end"])
    except (KeyError, TypeError, ValueError):
        return None
    # nan and inf parse as floats but are not timestamps
    if not (math.isfinite(start) and math.isfinite(end)) or start < 0:
        return None
    return start, end
