# File: scribe/features/transcription/domain/models.py
import math
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Dict, Any

from scribe.core.common.enums import ModelTier, Accuracy

AUTO_LANGUAGE = "auto"

# Monotonic: higher accuracy means more deterministic decoding
ACCURACY_TEMPERATURE = {
    Accuracy.HIGH: 0.0,
    Accuracy.MEDIUM: 0.4,
    Accuracy.LOW: 0.8,
}

def new_task_id() -> str:
    return f"audio_{uuid.uuid4().hex}"

@dataclass(frozen=True)
class TranscriptionSettings:
    """
    User-chosen knobs for one request. Immutable.
    """
    model: ModelTier = ModelTier.BASE
    language: str = AUTO_LANGUAGE
    accuracy: Accuracy = Accuracy.MEDIUM

    @property
    def temperature(self) -> float:
        return ACCURACY_TEMPERATURE[self.accuracy]

    @property
    def language_hint(self) -> Optional[str]:
        """The language code to send to the provider, or None to auto-detect."""
        if not self.language or self.language.lower() == AUTO_LANGUAGE:
            return None
        return self.language

    def to_dict(self) -> Dict[str, Any]:
        return {"model": self.model.value, "language": self.language, "accuracy": self.accuracy.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TranscriptionSettings":
        return cls(
            model=ModelTier(data.get("model", ModelTier.BASE.value)),
            language=data.get("language") or AUTO_LANGUAGE,
            accuracy=Accuracy(data.get("accuracy", Accuracy.MEDIUM.value)),
        )

@dataclass(frozen=True)
class Segment:
    """
    A timed sub-span of a transcript. Times are chunk-relative until aggregated.
    """
    start: float
    end: float
    text: str

    def __post_init__(self):
        if not (math.isfinite(self.start) and math.isfinite(self.end)):
            raise ValueError(f"Segment bounds must be finite, got [{self.start}, {self.end}]")
        if self.end <= self.start:
            raise ValueError(f"Segment end ({self.end}) must be greater than start ({self.start})")

    def shifted(self, offset: float) -> "Segment":
        return Segment(start=self.start + offset, end=self.end + offset, text=self.text)

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start, "end": self.end, "text": self.text}

@dataclass(frozen=True)
class Transcript:
    """
    Normalized text, optional timed segments and detected language
    for one unit of audio (a chunk or the whole file).
    """
    text: str
    segments: List[Segment] = field(default_factory=list)
    language: str = "unknown"
    task_id: str = field(default_factory=new_task_id)

    @property
    def last_segment_end(self) -> Optional[float]:
        if not self.segments:
            return None
        return self.segments[-1].end

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "segments": [s.to_dict() for s in self.segments],
            "language": self.language,
            "task_id": self.task_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transcript":
        return cls(
            text=data.get("text", ""),
            segments=[Segment(float(s["start"]), float(s["end"]), s.get("text", "")) for s in data.get("segments", [])],
            language=data.get("language") or "unknown",
            task_id=data.get("task_id") or new_task_id(),
        )

@dataclass(frozen=True)
class ProviderRequest:
    """
    What goes over the speech-to-text boundary.
    language is None when the provider should auto-detect.
    """
    audio_file: Path
    model: ModelTier
    temperature: float
    language: Optional[str] = None
