# File: scribe/features/media/domain/models.py
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any

from scribe.core.shared_types import MediaFile, TimeRange

@dataclass(frozen=True)
class Window:
    """
    A contiguous [start, end) span of the original media, assigned to one chunk.
    """
    index: int
    start: float
    end: float

    def __post_init__(self):
        if self.index < 0:
            raise ValueError(f"Window index cannot be negative: {self.index}")
        if self.start < 0:
            raise ValueError(f"Window start cannot be negative: {self.start}")
        if self.end <= self.start:
            raise ValueError(f"Window end ({self.end}) must be greater than start ({self.start})")

    @property
    def duration(self) -> float:
        return self.end - self.start

    def as_time_range(self) -> TimeRange:
        return TimeRange(start_seconds=self.start, end_seconds=self.end)

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "start": self.start, "end": self.end}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Window":
        return cls(index=int(data["index"]), start=float(data["start"]), end=float(data["end"]))

@dataclass(frozen=True)
class ChunkArtifact:
    """
    A materialized sub-file covering exactly one Window.
    Owned by a single run; deleted once its transcript is recorded.
    """
    window: Window
    file_path: Path

@dataclass(frozen=True)
class ResolvedMedia:
    """
    A media reference resolved to a readable local file.
    temporary=True means the store created the file and the run must delete it.
    """
    path: Path
    size_bytes: int
    temporary: bool = False

    @property
    def extension(self) -> str:
        return self.path.suffix.lower().lstrip(".")

@dataclass(frozen=True)
class ProbeResult:
    seconds: float
    estimated: bool = False

@dataclass(frozen=True)
class CutRequest:
    source: MediaFile
    output: MediaFile
    time_range: TimeRange
