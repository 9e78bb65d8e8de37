# File: scribe/features/workflow/domain/models.py
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any, Tuple
from uuid import UUID

from scribe.core.common.enums import FailureReason
from scribe.core.jobs.types import WorkflowState
from scribe.features.billing.domain.models import BillingOutcome
from scribe.features.transcription.domain.models import Transcript, TranscriptionSettings

@dataclass(frozen=True)
class TranscriptionRequest:
    """
    Immutable input of a run, as submitted by the user.
    duration: pre-known length in seconds (e.g. from the chat platform), if any.
    """
    user_id: str
    media_ref: str
    settings: TranscriptionSettings = field(default_factory=TranscriptionSettings)
    duration: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "media_ref": self.media_ref,
            "settings": self.settings.to_dict(),
            "duration": self.duration,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TranscriptionRequest":
        return cls(
            user_id=str(data["user_id"]),
            media_ref=data["media_ref"],
            settings=TranscriptionSettings.from_dict(data.get("settings") or {}),
            duration=data.get("duration"),
        )

@dataclass(frozen=True)
class WorkflowOutcome:
    """
    Terminal (or current) view of a run, as returned to callers.
    """
    run_id: UUID
    state: WorkflowState
    transcript: Optional[Transcript] = None
    billing: Optional[BillingOutcome] = None
    duration_seconds: Optional[float] = None
    window_count: int = 0
    failure_reason: Optional[FailureReason] = None
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state == WorkflowState.COMPLETED

@dataclass(frozen=True)
class WorkflowConfig:
    """
    Limits and policies of the workflow. Built once from Settings and injected.
    """
    temp_dir: Path
    max_upload_bytes: int = 100 * 1024 * 1024
    max_window_seconds: float = 600.0
    fallback_duration_seconds: float = 300.0
    supported_formats: Tuple[str, ...] = ("mp3", "mp4", "mpeg", "mpga", "m4a", "ogg", "oga", "wav", "webm")
    step_max_attempts: int = 3
    retry_backoff_seconds: float = 1.0
    refund_on_failure: bool = False
    aggregate_offset_mode: str = "segment_end"

    @classmethod
    def from_settings(cls, settings) -> "WorkflowConfig":
        return cls(
            temp_dir=Path(settings.TEMP_DIR),
            max_upload_bytes=settings.MAX_UPLOAD_BYTES,
            max_window_seconds=settings.MAX_WINDOW_SECONDS,
            fallback_duration_seconds=settings.FALLBACK_DURATION_SECONDS,
            supported_formats=tuple(settings.SUPPORTED_FORMATS),
            step_max_attempts=settings.STEP_MAX_ATTEMPTS,
            retry_backoff_seconds=settings.RETRY_BACKOFF_SECONDS,
            refund_on_failure=settings.REFUND_ON_FAILURE,
            aggregate_offset_mode=settings.AGGREGATE_OFFSET_MODE,
        )
