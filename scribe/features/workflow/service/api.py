from typing import Optional, List
from uuid import UUID

from scribe.core.common.enums import ModelTier, Accuracy
from scribe.core.config.settings import settings
from scribe.core.jobs.data.repository import SqlRunRepository
from scribe.features.billing.data.ledger import SqlLedger
from scribe.features.billing.domain.models import PriceTable
from scribe.features.billing.service.price_gate import PriceGate
from scribe.features.media.data.ffmpeg_adapter import FFprobeAdapter, FFmpegSplitAdapter
from scribe.features.media.data.http_store import HttpMediaStore
from scribe.features.media.data.local_store import LocalMediaStore, RoutingMediaStore
from scribe.features.media.service.extractor import ChunkExtractor
from scribe.features.media.service.probe import DurationProbe
from scribe.features.notifications.data.logging_notifier import LoggingNotifier
from scribe.features.notifications.domain.interfaces import INotifier
from scribe.features.notifications.service.dispatcher import NotificationDispatcher
from scribe.features.transcription.data.repository import SqlTranscriptRepository
from scribe.features.transcription.domain.interfaces import ISpeechToText
from scribe.features.transcription.domain.models import TranscriptionSettings
from scribe.features.transcription.service.client import TranscriptionClient
from ..domain.models import TranscriptionRequest, WorkflowOutcome, WorkflowConfig
from .orchestrator import WorkflowOrchestrator


_orchestrator: Optional[WorkflowOrchestrator] = None


def _default_provider() -> ISpeechToText:
    """
    Lazy imports: whisper/torch are only loaded when the local provider is used.
    """
    if settings.STT_PROVIDER == "whisper":
        from scribe.features.transcription.data.whisper_adapter import WhisperAdapter
        return WhisperAdapter()
    elif settings.STT_PROVIDER == "openai":
        from scribe.features.transcription.data.openai_adapter import OpenAITranscriptionAdapter
        return OpenAITranscriptionAdapter()

    raise NotImplementedError(f"Unknown STT_PROVIDER: '{settings.STT_PROVIDER}'")


def _default_notifier() -> INotifier:
    if settings.TELEGRAM_BOT_TOKEN:
        from scribe.features.notifications.data.telegram_notifier import TelegramNotifier
        return TelegramNotifier()
    return LoggingNotifier()


def build_orchestrator(provider: Optional[ISpeechToText] = None,
                       notifier: Optional[INotifier] = None,
                       config: Optional[WorkflowConfig] = None) -> WorkflowOrchestrator:
    """
    Wires the production collaborators. Every argument overrides one of them.
    """
    config = config or WorkflowConfig.from_settings(settings)
    config.temp_dir.mkdir(parents=True, exist_ok=True)

    return WorkflowOrchestrator(
        runs=SqlRunRepository(),
        media_store=RoutingMediaStore(
            local=LocalMediaStore(),
            remote=HttpMediaStore(max_bytes=config.max_upload_bytes)
        ),
        probe=DurationProbe(
            FFprobeAdapter(),
            fallback_seconds=config.fallback_duration_seconds,
            max_attempts=config.step_max_attempts,
            backoff_seconds=config.retry_backoff_seconds
        ),
        extractor=ChunkExtractor(FFmpegSplitAdapter()),
        price_gate=PriceGate(SqlLedger(), PriceTable.from_settings(settings)),
        client=TranscriptionClient(provider or _default_provider()),
        notifier=NotificationDispatcher(notifier or _default_notifier()),
        config=config,
        transcripts=SqlTranscriptRepository()
    )


def get_orchestrator() -> WorkflowOrchestrator:
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = build_orchestrator()
    return _orchestrator


def submit_transcription(user_id: str, media_ref: str, model: str = "base", language: str = "auto",
                         accuracy: str = "medium", duration: Optional[float] = None) -> WorkflowOutcome:
    """
    Standalone API: accepts and runs one transcription request to completion.
    Validation errors (UnsupportedFormat, FileTooLarge, MediaNotFound) are raised.
    """
    request = TranscriptionRequest(
        user_id=str(user_id),
        media_ref=media_ref,
        settings=TranscriptionSettings(model=ModelTier(model), language=language, accuracy=Accuracy(accuracy)),
        duration=duration
    )
    return get_orchestrator().submit(request)


def cancel_transcription(run_id: UUID) -> bool:
    return get_orchestrator().cancel(run_id)


def resume_pending_runs() -> List[WorkflowOutcome]:
    return get_orchestrator().resume_pending()
