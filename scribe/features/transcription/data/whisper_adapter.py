# File: scribe/features/transcription/data/whisper_adapter.py
import whisper
import logging
from typing import Optional
from scribe.core.common.enums import ModelTier
from scribe.core.config.settings import settings
from scribe.core.model_lifecycle.orchestrator import ModelOrchestrator
from scribe.core.model_lifecycle.types import ModelType
from ..domain.interfaces import ISpeechToText
from ..domain.models import ProviderRequest

logger = logging.getLogger(__name__)

# Tier -> Whisper checkpoint name
WHISPER_CHECKPOINTS = {
    ModelTier.TINY: "tiny",
    ModelTier.BASE: "base",
    ModelTier.SMALL: "small",
    ModelTier.MEDIUM: "medium",
    ModelTier.LARGE: "large-v3",
}

class WhisperAdapter(ISpeechToText):
    def __init__(self, device: Optional[str] = None):
        self.orchestrator = ModelOrchestrator()
        self.device = device or settings.WHISPER_DEVICE

    def transcribe(self, request: ProviderRequest) -> dict:
        checkpoint = WHISPER_CHECKPOINTS[request.model]
        logger.info(f"Requesting Whisper ({checkpoint}) for {request.audio_file}...")

        def loader():
            logger.debug(f"Loading Whisper {checkpoint} onto {self.device}...")
            return whisper.load_model(checkpoint, device=self.device)

        model = self.orchestrator.request_model(ModelType.WHISPER, checkpoint, loader)

        options = {
            "fp16": self.device == "cuda",
            "temperature": request.temperature,
        }
        if request.language:
            options["language"] = request.language

        # Raw dict: {"text", "segments": [{"start", "end", "text", ...}], "language"}
        return model.transcribe(str(request.audio_file), **options)
