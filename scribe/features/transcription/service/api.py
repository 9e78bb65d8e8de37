from pathlib import Path
from scribe.core.common.enums import ModelTier, Accuracy
from ..data.whisper_adapter import WhisperAdapter
from ..domain.models import Transcript, TranscriptionSettings
from .client import TranscriptionClient

def run_transcription(audio_path: str, model: str = "base", language: str = "auto",
                      accuracy: str = "medium") -> Transcript:
    """
    Standalone API for running transcription directly on local Whisper.
    Useful for testing or CLI tools without billing or the workflow tables.
    """
    settings = TranscriptionSettings(model=ModelTier(model), language=language, accuracy=Accuracy(accuracy))
    return TranscriptionClient(WhisperAdapter()).transcribe(Path(audio_path), settings)
