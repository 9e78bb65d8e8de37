from abc import ABC, abstractmethod
from typing import Any
from .models import ProviderRequest

class ISpeechToText(ABC):
    """
    Contract for any ASR (Automatic Speech Recognition) engine.
    Local Whisper and hosted HTTP endpoints both sit behind it.
    """
    @abstractmethod
    def transcribe(self, request: ProviderRequest) -> Any:
        """
        Transcribes request.audio_file.

        Returns:
            The provider's raw payload. Shapes vary per engine and are
            normalized by the response parser, not here.
        """
        pass
