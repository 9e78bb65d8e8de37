# File: scribe/features/transcription/data/openai_adapter.py
import logging
import requests
from typing import Optional

from scribe.core.config.settings import settings
from scribe.core.errors import TranscriptionFailed
from ..domain.interfaces import ISpeechToText
from ..domain.models import ProviderRequest

logger = logging.getLogger(__name__)

class OpenAITranscriptionAdapter(ISpeechToText):
    """
    Hosted `/audio/transcriptions` endpoint (OpenAI-compatible).
    The tier is not sent: the endpoint serves a single configured model.
    """

    def __init__(self, api_key: Optional[str] = None, api_url: Optional[str] = None,
                 model_name: Optional[str] = None, timeout_seconds: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.api_key = api_key or settings.OPENAI_API_KEY
        self.api_url = (api_url or settings.OPENAI_API_URL).rstrip("/")
        self.model_name = model_name or settings.OPENAI_TRANSCRIPTION_MODEL
        self.timeout_seconds = timeout_seconds or settings.PROVIDER_TIMEOUT_SECONDS
        self.session = session or requests.Session()

        if not self.api_key:
            raise ValueError("OPENAI_API_KEY is not configured.")

    def transcribe(self, request: ProviderRequest):
        data = {
            "model": self.model_name,
            "response_format": "verbose_json",
            "temperature": str(request.temperature),
        }
        if request.language:
            data["language"] = request.language

        logger.info(f"Uploading {request.audio_file.name} to {self.api_url}/audio/transcriptions ({self.model_name})")

        try:
            with open(request.audio_file, "rb") as f:
                response = self.session.post(
                    f"{self.api_url}/audio/transcriptions",
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    data=data,
                    files={"file": (request.audio_file.name, f)},
                    timeout=self.timeout_seconds
                )
            response.raise_for_status()
        except requests.RequestException as e:
            raise TranscriptionFailed(cause=e) from e

        try:
            return response.json()
        except ValueError:
            # Some compatible servers answer text/plain
            return response.text
