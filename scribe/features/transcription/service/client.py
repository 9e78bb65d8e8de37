import logging
from pathlib import Path

from scribe.core.errors import TranscriptionFailed, ResponseShapeError
from ..data.response_parser import parse_transcript
from ..domain.interfaces import ISpeechToText
from ..domain.models import ProviderRequest, Transcript, TranscriptionSettings

logger = logging.getLogger(__name__)

class TranscriptionClient:
    """
    Calls the speech-to-text provider for one audio file and normalizes
    the answer into a Transcript.
    """

    def __init__(self, provider: ISpeechToText):
        self.provider = provider

    def build_request(self, file_path: Path, settings: TranscriptionSettings) -> ProviderRequest:
        return ProviderRequest(
            audio_file=Path(file_path),
            model=settings.model,
            temperature=settings.temperature,
            language=settings.language_hint
        )

    def transcribe(self, file_path: Path, settings: TranscriptionSettings, window=None) -> Transcript:
        """
        Raises:
            TranscriptionFailed: provider error or unrecognized response, tagged with the window.
        """
        request = self.build_request(file_path, settings)
        where = f"chunk {window.index}" if window is not None else "full media"

        try:
            raw = self.provider.transcribe(request)
        except TranscriptionFailed as e:
            if window is not None and e.window is None:
                raise TranscriptionFailed(window=window, cause=e.cause or e, retryable=e.retryable) from e
            raise
        except Exception as e:
            logger.warning(f"Provider failed on {where} ({file_path}): {e}")
            raise TranscriptionFailed(window=window, cause=e) from e

        try:
            transcript = parse_transcript(raw)
        except ResponseShapeError as e:
            logger.error(f"Provider answered an unknown shape for {where}: {e}")
            raise TranscriptionFailed(window=window, cause=e, retryable=False) from e

        logger.info(f"Transcribed {where}: {len(transcript.text)} chars, "
                    f"{len(transcript.segments)} segments, language={transcript.language}")
        return transcript
