import pytest
import requests
from scribe.core.common.enums import ModelTier
from scribe.core.config.settings import settings
from scribe.core.errors import TranscriptionFailed
from scribe.features.transcription.data.openai_adapter import OpenAITranscriptionAdapter
from scribe.features.transcription.domain.models import ProviderRequest


class FakeResponse:
    def __init__(self, payload=None, status=200, text=""):
        self.payload = payload
        self.status_code = status
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.payload is None:
            raise ValueError("not json")
        return self.payload


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def post(self, url, headers=None, data=None, files=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "data": data, "files": files, "timeout": timeout})
        return self.response


@pytest.fixture
def audio(tmp_path):
    path = tmp_path / "chunk.mp3"
    path.write_bytes(b"ID3")
    return path

def make_adapter(session):
    return OpenAITranscriptionAdapter(
        api_key="sk-test",
        api_url="https://stt.example/v1/",
        model_name="whisper-1",
        timeout_seconds=30,
        session=session
    )

def test_multipart_request(audio):
    session = FakeSession(FakeResponse({"text": "hi", "segments": []}))
    payload = make_adapter(session).transcribe(
        ProviderRequest(audio_file=audio, model=ModelTier.BASE, temperature=0.4, language="en")
    )

    assert payload == {"text": "hi", "segments": []}
    call = session.calls[0]
    assert call["url"] == "https://stt.example/v1/audio/transcriptions"
    assert call["headers"] == {"Authorization": "Bearer sk-test"}
    assert call["data"]["response_format"] == "verbose_json"
    assert call["data"]["language"] == "en"
    assert call["data"]["temperature"] == "0.4"
    assert call["timeout"] == 30
    assert call["files"]["file"][0] == "chunk.mp3"

def test_language_omitted_on_auto(audio):
    session = FakeSession(FakeResponse({"text": "hi"}))
    make_adapter(session).transcribe(ProviderRequest(audio_file=audio, model=ModelTier.BASE, temperature=0.0))
    assert "language" not in session.calls[0]["data"]

def test_plain_text_body_is_returned_as_is(audio):
    session = FakeSession(FakeResponse(payload=None, text="plain transcript"))
    result = make_adapter(session).transcribe(ProviderRequest(audio_file=audio, model=ModelTier.BASE, temperature=0.0))
    assert result == "plain transcript"

def test_http_error_is_transcription_failed(audio):
    session = FakeSession(FakeResponse(status=503))
    with pytest.raises(TranscriptionFailed):
        make_adapter(session).transcribe(ProviderRequest(audio_file=audio, model=ModelTier.BASE, temperature=0.0))

def test_missing_key_is_a_configuration_error(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "")
    with pytest.raises(ValueError):
        OpenAITranscriptionAdapter(api_key="", session=FakeSession(None))
