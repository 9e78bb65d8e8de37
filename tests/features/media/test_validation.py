import pytest
from pathlib import Path
from scribe.core.errors import UnsupportedFormat, FileTooLarge
from scribe.features.media.domain.models import ResolvedMedia
from scribe.features.media.service.validation import MediaValidator

FORMATS = ("mp3", "mp4", "mpeg", "mpga", "m4a", "ogg", "oga", "wav", "webm")

@pytest.fixture
def validator():
    return MediaValidator(FORMATS, max_bytes=100 * 1024 * 1024)

@pytest.mark.parametrize("name", ["a.mp3", "b.OGG", "c.oga", "d.webm", "e.m4a", "f.wav"])
def test_allow_listed_formats_pass(validator, name):
    validator.check(ResolvedMedia(path=Path(f"/tmp/{name}"), size_bytes=10))

@pytest.mark.parametrize("name", ["a.txt", "b.flac", "c.avi", "noext"])
def test_other_formats_are_rejected(validator, name):
    with pytest.raises(UnsupportedFormat):
        validator.check(ResolvedMedia(path=Path(f"/tmp/{name}"), size_bytes=10))

def test_size_limit(validator):
    limit = 100 * 1024 * 1024
    validator.check(ResolvedMedia(path=Path("/tmp/a.mp3"), size_bytes=limit))

    with pytest.raises(FileTooLarge) as exc:
        validator.check(ResolvedMedia(path=Path("/tmp/a.mp3"), size_bytes=limit + 1))
    assert exc.value.limit_bytes == limit

def test_empty_file_is_rejected(validator):
    with pytest.raises(UnsupportedFormat):
        validator.check(ResolvedMedia(path=Path("/tmp/a.mp3"), size_bytes=0))

def test_reference_precheck(validator):
    validator.check_reference("https://files.example/voice.ogg?sig=abc")
    # No extension: decided after resolution
    validator.check_reference("https://files.example/file/12345")

    with pytest.raises(UnsupportedFormat):
        validator.check_reference("https://files.example/notes.pdf?x=1")

def test_size_predicate_matches_check(validator):
    limit = 100 * 1024 * 1024
    assert validator.is_valid_size(1)
    assert validator.is_valid_size(limit)
    assert not validator.is_valid_size(0)
    assert not validator.is_valid_size(limit + 1)
