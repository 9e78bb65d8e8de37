import shutil
import subprocess
import pytest
from pathlib import Path

from scribe.features.media.data.ffmpeg_adapter import FFprobeAdapter, FFmpegSplitAdapter
from scribe.features.media.service.api import get_media_duration, cut_media
from scribe.features.media.service.extractor import ChunkExtractor
from scribe.features.media.service.planner import plan_windows

pytestmark = pytest.mark.skipif(
    shutil.which("ffmpeg") is None or shutil.which("ffprobe") is None,
    reason="ffmpeg/ffprobe not installed"
)

@pytest.fixture
def tone_file(tmp_path) -> Path:
    """
    Generates a 5-second sine tone, independent of our app code.
    """
    path = tmp_path / "tone.wav"
    cmd = [
        "ffmpeg", "-y",
        "-f", "lavfi", "-i", "sine=frequency=440:duration=5",
        str(path)
    ]
    subprocess.run(cmd, check=True, capture_output=True)
    return path

def test_probe_real_file(tone_file):
    seconds = get_media_duration(str(tone_file))
    assert seconds == pytest.approx(5.0, abs=0.1)

def test_cut_real_file(tone_file, tmp_path):
    out = cut_media(str(tone_file), 1.0, 3.0, str(tmp_path / "out" / "slice.mp3"))

    assert out.exists()
    assert FFprobeAdapter().duration(out) == pytest.approx(2.0, abs=0.15)
    print(f"✅ Created slice: {out}")

def test_plan_and_extract_every_window(tone_file, tmp_path):
    extractor = ChunkExtractor(FFmpegSplitAdapter())
    windows = plan_windows(5.0, 2.0)

    artifacts = [extractor.extract(tone_file, w, tmp_path / "chunks") for w in windows]

    assert len(artifacts) == 3
    total = sum(FFprobeAdapter().duration(a.file_path) for a in artifacts)
    assert total == pytest.approx(5.0, abs=0.3)
