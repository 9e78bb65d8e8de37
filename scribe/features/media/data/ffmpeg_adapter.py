import subprocess
import logging
from pathlib import Path
from scribe.core.config.settings import settings
from scribe.core.errors import ProbeFailed
from ..domain.interfaces import IMediaProber, IMediaSplitter
from ..domain.models import CutRequest

logger = logging.getLogger(__name__)

class FFprobeAdapter(IMediaProber):
    """
    Reads container duration with ffprobe.
    """

    def __init__(self, binary: str = None, timeout_seconds: float = 30):
        self.binary = binary or settings.FFPROBE_BINARY
        self.timeout_seconds = timeout_seconds

    def duration(self, path: Path) -> float:
        cmd = [
            self.binary,
            "-v", "error",
            "-show_entries", "format=duration",
            "-of", "default=noprint_wrappers=1:nokey=1",
            str(path)
        ]

        try:
            result = subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            stderr = getattr(e, "stderr", None)
            raise ProbeFailed(f"ffprobe failed for {path}: {stderr or e}") from e

        raw = result.stdout.strip()
        try:
            seconds = float(raw)
        except ValueError as e:
            raise ProbeFailed(f"ffprobe returned no usable duration for {path}: '{raw}'") from e

        if seconds <= 0:
            raise ProbeFailed(f"ffprobe reported non-positive duration for {path}: {seconds}")
        return seconds

class FFmpegSplitAdapter(IMediaSplitter):
    """
    Cuts a window out of any supported container into an audio-only MP3.
    Re-encodes so the cut starts exactly at the requested timestamp.
    """

    def __init__(self, binary: str = None, timeout_seconds: float = 300):
        self.binary = binary or settings.FFMPEG_BINARY
        self.timeout_seconds = timeout_seconds

    def cut(self, request: CutRequest) -> Path:
        request.output.ensure_parent_dir()

        # -ss before -i: fast seek on input
        # -t: duration of the window
        # -vn: drop video, chunks only need the speech track
        # -q:a 2: High quality VBR (~190kbps)
        cmd = [
            self.binary,
            "-y",
            "-v", "error",
            "-ss", str(request.time_range.start_seconds),
            "-i", str(request.source.path),
            "-t", str(request.time_range.duration),
            "-vn",
            "-acodec", "libmp3lame",
            "-q:a", "2",
            str(request.output.path)
        ]

        logger.info(f"Executing FFmpeg Cut: {' '.join(cmd)}")

        try:
            subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds
            )
        except subprocess.CalledProcessError as e:
            error_message = e.stderr if e.stderr else "Unknown FFmpeg error"
            logger.error(f"FFmpeg Cut Failed. STDERR: {error_message}")
            raise RuntimeError(f"Media cut failed: {error_message}") from e
        except subprocess.TimeoutExpired as e:
            raise RuntimeError(f"Media cut timed out after {self.timeout_seconds}s") from e

        return request.output.path
