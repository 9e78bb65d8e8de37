from pathlib import Path
from scribe.core.shared_types import MediaFile, TimeRange
from ..data.ffmpeg_adapter import FFprobeAdapter, FFmpegSplitAdapter
from ..domain.models import CutRequest

def get_media_duration(path: str) -> float:
    """
    Standalone API: duration of a media file in seconds.
    Raises ProbeFailed instead of falling back.
    """
    return FFprobeAdapter().duration(Path(path))

def cut_media(source_path: str, start: float, end: float, dest_path: str) -> Path:
    """
    Standalone API: writes [start, end) of source_path as audio to dest_path.
    Does NOT interact with the database.
    """
    request = CutRequest(
        source=MediaFile(Path(source_path), validate_exists=True),
        output=MediaFile(Path(dest_path), validate_exists=False),
        time_range=TimeRange(start_seconds=start, end_seconds=end)
    )
    return FFmpegSplitAdapter().cut(request)
