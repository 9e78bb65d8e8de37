from abc import ABC, abstractmethod
from pathlib import Path
from .models import ResolvedMedia, CutRequest

class IMediaStore(ABC):
    """
    Contract for turning an opaque media reference into a local file.
    """
    @abstractmethod
    def resolve(self, media_ref: str, work_dir: Path) -> ResolvedMedia:
        """
        Args:
            media_ref: Path, storage key or URL identifying the upload.
            work_dir: Directory where a store may materialize a temporary copy.

        Raises:
            MediaNotFound: If the reference cannot be resolved.
            FileTooLarge: If the store detects the size limit is exceeded while fetching.
        """
        pass

class IMediaProber(ABC):
    """
    Contract for reading media metadata.
    """
    @abstractmethod
    def duration(self, path: Path) -> float:
        """
        Returns the duration of the media in seconds.

        Raises:
            ProbeFailed: If the duration cannot be determined.
        """
        pass

class IMediaSplitter(ABC):
    """
    Contract for cutting a time range out of a media file.
    Abstracts away the underlying tool (FFmpeg) from the workflow.
    """
    @abstractmethod
    def cut(self, request: CutRequest) -> Path:
        """
        Writes request.time_range of request.source to request.output.

        Returns:
            Path of the written file.

        Raises:
            RuntimeError: If the underlying process fails.
        """
        pass
