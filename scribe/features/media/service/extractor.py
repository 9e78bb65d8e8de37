import logging
from pathlib import Path

from scribe.core.errors import ChunkExtractionFailed
from scribe.core.shared_types import MediaFile
from ..domain.interfaces import IMediaSplitter
from ..domain.models import Window, ChunkArtifact, CutRequest

logger = logging.getLogger(__name__)

class ChunkExtractor:
    """
    Materializes one Window of the source media as an independent file.
    """

    def __init__(self, splitter: IMediaSplitter, chunk_format: str = "mp3"):
        self.splitter = splitter
        self.chunk_format = chunk_format

    def chunk_path(self, media_path: Path, window: Window, output_dir: Path) -> Path:
        # Naming: original_chunk_003_1200_1500.mp3
        return output_dir / f"{media_path.stem}_chunk_{window.index:03d}_{int(window.start)}_{int(window.end)}.{self.chunk_format}"

    def extract(self, media_path: Path, window: Window, output_dir: Path) -> ChunkArtifact:
        output_path = self.chunk_path(media_path, window, output_dir)

        try:
            request = CutRequest(
                source=MediaFile(media_path, validate_exists=True),
                output=MediaFile(output_path, validate_exists=False),
                time_range=window.as_time_range()
            )
            written = self.splitter.cut(request)
        except (RuntimeError, OSError, ValueError) as e:
            raise ChunkExtractionFailed(window, e) from e

        written = Path(written)
        if not written.exists() or written.stat().st_size == 0:
            raise ChunkExtractionFailed(window, RuntimeError(f"Splitter produced no data at {written}"))

        logger.info(f"Extracted chunk {window.index} [{window.start:.1f}s, {window.end:.1f}s) -> {written.name}")
        return ChunkArtifact(window=window, file_path=written)
