import logging
import uuid
from pathlib import Path
from urllib.parse import urlparse

import requests

from scribe.core.config.settings import settings
from scribe.core.errors import MediaNotFound, FileTooLarge
from ..domain.interfaces import IMediaStore
from ..domain.models import ResolvedMedia

logger = logging.getLogger(__name__)

class HttpMediaStore(IMediaStore):
    """
    Downloads a media URL into the run's work directory.
    Streams in 64kb blocks and aborts as soon as the size limit is crossed.
    """

    def __init__(self, max_bytes: int = None, timeout_seconds: float = 60, session: requests.Session = None):
        self.max_bytes = max_bytes if max_bytes is not None else settings.MAX_UPLOAD_BYTES
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def resolve(self, media_ref: str, work_dir: Path) -> ResolvedMedia:
        work_dir.mkdir(parents=True, exist_ok=True)
        extension = Path(urlparse(media_ref).path).suffix.lower()
        destination = work_dir / f"source_{uuid.uuid4().hex[:12]}{extension}"

        logger.info(f"Downloading media {media_ref} -> {destination}")

        try:
            with self.session.get(media_ref, stream=True, timeout=self.timeout_seconds) as response:
                response.raise_for_status()

                declared = int(response.headers.get("content-length") or 0)
                if declared > self.max_bytes:
                    raise FileTooLarge(declared, self.max_bytes)

                written = 0
                with open(destination, "wb") as f:
                    for block in response.iter_content(chunk_size=65536):
                        if not block:
                            continue
                        written += len(block)
                        if written > self.max_bytes:
                            raise FileTooLarge(written, self.max_bytes)
                        f.write(block)
        except FileTooLarge:
            destination.unlink(missing_ok=True)
            raise
        except requests.RequestException as e:
            destination.unlink(missing_ok=True)
            raise MediaNotFound(media_ref, f"Download failed: {e}") from e

        return ResolvedMedia(path=destination, size_bytes=written, temporary=True)
