from pathlib import Path
from typing import Optional
from scribe.core.errors import MediaNotFound
from ..domain.interfaces import IMediaStore
from ..domain.models import ResolvedMedia

class LocalMediaStore(IMediaStore):
    """
    Resolves references that are already on this machine.
    Relative references are looked up under `root`.
    """

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root else None

    def resolve(self, media_ref: str, work_dir: Path) -> ResolvedMedia:
        path = Path(media_ref).expanduser()
        if not path.is_absolute() and self.root is not None:
            path = self.root / path

        if not path.exists():
            raise MediaNotFound(media_ref, "File does not exist.")
        if not path.is_file():
            raise MediaNotFound(media_ref, "Path is not a file.")

        return ResolvedMedia(path=path.resolve(), size_bytes=path.stat().st_size, temporary=False)

class RoutingMediaStore(IMediaStore):
    """
    Picks a store by reference scheme: http(s) URLs are downloaded,
    everything else is treated as a local path.
    """

    def __init__(self, local: IMediaStore, remote: IMediaStore):
        self.local = local
        self.remote = remote

    def resolve(self, media_ref: str, work_dir: Path) -> ResolvedMedia:
        if media_ref.lower().startswith(("http://", "https://")):
            return self.remote.resolve(media_ref, work_dir)
        return self.local.resolve(media_ref, work_dir)
