from typing import Iterable
from scribe.core.errors import UnsupportedFormat, FileTooLarge
from ..domain.models import ResolvedMedia

class MediaValidator:
    """
    Boundary checks applied before any side effect of a run.
    """

    def __init__(self, supported_formats: Iterable[str], max_bytes: int):
        self.supported_formats = tuple(f.lower().lstrip(".") for f in supported_formats)
        self.max_bytes = max_bytes

    def is_supported_format(self, extension: str) -> bool:
        return extension.lower().lstrip(".") in self.supported_formats

    def is_valid_size(self, size_bytes: int) -> bool:
        return 0 < size_bytes <= self.max_bytes

    def check_reference(self, media_ref: str) -> None:
        """
        Cheap pre-check on the reference itself, before anything is fetched.
        References without an extension are let through to the post-resolve check.
        """
        name = media_ref.split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]
        if "." in name:
            extension = name.rsplit(".", 1)[-1]
            if not self.is_supported_format(extension):
                raise UnsupportedFormat(extension, self.supported_formats)

    def check(self, media: ResolvedMedia) -> None:
        if not self.is_supported_format(media.extension):
            raise UnsupportedFormat(media.extension or "<none>", self.supported_formats)
        if not self.is_valid_size(media.size_bytes):
            if media.size_bytes > self.max_bytes:
                raise FileTooLarge(media.size_bytes, self.max_bytes)
            raise UnsupportedFormat(f"{media.extension} (empty file)", self.supported_formats)
