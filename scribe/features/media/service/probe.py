import logging
from pathlib import Path
from typing import Optional
from tenacity import Retrying, stop_after_attempt, wait_exponential, retry_if_exception_type, RetryError

from ..domain.interfaces import IMediaProber
from ..domain.models import ProbeResult

logger = logging.getLogger(__name__)

class DurationProbe:
    """
    Availability over accuracy: a probe that keeps failing never fails the run.
    The fallback estimate is returned instead and flagged as such.
    """

    def __init__(self,
                 prober: IMediaProber,
                 fallback_seconds: float = 300.0,
                 max_attempts: int = 3,
                 backoff_seconds: float = 1.0):
        self.prober = prober
        self.fallback_seconds = fallback_seconds
        self.max_attempts = max(1, max_attempts)
        self.backoff_seconds = backoff_seconds

    def probe(self, media_path: Path, known_duration: Optional[float] = None) -> ProbeResult:
        if known_duration is not None and known_duration > 0:
            logger.info(f"Using pre-known duration {known_duration:.1f}s for {media_path}")
            return ProbeResult(seconds=float(known_duration), estimated=False)

        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_seconds, max=10),
            # Any prober error counts: a broken probe only costs accuracy
            retry=retry_if_exception_type(Exception)
        )
        try:
            seconds = retrying(self.prober.duration, media_path)
        except RetryError as e:
            cause = e.last_attempt.exception()
            logger.warning(
                f"Duration probe failed for {media_path} after {self.max_attempts} attempts ({cause}). "
                f"Falling back to {self.fallback_seconds:.0f}s estimate."
            )
            return ProbeResult(seconds=self.fallback_seconds, estimated=True)

        if seconds is None or seconds <= 0:
            logger.warning(f"Prober reported {seconds!r}s for {media_path}. Using {self.fallback_seconds:.0f}s estimate.")
            return ProbeResult(seconds=self.fallback_seconds, estimated=True)

        return ProbeResult(seconds=float(seconds), estimated=False)
