import logging
from typing import Callable, Dict, Any
from uuid import UUID
from tenacity import Retrying, stop_after_attempt, wait_exponential, retry_if_exception, before_sleep_log

from ..domain.interfaces import IRunRepository

logger = logging.getLogger(__name__)


def is_retryable(exc: BaseException) -> bool:
    return bool(getattr(exc, "retryable", False))


class StepRunner:
    """
    Executes named steps of a run at most once.

    A step's output is persisted under (run_id, step_name) the moment it
    succeeds. Re-entering the step returns the recorded output instead of
    calling the function again. Failures flagged as retryable are retried
    locally with exponential backoff before propagating.
    """

    def __init__(self, repo: IRunRepository, max_attempts: int = 3, backoff_seconds: float = 1.0):
        self.repo = repo
        self.max_attempts = max(1, max_attempts)
        self.backoff_seconds = backoff_seconds

    def run(self, run_id: UUID, step_name: str, fn: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
        recorded = self.repo.load_step(run_id, step_name)
        if recorded is not None:
            logger.debug(f"Run {run_id}: step '{step_name}' already recorded, reusing output.")
            return recorded

        output = self.call_with_retry(fn, label=f"{run_id}:{step_name}")
        return self.repo.save_step(run_id, step_name, output)

    def call_with_retry(self, fn: Callable, *args, label: str = "", **kwargs):
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_seconds, max=30),
            retry=retry_if_exception(is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True
        )
        if label:
            logger.debug(f"Executing step {label} (max {self.max_attempts} attempts)")
        return retrying(fn, *args, **kwargs)

    def recorded(self, run_id: UUID, step_name: str) -> bool:
        return self.repo.load_step(run_id, step_name) is not None
