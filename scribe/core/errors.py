# File: scribe/core/errors.py
"""
Error taxonomy of the transcription workflow.

Validation errors derive from ValueError, provider-side failures from
RuntimeError, so callers that only know the builtin types still behave.
"""

from typing import Optional
from scribe.core.common.enums import FailureReason


class WorkflowError(Exception):
    """Root of every error the workflow raises on purpose."""
    reason: FailureReason = FailureReason.INTERNAL
    retryable: bool = False


# --- Validation (rejected before any side effect) ---

class UnsupportedFormat(WorkflowError, ValueError):
    reason = FailureReason.UNSUPPORTED_FORMAT

    def __init__(self, extension: str, supported):
        self.extension = extension
        self.supported = tuple(supported)
        super().__init__(f"Unsupported file format: '{extension}'. Supported: {', '.join(self.supported)}")


class FileTooLarge(WorkflowError, ValueError):
    reason = FailureReason.FILE_TOO_LARGE

    def __init__(self, size_bytes: int, limit_bytes: int):
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(f"File too large: {size_bytes} bytes (limit {limit_bytes} bytes)")


class MediaNotFound(WorkflowError, FileNotFoundError):
    def __init__(self, media_ref: str, detail: str = ""):
        self.media_ref = media_ref
        super().__init__(f"Media '{media_ref}' could not be resolved. {detail}".strip())


# --- Billing ---

class InsufficientFunds(WorkflowError):
    reason = FailureReason.INSUFFICIENT_FUNDS

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(f"Insufficient funds: required {required}, available {available}")


# --- Provider-side (retryable, then fatal) ---

class ProbeFailed(WorkflowError, RuntimeError):
    """Never fails a run: DurationProbe falls back to an estimate."""
    retryable = True


class ChunkExtractionFailed(WorkflowError, RuntimeError):
    reason = FailureReason.CHUNK_EXTRACTION_FAILED
    retryable = True

    def __init__(self, window, cause: Optional[BaseException] = None):
        self.window = window
        self.cause = cause
        super().__init__(f"Failed to extract chunk {window.index} [{window.start}, {window.end}): {cause}")


class TranscriptionFailed(WorkflowError, RuntimeError):
    reason = FailureReason.TRANSCRIPTION_FAILED
    retryable = True

    def __init__(self, window=None, cause: Optional[BaseException] = None, retryable: bool = True):
        self.window = window
        self.cause = cause
        # A payload of an unknown shape comes back the same on every call
        self.retryable = retryable
        where = f"chunk {window.index}" if window is not None else "media"
        super().__init__(f"Transcription of {where} failed: {cause}")


class ResponseShapeError(WorkflowError, ValueError):
    """Provider payload matched none of the known shapes."""

    def __init__(self, payload):
        self.payload_type = type(payload).__name__
        preview = repr(payload)
        if len(preview) > 200:
            preview = preview[:200] + "..."
        super().__init__(f"Unrecognized provider response ({self.payload_type}): {preview}")


class AggregationInvariantViolation(WorkflowError, RuntimeError):
    reason = FailureReason.AGGREGATION_INVARIANT


class CleanupFailed(WorkflowError, OSError):
    """Logged by the janitor, never escalated."""


class RunCancelled(WorkflowError):
    reason = FailureReason.CANCELLED

    def __init__(self, run_id):
        self.run_id = run_id
        super().__init__(f"Run {run_id} was cancelled")
