# File: scribe/core/common/enums.py

from enum import Enum, unique

@unique
class ModelTier(str, Enum):
    TINY = "tiny"
    BASE = "base"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

@unique
class Accuracy(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

@unique
class FailureReason(str, Enum):
    UNSUPPORTED_FORMAT = "unsupported_format"
    FILE_TOO_LARGE = "file_too_large"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    CHUNK_EXTRACTION_FAILED = "chunk_extraction_failed"
    TRANSCRIPTION_FAILED = "transcription_failed"
    AGGREGATION_INVARIANT = "aggregation_invariant_violation"
    CANCELLED = "cancelled"
    INTERNAL = "internal_error"
