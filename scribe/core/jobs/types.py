from enum import Enum

class WorkflowState(str, Enum):
    ACCEPTED = "accepted"
    PROBING = "probing"
    PRICING = "pricing"
    CHUNKING = "chunking"
    TRANSCRIBING = "transcribing"
    AGGREGATING = "aggregating"
    CLEANING = "cleaning"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (WorkflowState.COMPLETED, WorkflowState.FAILED)

class StepName(str, Enum):
    """Memoized step outputs. Per-window steps get a ':<index>' suffix."""
    PROBE = "probe"
    PLAN = "plan"
    BILLING = "billing"
    TRANSCRIBE = "transcribe"
    AGGREGATE = "aggregate"
    REFUND = "refund"

    def for_window(self, index: int) -> str:
        return f"{self.value}:{index}"
