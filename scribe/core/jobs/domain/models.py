from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional
from uuid import UUID
from scribe.core.common.enums import FailureReason
from ..types import WorkflowState

@dataclass(frozen=True)
class RunRecord:
    """
    Read-only snapshot of a persisted run.
    """
    id: UUID
    user_id: str
    state: WorkflowState
    payload: Dict[str, Any] = field(default_factory=dict)
    failure_reason: Optional[FailureReason] = None
    error_message: Optional[str] = None
    cancel_requested: bool = False
    created_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal
