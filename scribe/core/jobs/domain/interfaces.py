from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List
from uuid import UUID

from scribe.core.common.enums import FailureReason
from ..types import WorkflowState
from .models import RunRecord

class IRunRepository(ABC):
    """
    Contract for WorkflowRun persistence.
    Holds the run header plus one durable output per completed step.
    """

    @abstractmethod
    def create_run(self, user_id: str, payload: Dict[str, Any]) -> UUID:
        """Creates a run in ACCEPTED state and returns its id."""
        pass

    @abstractmethod
    def get_run(self, run_id: UUID) -> Optional[RunRecord]:
        pass

    @abstractmethod
    def set_state(self,
                  run_id: UUID,
                  state: WorkflowState,
                  failure_reason: Optional[FailureReason] = None,
                  error_message: Optional[str] = None) -> None:
        pass

    @abstractmethod
    def request_cancel(self, run_id: UUID) -> bool:
        """
        Flags a run for cancellation.
        Returns False if the run is unknown or already terminal.
        """
        pass

    @abstractmethod
    def list_active(self) -> List[UUID]:
        """Ids of every run not yet in a terminal state, oldest first."""
        pass

    @abstractmethod
    def load_step(self, run_id: UUID, step_name: str) -> Optional[Dict[str, Any]]:
        """Returns the recorded output of a step, or None if it never completed."""
        pass

    @abstractmethod
    def save_step(self, run_id: UUID, step_name: str, output: Dict[str, Any]) -> Dict[str, Any]:
        """
        Records a step output. If another writer got there first,
        the already-recorded output wins and is returned.
        """
        pass

    @abstractmethod
    def list_steps(self, run_id: UUID) -> Dict[str, Dict[str, Any]]:
        pass
