import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List
from uuid import UUID
from sqlalchemy.exc import IntegrityError

from scribe.core.database.connection import SessionLocal
from scribe.core.common.enums import FailureReason
from ..models import WorkflowRunModel, WorkflowStepModel
from ..types import WorkflowState
from ..domain.interfaces import IRunRepository
from ..domain.models import RunRecord

logger = logging.getLogger(__name__)

class SqlRunRepository(IRunRepository):

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def create_run(self, user_id: str, payload: Dict[str, Any]) -> UUID:
        with self.session_factory() as db:
            run = WorkflowRunModel(user_id=str(user_id), payload=payload, state=WorkflowState.ACCEPTED)
            db.add(run)
            db.commit()
            db.refresh(run)
            return run.id

    def get_run(self, run_id: UUID) -> Optional[RunRecord]:
        with self.session_factory() as db:
            run = db.get(WorkflowRunModel, run_id)
            return self._to_record(run) if run else None

    def set_state(self,
                  run_id: UUID,
                  state: WorkflowState,
                  failure_reason: Optional[FailureReason] = None,
                  error_message: Optional[str] = None) -> None:
        with self.session_factory() as db:
            run = db.get(WorkflowRunModel, run_id)
            if not run:
                raise ValueError(f"Run {run_id} not found.")

            run.state = state
            if failure_reason is not None:
                run.failure_reason = failure_reason
            if error_message is not None:
                run.error_message = error_message
            if state.is_terminal:
                run.finished_at = datetime.now(timezone.utc)
            db.commit()

    def request_cancel(self, run_id: UUID) -> bool:
        with self.session_factory() as db:
            run = db.get(WorkflowRunModel, run_id)
            if not run or run.state.is_terminal:
                return False
            run.cancel_requested = True
            db.commit()
            return True

    def list_active(self) -> List[UUID]:
        terminal = [WorkflowState.COMPLETED, WorkflowState.FAILED]
        with self.session_factory() as db:
            rows = (
                db.query(WorkflowRunModel.id)
                .filter(WorkflowRunModel.state.notin_(terminal))
                .order_by(WorkflowRunModel.created_at)
                .all()
            )
            return [row.id for row in rows]

    def load_step(self, run_id: UUID, step_name: str) -> Optional[Dict[str, Any]]:
        with self.session_factory() as db:
            step = (
                db.query(WorkflowStepModel)
                .filter(WorkflowStepModel.run_id == run_id, WorkflowStepModel.step_name == step_name)
                .first()
            )
            return dict(step.output) if step else None

    def save_step(self, run_id: UUID, step_name: str, output: Dict[str, Any]) -> Dict[str, Any]:
        with self.session_factory() as db:
            try:
                db.add(WorkflowStepModel(run_id=run_id, step_name=step_name, output=output))
                db.commit()
                return output
            except IntegrityError:
                # Unique (run_id, step_name): a concurrent writer recorded it first.
                db.rollback()
                logger.warning(f"Step '{step_name}' of run {run_id} was already recorded. Keeping the first output.")

        existing = self.load_step(run_id, step_name)
        return existing if existing is not None else output

    def list_steps(self, run_id: UUID) -> Dict[str, Dict[str, Any]]:
        with self.session_factory() as db:
            steps = (
                db.query(WorkflowStepModel)
                .filter(WorkflowStepModel.run_id == run_id)
                .order_by(WorkflowStepModel.created_at)
                .all()
            )
            return {s.step_name: dict(s.output) for s in steps}

    @staticmethod
    def _to_record(run: WorkflowRunModel) -> RunRecord:
        return RunRecord(
            id=run.id,
            user_id=run.user_id,
            state=run.state,
            payload=dict(run.payload or {}),
            failure_reason=run.failure_reason,
            error_message=run.error_message,
            cancel_requested=bool(run.cancel_requested),
            created_at=run.created_at,
            finished_at=run.finished_at
        )
