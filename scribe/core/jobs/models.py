import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum, JSON, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
from scribe.core.database.base import Base
from scribe.core.common.enums import FailureReason
from .types import WorkflowState

def utc_now():
    return datetime.now(timezone.utc)

class WorkflowRunModel(Base):
    """
    The persisted WorkflowRun. One row per accepted request.
    Step outputs live in WorkflowStepModel, keyed by (run_id, step_name).
    """
    __tablename__ = "workflow_runs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)

    state = Column(SQLEnum(WorkflowState), default=WorkflowState.ACCEPTED, nullable=False, index=True)
    failure_reason = Column(SQLEnum(FailureReason), nullable=True)
    error_message = Column(String, nullable=True)
    cancel_requested = Column(Boolean, default=False, nullable=False)

    payload = Column(JSON, default=dict)  # The immutable request

    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)
    finished_at = Column(DateTime(timezone=True), nullable=True)

    steps = relationship("WorkflowStepModel", back_populates="run", cascade="all, delete-orphan")

class WorkflowStepModel(Base):
    """
    Durable output of one completed step.
    A row here means: do not execute this step again for this run.
    """
    __tablename__ = "workflow_steps"
    __table_args__ = (UniqueConstraint("run_id", "step_name", name="uq_workflow_step"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    run_id = Column(Uuid(as_uuid=True), ForeignKey("workflow_runs.id"), nullable=False, index=True)
    step_name = Column(String, nullable=False)
    output = Column(JSON, default=dict)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    run = relationship("WorkflowRunModel", back_populates="steps")
