import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, Float, Integer, ForeignKey, DateTime, JSON, Uuid
from sqlalchemy.orm import relationship
from scribe.core.database.base import Base


def utc_now():
    return datetime.now(timezone.utc)


class TranscriptionModel(Base):
    """
    The Header record for a delivered transcript.
    """
    __tablename__ = "transcriptions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    task_id = Column(String, nullable=False, unique=True, index=True)
    run_id = Column(Uuid(as_uuid=True), ForeignKey("workflow_runs.id"), nullable=False, unique=True)
    user_id = Column(String, nullable=False, index=True)

    language = Column(String, default="unknown")
    model_used = Column(String, nullable=False)

    full_text = Column(Text, nullable=False)

    # e.g. {"duration": 1500.0, "estimated": false, "windows": 3}
    processing_meta = Column(JSON, default=dict)

    created_at = Column(DateTime(timezone=True), default=utc_now)

    segments = relationship(
        "TranscriptionSegmentModel",
        back_populates="transcription",
        cascade="all, delete-orphan",
        order_by="TranscriptionSegmentModel.position"
    )


class TranscriptionSegmentModel(Base):
    """
    One timed segment, in absolute time of the original media.
    """
    __tablename__ = "transcription_segments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    transcription_id = Column(Uuid(as_uuid=True), ForeignKey("transcriptions.id"), nullable=False)

    position = Column(Integer, nullable=False)
    start_time = Column(Float, nullable=False)
    end_time = Column(Float, nullable=False)
    text = Column(Text, nullable=False)

    transcription = relationship("TranscriptionModel", back_populates="segments")
