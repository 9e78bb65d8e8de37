import logging
from typing import Optional, Dict, Any
from uuid import UUID

from scribe.core.database.connection import SessionLocal
from ..domain.models import Transcript, Segment
from .sql_models import TranscriptionModel, TranscriptionSegmentModel

logger = logging.getLogger(__name__)

class SqlTranscriptRepository:
    """
    Stores the final transcript of a run. One record per run.
    """

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def save(self, run_id: UUID, user_id: str, transcript: Transcript, model_used: str,
             processing_meta: Optional[Dict[str, Any]] = None) -> UUID:
        with self.session_factory() as db:
            existing = db.query(TranscriptionModel).filter(TranscriptionModel.run_id == run_id).first()
            if existing:
                logger.info(f"Transcript for run {run_id} already stored (task {existing.task_id}).")
                return existing.id

            # 1. Save Header
            record = TranscriptionModel(
                task_id=transcript.task_id,
                run_id=run_id,
                user_id=user_id,
                language=transcript.language,
                model_used=model_used,
                full_text=transcript.text,
                processing_meta=processing_meta or {}
            )
            db.add(record)
            db.flush()

            # 2. Save Segments
            for position, seg in enumerate(transcript.segments):
                db.add(TranscriptionSegmentModel(
                    transcription_id=record.id,
                    position=position,
                    start_time=seg.start,
                    end_time=seg.end,
                    text=seg.text
                ))

            db.commit()
            logger.info(f"Transcript saved. Task: {transcript.task_id}, Segments: {len(transcript.segments)}")
            return record.id

    def get_by_task_id(self, task_id: str) -> Optional[Transcript]:
        with self.session_factory() as db:
            record = db.query(TranscriptionModel).filter(TranscriptionModel.task_id == task_id).first()
            if not record:
                return None
            return Transcript(
                text=record.full_text,
                segments=[Segment(s.start_time, s.end_time, s.text) for s in record.segments],
                language=record.language,
                task_id=record.task_id
            )
