# File: scribe/features/workflow/service/orchestrator.py
import logging
import shutil
import uuid
from pathlib import Path
from typing import List, Optional, Tuple
from uuid import UUID

from scribe.core.common.enums import FailureReason
from scribe.core.errors import WorkflowError, InsufficientFunds, RunCancelled
from scribe.core.jobs.domain.interfaces import IRunRepository
from scribe.core.jobs.domain.models import RunRecord
from scribe.core.jobs.service.step_runner import StepRunner
from scribe.core.jobs.types import WorkflowState, StepName
from scribe.features.billing.domain.models import BillingOutcome
from scribe.features.billing.service.price_gate import PriceGate
from scribe.features.media.domain.interfaces import IMediaStore
from scribe.features.media.domain.models import Window
from scribe.features.media.service.extractor import ChunkExtractor
from scribe.features.media.service.planner import plan_windows
from scribe.features.media.service.probe import DurationProbe
from scribe.features.media.service.validation import MediaValidator
from scribe.features.notifications.domain import messages
from scribe.features.notifications.service.dispatcher import NotificationDispatcher
from scribe.features.transcription.data.repository import SqlTranscriptRepository
from scribe.features.transcription.domain.models import Transcript, TranscriptionSettings
from scribe.features.transcription.service.aggregator import TranscriptAggregator
from scribe.features.transcription.service.client import TranscriptionClient
from ..domain.models import TranscriptionRequest, WorkflowOutcome, WorkflowConfig
from .janitor import ResourceJanitor

logger = logging.getLogger(__name__)


class WorkflowOrchestrator:
    """
    Drives one transcription request from acceptance to a terminal state.

    Accepted -> Probing -> Pricing -> (Chunking -> Transcribing)* -> Aggregating -> Cleaning -> Completed
    with Failed(reason) reachable from every non-terminal state.

    Every step output is persisted under (run_id, step_name), so calling run()
    again on an interrupted run resumes after the last recorded step. Billing
    is additionally protected by the ledger reference (the run id).
    """

    def __init__(self,
                 runs: IRunRepository,
                 media_store: IMediaStore,
                 probe: DurationProbe,
                 extractor: ChunkExtractor,
                 price_gate: PriceGate,
                 client: TranscriptionClient,
                 notifier: NotificationDispatcher,
                 config: WorkflowConfig,
                 aggregator: Optional[TranscriptAggregator] = None,
                 transcripts: Optional[SqlTranscriptRepository] = None,
                 validator: Optional[MediaValidator] = None):
        self.runs = runs
        self.media_store = media_store
        self.probe = probe
        self.extractor = extractor
        self.price_gate = price_gate
        self.client = client
        self.notifier = notifier
        self.config = config
        self.aggregator = aggregator or TranscriptAggregator(config.aggregate_offset_mode)
        self.transcripts = transcripts
        self.validator = validator or MediaValidator(config.supported_formats, config.max_upload_bytes)
        self.steps = StepRunner(runs, config.step_max_attempts, config.retry_backoff_seconds)

    # --- Public API ---

    def accept(self, request: TranscriptionRequest) -> UUID:
        """
        Validates the media and creates the run record.
        Nothing is charged or persisted when validation fails.

        Raises:
            UnsupportedFormat, FileTooLarge, MediaNotFound
        """
        work_dir = self.config.temp_dir / uuid.uuid4().hex

        try:
            # 1. Cheap check on the reference itself
            self.validator.check_reference(request.media_ref)

            # 2. Resolve to a local file (may download into work_dir)
            resolved = self.media_store.resolve(request.media_ref, work_dir)

            # 3. Full check on the resolved file
            try:
                self.validator.check(resolved)
            except WorkflowError:
                if resolved.temporary:
                    resolved.path.unlink(missing_ok=True)
                raise
        except WorkflowError as e:
            shutil.rmtree(work_dir, ignore_errors=True)
            logger.info(f"Rejected media '{request.media_ref}' for user {request.user_id}: {e}")
            self.notifier.send(request.user_id, messages.failed(str(e)))
            raise

        payload = request.to_dict()
        payload.update({
            "media_path": str(resolved.path),
            "media_temporary": resolved.temporary,
            "size_bytes": resolved.size_bytes,
            "work_dir": str(work_dir),
        })
        run_id = self.runs.create_run(request.user_id, payload)
        logger.info(f"Run {run_id} accepted for user {request.user_id} ({resolved.size_bytes} bytes)")
        return run_id

    def submit(self, request: TranscriptionRequest) -> WorkflowOutcome:
        """accept() followed by run()."""
        return self.run(self.accept(request))

    def run(self, run_id: UUID) -> WorkflowOutcome:
        """
        Executes (or resumes) a run until it reaches a terminal state.
        Terminal runs are returned as they are, never re-executed.
        """
        record = self.runs.get_run(run_id)
        if record is None:
            raise ValueError(f"Run {run_id} not found.")
        if record.is_terminal:
            logger.info(f"Run {run_id} is already {record.state.value}. Nothing to do.")
            return self.get_outcome(run_id)

        request = TranscriptionRequest.from_dict(record.payload)
        janitor = ResourceJanitor()
        janitor.track(Path(record.payload["work_dir"]))
        if record.payload.get("media_temporary"):
            janitor.track(Path(record.payload["media_path"]))

        try:
            transcript = self._execute(record, request, janitor)
        except WorkflowError as e:
            self._fail(record.id, request, janitor, e.reason, e)
        except Exception as e:
            logger.exception(f"Run {run_id} crashed: {e}")
            self._fail(record.id, request, janitor, FailureReason.INTERNAL, e)
        else:
            self._deliver(request.user_id, transcript)

        return self.get_outcome(run_id)

    def cancel(self, run_id: UUID) -> bool:
        """
        Requests cancellation. Honoured at the next step boundary.
        Returns False if the run is unknown or already terminal.
        """
        accepted = self.runs.request_cancel(run_id)
        if accepted:
            logger.info(f"Cancellation requested for run {run_id}")
        return accepted

    def resume_pending(self) -> List[WorkflowOutcome]:
        """Re-enters every non-terminal run, e.g. after a process restart."""
        pending = self.runs.list_active()
        if pending:
            logger.info(f"Resuming {len(pending)} unfinished run(s)")
        return [self.run(run_id) for run_id in pending]

    def get_outcome(self, run_id: UUID) -> WorkflowOutcome:
        record = self.runs.get_run(run_id)
        if record is None:
            raise ValueError(f"Run {run_id} not found.")

        steps = self.runs.list_steps(run_id)
        transcript = None
        if record.state == WorkflowState.COMPLETED and StepName.AGGREGATE.value in steps:
            transcript = Transcript.from_dict(steps[StepName.AGGREGATE.value])
        billing = None
        if StepName.BILLING.value in steps:
            billing = BillingOutcome.from_dict(steps[StepName.BILLING.value])
        probe = steps.get(StepName.PROBE.value) or {}
        plan = steps.get(StepName.PLAN.value) or {}

        return WorkflowOutcome(
            run_id=record.id,
            state=record.state,
            transcript=transcript,
            billing=billing,
            duration_seconds=probe.get("seconds"),
            window_count=len(plan.get("windows", [])),
            failure_reason=record.failure_reason,
            error_message=record.error_message
        )

    # --- Steps ---

    def _execute(self, record: RunRecord, request: TranscriptionRequest, janitor: ResourceJanitor) -> Transcript:
        run_id = record.id
        media_path = Path(record.payload["media_path"])
        work_dir = Path(record.payload["work_dir"])
        settings = request.settings

        # 1. Probe
        self._enter(run_id, WorkflowState.PROBING)
        if not self.steps.recorded(run_id, StepName.PROBE.value):
            self.notifier.send(request.user_id, messages.started())
        probed = self.steps.run(run_id, StepName.PROBE.value,
                                lambda: self._probe(media_path, request.duration))
        duration = float(probed["seconds"])

        # 2. Plan and charge
        self._enter(run_id, WorkflowState.PRICING)
        plan = self.steps.run(run_id, StepName.PLAN.value,
                              lambda: {"windows": [w.to_dict() for w in plan_windows(duration, self.config.max_window_seconds)]})
        windows = [Window.from_dict(w) for w in plan["windows"]]
        self.steps.run(run_id, StepName.BILLING.value,
                       lambda: self._charge(run_id, request, duration))

        # 3. Transcribe
        if len(windows) == 1:
            self._enter(run_id, WorkflowState.TRANSCRIBING)
            recorded = self.steps.run(run_id, StepName.TRANSCRIBE.for_window(0),
                                      lambda: self.client.transcribe(media_path, settings).to_dict())
            chunks = [(windows[0], Transcript.from_dict(recorded))]
        else:
            chunks = self._transcribe_windows(run_id, request, media_path, work_dir, windows, janitor)

        # 4. Aggregate
        self._enter(run_id, WorkflowState.AGGREGATING)
        merged = self.steps.run(run_id, StepName.AGGREGATE.value,
                                lambda: self.aggregator.merge(chunks).to_dict())
        transcript = Transcript.from_dict(merged)

        # 5. Clean up and finish
        self._enter(run_id, WorkflowState.CLEANING)
        if self.transcripts is not None:
            self.transcripts.save(run_id, request.user_id, transcript, settings.model.value, {
                "duration": duration,
                "estimated": bool(probed.get("estimated")),
                "windows": len(windows),
            })
        janitor.release_all()
        self.runs.set_state(run_id, WorkflowState.COMPLETED)
        logger.info(f"Run {run_id} completed (task {transcript.task_id})")
        return transcript

    def _transcribe_windows(self, run_id: UUID, request: TranscriptionRequest, media_path: Path,
                            work_dir: Path, windows: List[Window],
                            janitor: ResourceJanitor) -> List[Tuple[Window, Transcript]]:
        """
        One window at a time, in plan order. Window i+1 is not touched until
        window i's transcript is recorded. Each chunk file is deleted as soon
        as its transcript is recorded.
        """
        total = len(windows)
        chunks = []

        for window in windows:
            step = StepName.TRANSCRIBE.for_window(window.index)
            recorded = self.runs.load_step(run_id, step)

            if recorded is None:
                if window.index == 0:
                    self.notifier.send(request.user_id, messages.split_into_parts(total))

                self._enter(run_id, WorkflowState.CHUNKING)
                self.notifier.send(request.user_id, messages.processing_part(window.index + 1, total))
                work_dir.mkdir(parents=True, exist_ok=True)
                artifact = self.steps.call_with_retry(
                    self.extractor.extract, media_path, window, work_dir,
                    label=f"{run_id}:extract:{window.index}"
                )
                janitor.track(artifact.file_path)

                self._enter(run_id, WorkflowState.TRANSCRIBING)
                recorded = self.steps.run(run_id, step, self._transcriber(artifact.file_path, request.settings, window))
                janitor.release(artifact.file_path)

            chunks.append((window, Transcript.from_dict(recorded)))

        return chunks

    def _transcriber(self, path: Path, settings: TranscriptionSettings, window: Window):
        def call():
            return self.client.transcribe(path, settings, window).to_dict()
        return call

    def _probe(self, media_path: Path, known_duration: Optional[float]) -> dict:
        result = self.probe.probe(media_path, known_duration)
        return {"seconds": result.seconds, "estimated": result.estimated}

    def _charge(self, run_id: UUID, request: TranscriptionRequest, duration: float) -> dict:
        outcome = self.price_gate.authorize(
            request.user_id, duration, request.settings.model, reference=str(run_id)
        )
        self.notifier.send(request.user_id, messages.charged(outcome.amount_charged, outcome.balance_after or 0))
        return outcome.to_dict()

    # --- Transitions ---

    def _enter(self, run_id: UUID, state: WorkflowState) -> None:
        """Step boundary: honours cancellation, then records the new state."""
        record = self.runs.get_run(run_id)
        if record.cancel_requested:
            raise RunCancelled(run_id)
        if record.state != state:
            self.runs.set_state(run_id, state)
            logger.debug(f"Run {run_id}: {record.state.value} -> {state.value}")

    def _fail(self, run_id: UUID, request: TranscriptionRequest, janitor: ResourceJanitor,
              reason: FailureReason, error: BaseException) -> None:
        logger.warning(f"Run {run_id} failed ({reason.value}): {error}")

        # Cleaning always runs, whatever the failure
        self.runs.set_state(run_id, WorkflowState.CLEANING)
        janitor.release_all()

        if self.config.refund_on_failure and reason != FailureReason.INSUFFICIENT_FUNDS:
            self._refund(run_id, request)

        self.runs.set_state(run_id, WorkflowState.FAILED, failure_reason=reason, error_message=str(error))

        if isinstance(error, InsufficientFunds):
            text = messages.insufficient_funds(error.required, error.available)
        elif isinstance(error, RunCancelled):
            text = messages.cancelled()
        else:
            text = messages.failed(str(error))
        self.notifier.send(request.user_id, text)

    def _refund(self, run_id: UUID, request: TranscriptionRequest) -> None:
        charged = self.runs.load_step(run_id, StepName.BILLING.value)
        if charged is None:
            return

        outcome = BillingOutcome.from_dict(charged)
        try:
            self.steps.run(run_id, StepName.REFUND.value, lambda: {
                "amount": outcome.amount_charged,
                "balance": self.price_gate.refund(request.user_id, outcome, reference=f"{run_id}:refund"),
            })
        except Exception as e:
            # The run is failing anyway; the refund can be replayed from the ledger reference.
            logger.exception(f"Refund for run {run_id} failed: {e}")

    def _deliver(self, user_id: str, transcript: Transcript) -> None:
        self.notifier.send(user_id, messages.completed(transcript.task_id, transcript.language))
        self.notifier.send_many(user_id, messages.split_text(transcript.text))
