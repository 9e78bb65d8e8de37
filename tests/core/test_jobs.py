# File: tests/core/test_jobs.py

import pytest
from scribe.core.common.enums import FailureReason
from scribe.core.errors import TranscriptionFailed, InsufficientFunds
from scribe.core.jobs.data.repository import SqlRunRepository
from scribe.core.jobs.service.step_runner import StepRunner, is_retryable
from scribe.core.jobs.types import WorkflowState, StepName

def test_run_lifecycle_is_persisted():
    """
    Verifies that a run can be created, moved through states and finished.
    """
    repo = SqlRunRepository()

    # 1. SETUP
    run_id = repo.create_run("user-1", {"media_ref": "/tmp/a.mp3"})

    # 2. VERIFY initial state
    run = repo.get_run(run_id)
    assert run.state == WorkflowState.ACCEPTED
    assert run.payload == {"media_ref": "/tmp/a.mp3"}
    assert run.finished_at is None
    assert repo.list_active() == [run_id]

    # 3. EXECUTE: fail it
    repo.set_state(run_id, WorkflowState.PROBING)
    repo.set_state(run_id, WorkflowState.FAILED, failure_reason=FailureReason.TRANSCRIPTION_FAILED, error_message="boom")

    run = repo.get_run(run_id)
    assert run.state == WorkflowState.FAILED
    assert run.failure_reason == FailureReason.TRANSCRIPTION_FAILED
    assert run.error_message == "boom"
    assert run.finished_at is not None
    assert repo.list_active() == []

def test_cancel_is_refused_for_terminal_runs():
    repo = SqlRunRepository()
    run_id = repo.create_run("user-1", {})

    assert repo.request_cancel(run_id) is True
    assert repo.get_run(run_id).cancel_requested is True

    repo.set_state(run_id, WorkflowState.COMPLETED)
    assert repo.request_cancel(run_id) is False

def test_step_output_first_writer_wins():
    """
    A step recorded twice keeps its first output.
    """
    repo = SqlRunRepository()
    run_id = repo.create_run("user-1", {})

    first = repo.save_step(run_id, "probe", {"seconds": 45.0})
    second = repo.save_step(run_id, "probe", {"seconds": 999.0})

    assert first == {"seconds": 45.0}
    assert second == {"seconds": 45.0}
    assert repo.list_steps(run_id) == {"probe": {"seconds": 45.0}}

def test_step_runner_memoizes_outputs():
    repo = SqlRunRepository()
    runner = StepRunner(repo, max_attempts=3, backoff_seconds=0)
    run_id = repo.create_run("user-1", {})
    calls = []

    def step():
        calls.append(1)
        return {"value": len(calls)}

    assert runner.run(run_id, "plan", step) == {"value": 1}
    assert runner.run(run_id, "plan", step) == {"value": 1}
    assert len(calls) == 1
    assert runner.recorded(run_id, "plan")
    print("✅ Step executed once, replay served from the step store")

def test_step_runner_retries_only_retryable_errors():
    repo = SqlRunRepository()
    runner = StepRunner(repo, max_attempts=3, backoff_seconds=0)
    run_id = repo.create_run("user-1", {})

    # 1. Retryable: fails twice then succeeds
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise TranscriptionFailed(cause=RuntimeError("503"))
        return {"ok": True}

    assert runner.run(run_id, "transcribe:0", flaky) == {"ok": True}
    assert len(attempts) == 3

    # 2. Fatal: raised on first attempt, nothing recorded
    fatal_attempts = []

    def broke():
        fatal_attempts.append(1)
        raise InsufficientFunds(required=100, available=50)

    with pytest.raises(InsufficientFunds):
        runner.run(run_id, StepName.BILLING.value, broke)
    assert len(fatal_attempts) == 1
    assert not runner.recorded(run_id, StepName.BILLING.value)

def test_step_runner_gives_up_after_max_attempts():
    repo = SqlRunRepository()
    runner = StepRunner(repo, max_attempts=2, backoff_seconds=0)
    run_id = repo.create_run("user-1", {})
    attempts = []

    def always_down():
        attempts.append(1)
        raise TranscriptionFailed(cause=ConnectionError("down"))

    with pytest.raises(TranscriptionFailed):
        runner.run(run_id, "transcribe:0", always_down)
    assert len(attempts) == 2

def test_retryable_classification():
    assert is_retryable(TranscriptionFailed(cause=None))
    assert not is_retryable(InsufficientFunds(1, 0))
    assert not is_retryable(ValueError("plain"))

def test_step_names_for_windows():
    assert StepName.TRANSCRIBE.for_window(2) == "transcribe:2"
    assert WorkflowState.FAILED.is_terminal
    assert not WorkflowState.CLEANING.is_terminal
