"""
Unit tests for the job status state machine
"""
import pytest

from audiostudio.core.errors import InvalidJobTransitionError
from audiostudio.core.job_status import JobStatus, can_transition, ensure_job_transition


@pytest.mark.unit
class TestJobStatus:

    def test_terminal_statuses(self):
        assert JobStatus.COMPLETED.is_terminal
        assert JobStatus.FAILED.is_terminal
        assert not JobStatus.PENDING.is_terminal
        assert not JobStatus.PROCESSING.is_terminal

    @pytest.mark.parametrize("current,new", [
        ("pending", "processing"),
        ("pending", "failed"),
        ("processing", "completed"),
        ("processing", "failed"),
    ])
    def test_forward_transitions(self, current, new):
        assert can_transition(current, new)
        ensure_job_transition(1, current, new)

    @pytest.mark.parametrize("current,new", [
        ("pending", "completed"),
        ("processing", "pending"),
        ("completed", "failed"),
        ("completed", "processing"),
        ("failed", "completed"),
        ("failed", "failed"),
    ])
    def test_rejected_transitions(self, current, new):
        assert not can_transition(current, new)
        with pytest.raises(InvalidJobTransitionError):
            ensure_job_transition(1, current, new)

    def test_field_update_without_status(self):
        ensure_job_transition(1, "processing", None)

        with pytest.raises(InvalidJobTransitionError) as exc_info:
            ensure_job_transition(7, "completed", None)

        assert exc_info.value.job_id == 7
        assert exc_info.value.current == "completed"

    def test_unknown_status(self):
        with pytest.raises(InvalidJobTransitionError, match="'finished'"):
            ensure_job_transition(1, "pending", "finished")
