"""
Job status lifecycle

    pending -> processing -> completed
        \\           \\
         +-> failed   +-> failed

Completed and failed are terminal: a job in either state is never updated again.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional

from .errors import InvalidJobTransitionError


class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES: FrozenSet[JobStatus] = frozenset({JobStatus.COMPLETED, JobStatus.FAILED})

ALLOWED_TRANSITIONS: Dict[JobStatus, FrozenSet[JobStatus]] = {
    JobStatus.PENDING: frozenset({JobStatus.PROCESSING, JobStatus.FAILED}),
    JobStatus.PROCESSING: frozenset({JobStatus.COMPLETED, JobStatus.FAILED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.FAILED: frozenset(),
}


def can_transition(current: JobStatus, new: JobStatus) -> bool:
    """Return True when a job in `current` may be updated to `new`"""
    current, new = JobStatus(current), JobStatus(new)
    if current.is_terminal:
        return False
    return new == current or new in ALLOWED_TRANSITIONS[current]


def ensure_job_transition(job_id: int, current, new: Optional[str]) -> None:
    """
    Validate a job update.

    `new` is None for updates that do not touch the status; those are still
    rejected once the job is terminal.
    """
    current = JobStatus(current)
    try:
        requested = JobStatus(new) if new is not None else current
    except ValueError:
        raise InvalidJobTransitionError(job_id, current.value, str(new))
    if not can_transition(current, requested):
        raise InvalidJobTransitionError(job_id, current.value, requested.value)


__all__ = [
    "JobStatus",
    "TERMINAL_STATUSES",
    "ALLOWED_TRANSITIONS",
    "can_transition",
    "ensure_job_transition",
]
