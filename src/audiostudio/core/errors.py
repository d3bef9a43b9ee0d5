"""
AudioStudio Error Types
Errors raised by the entity store and the job processors
"""


class RepositoryError(Exception):
    """Base repository error"""
    pass


class NotFoundError(RepositoryError):
    """Entity not found error"""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with id {entity_id} not found")


class ConflictError(RepositoryError):
    """Data conflict error (duplicate unique key or clip/tag pair)"""
    pass


class InvalidJobTransitionError(RepositoryError):
    """Job status update that would move a job backwards or out of a terminal state"""

    def __init__(self, job_id: int, current: str, requested: str):
        self.job_id = job_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Job {job_id} cannot change status from '{current}' to '{requested}'"
        )


class ProcessingFailure(Exception):
    """Raised inside a job processor; the message is stored on the failed job"""
    pass


__all__ = [
    "RepositoryError",
    "NotFoundError",
    "ConflictError",
    "InvalidJobTransitionError",
    "ProcessingFailure",
]
