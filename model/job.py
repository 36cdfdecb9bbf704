# model/job.py
from enum import Enum


class JobStatus(str, Enum):
    """
    pending -> processing -> completed | failed | cancelled

    The enum only classifies; JobState decides which transitions happen.
    """

    pending = "pending"
    processing = "processing"
    completed = "completed"
    failed = "failed"
    cancelled = "cancelled"

    def is_running(self) -> bool:
        # Pending counts as running since the job will be picked up eventually.
        return self in (JobStatus.pending, JobStatus.processing)

    def is_pending(self) -> bool:
        return self is JobStatus.pending

    def is_processing(self) -> bool:
        return self is JobStatus.processing

    def is_finished(self) -> bool:
        return self in (JobStatus.completed, JobStatus.failed, JobStatus.cancelled)

    def is_completed(self) -> bool:
        return self is JobStatus.completed

    def is_failed(self) -> bool:
        return self is JobStatus.failed

    def is_cancelled(self) -> bool:
        return self is JobStatus.cancelled
