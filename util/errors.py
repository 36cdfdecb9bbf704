# util/errors.py
from typing import TYPE_CHECKING

from fastapi import HTTPException, status

if TYPE_CHECKING:
    from core.job_state import JobState


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self, message: str, http_status: int = status.HTTP_400_BAD_REQUEST
    ) -> None:
        super().__init__(status_code=http_status, detail=message)


class JobProgressError(Exception):
    """Base for every condition raised by the job state machine."""


class JobCannotBeCancelled(JobProgressError):
    def __init__(self, state: "JobState", message: str | None = None) -> None:
        self.state = state
        super().__init__(message or "The job cannot be cancelled (any more)")


class JobWasCancelled(JobProgressError):
    """
    Unwinds a job body after cancellation. Runners treat it as a clean stop.
    """

    def __init__(self, state: "JobState") -> None:
        self.state = state
        super().__init__(f"Job was cancelled ({state.job} - {state.id})")


class JobAlreadyProcessing(JobProgressError):
    def __init__(self, state: "JobState") -> None:
        self.state = state
        super().__init__(f"Job {state.job} with ID {state.id} is already processing")
