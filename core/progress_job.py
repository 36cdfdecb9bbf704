# core/progress_job.py
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from core.job_state import JobState
from service.progress_manager import JobProgressManager
from service.progress_registry import ProgressRegistry
from util.errors import JobAlreadyProcessing, JobWasCancelled
from util.functions import job_type_name
from util.timing import timed

logger = logging.getLogger(__name__)


class JobOutcome(str, Enum):
    """How handle() ended when it did not raise."""

    completed = "completed"
    cancelled = "cancelled"
    already_processing = "already_processing"


class ProgressJob(ABC):
    """
    Base class for jobs that report progress through a ProgressRegistry.

    Subclasses implement get_progress_id() and handle_with_progress();
    the task runner calls handle().

    Flow of handle():
    - enter: exit_if_processing, exit_if_cancelled, update(0)
    - run handle_with_progress()
    - force-complete if the body did not, then record the wall time
    - JobWasCancelled -> state marked cancelled, JobOutcome.cancelled
    - JobAlreadyProcessing -> nothing touched, JobOutcome.already_processing
    - anything else -> state failed with the message, on_job_error(), re-raised
    """

    def __init__(self, registry: ProgressRegistry) -> None:
        self.registry = registry

    @abstractmethod
    def get_progress_id(self) -> str:
        """Unique id of this execution; usually passed in by the dispatcher."""

    @abstractmethod
    async def handle_with_progress(self) -> None: ...

    async def on_job_error(self, error: BaseException) -> None:
        """Hook for failed runs, e.g. to notify a user. No-op by default."""

    @classmethod
    def job_type(cls) -> str:
        return job_type_name(cls)

    @classmethod
    def get_progress_manager(cls, registry: ProgressRegistry) -> JobProgressManager:
        return registry.manager_for(cls)

    @classmethod
    async def get_progress(
        cls,
        registry: ProgressRegistry,
        id: Optional[str],
        create_if_missing: bool = False,
    ) -> Optional[JobState]:
        if id is None:
            return None

        manager = cls.get_progress_manager(registry)
        state = await manager.get_job_progress(cls.job_type(), id)
        if state is None and create_if_missing:
            return await manager.create_pending_state(cls.job_type(), id)
        return state

    @classmethod
    async def lock(cls, registry: ProgressRegistry, id: str) -> Optional[JobState]:
        return await cls.get_progress_manager(registry).lock(cls.job_type(), id)

    @classmethod
    async def mark_as_pending(cls, registry: ProgressRegistry, id: str) -> JobState:
        """
        Overwrites whatever state exists for `id`. Undefined behavior if the
        job is executing right now.
        """
        state = await cls.get_progress(registry, id, create_if_missing=True)
        return await state.reset()

    async def progress(self) -> JobState:
        return await self.get_progress(
            self.registry, self.get_progress_id(), create_if_missing=True
        )

    async def handle(self) -> JobOutcome:
        job, id = self.job_type(), self.get_progress_id()
        try:
            state = await self.progress()
            await state.exit_if_processing()
            await state.exit_if_cancelled()
            await state.update(0)

            with timed(logger, "job.handle", job=job, id=id) as elapsed:
                await self.handle_with_progress()

            await state.refresh()
            if not state.status.is_completed():
                await state.complete()

            await self.get_progress_manager(self.registry).add_to_average_duration(
                job, elapsed.duration
            )
            return JobOutcome.completed
        except JobWasCancelled:
            state = await self.progress()
            # Cancellation may have been raised by the body itself without
            # going through cancel().
            if not state.status.is_cancelled():
                await state.cancel(force=True)
            logger.info("job.handle.cancelled job=%s id=%s", job, id)
            return JobOutcome.cancelled
        except JobAlreadyProcessing:
            logger.info("job.handle.already_processing job=%s id=%s", job, id)
            return JobOutcome.already_processing
        except Exception as e:
            logger.exception("job.handle.error job=%s id=%s", job, id)
            state = await self.progress()
            await state.fail(str(e))
            await self.on_job_error(e)
            raise
