# core/job_state.py
import inspect
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Sequence

from pydantic import BaseModel, PrivateAttr

from core.progress_split import ProgressSplit
from model.job import JobStatus
from util.errors import JobAlreadyProcessing, JobCannotBeCancelled, JobWasCancelled
from util.functions import clamp

if TYPE_CHECKING:
    from service.progress_manager import JobProgressManager

logger = logging.getLogger(__name__)

Cleanup = Callable[[], Optional[Awaitable[None]]]


async def _run_cleanup(cleanup: Optional[Cleanup]) -> None:
    if cleanup is None:
        return
    outcome = cleanup()
    if inspect.isawaitable(outcome):
        await outcome


class JobState(BaseModel):
    """
    Status, progress and (partial) result of one job instance, keyed by
    (job, id).

    Every mutating call re-reads the stored record, applies its change and
    writes the whole record back. There is no locking: the last writer wins,
    so only one writer per (job, id) should be active at a time.
    """

    id: str
    job: str
    status: JobStatus = JobStatus.pending
    progress: float = 0.0
    error: Optional[str] = None
    result: Any = None

    _manager: Any = PrivateAttr(default=None)

    def bind(self, manager: "JobProgressManager") -> "JobState":
        self._manager = manager
        return self

    @property
    def manager(self) -> "JobProgressManager":
        if self._manager is None:
            raise RuntimeError(f"JobState {self.job}:{self.id} is not bound to a manager")
        return self._manager

    async def _save(self) -> None:
        await self.manager.save_job_progress(self)

    async def refresh(self) -> "JobState":
        """Copy the stored values into this instance (missing record: no-op)."""
        stored = await self.manager.get_job_progress(self.job, self.id)
        if stored is not None:
            self.status = stored.status
            self.progress = stored.progress
            self.result = stored.result
            self.error = stored.error
        return self

    async def update(self, progress: float, result: Any = None) -> "JobState":
        """
        Set the absolute progress (0..1) and optionally a partial result.

        A pending job becomes processing. Finished jobs keep their status, so
        late updates from a cancelled job that is still winding down do not
        bring it back to life.
        """
        await self.refresh()

        if self.status.is_pending():
            self.status = JobStatus.processing

        self.progress = clamp(float(progress), 0.0, 1.0)
        self.result = result if result is not None else self.result

        await self._save()
        return self

    async def update_with_steps(
        self,
        completed: int,
        total: int,
        result: Any = None,
        maximum: Optional[float] = None,
        base: Optional[float] = None,
    ) -> "JobState":
        """
        Progress from a step count, for use inside loops.

        `base` and `maximum` are percentages: this call moves progress
        somewhere between base and base + maximum (never past 100).
        """
        base_pct = clamp(base if base is not None else 0.0, 0.0, 100.0)
        max_pct = clamp(
            maximum if maximum is not None else 100.0, 0.0, 100.0 - base_pct
        )

        # A total below completed would yield more than 100%.
        total = max(completed, total)
        fraction = 0.0 if total == 0 else completed / total

        percentage = base_pct + max_pct * fraction
        if percentage > 100.0:
            # Reported, then clamped.
            logger.error(
                "job.progress.overflow job=%s id=%s total=%s",
                self.job,
                self.id,
                percentage,
            )
            percentage = 100.0

        return await self.update(percentage / 100.0, result=result)

    async def complete(self, result: Any = None) -> "JobState":
        await self.refresh()

        self.status = JobStatus.completed
        self.progress = 1.0
        self.result = result if result is not None else self.result

        await self._save()
        return self

    async def fail(self, error: str) -> "JobState":
        """Mark as failed. Progress and result stay as they were."""
        await self.refresh()

        self.error = error
        self.status = JobStatus.failed

        await self._save()
        return self

    async def reset(self) -> "JobState":
        """
        Back to pending with progress, result and error cleared.

        Does not check whether the job is executing right now; doing this
        while it runs leaves the state undefined.
        """
        await self.refresh()

        self.error = None
        self.progress = 0.0
        self.result = None
        self.status = JobStatus.pending

        await self._save()
        return self

    async def cancel(self, force: bool = False) -> "JobState":
        """
        Mark as cancelled. Does not interrupt anything, so it is safe to call
        from outside the job. Raises JobCannotBeCancelled when the
        cancellation policy says no, unless `force` is set.
        """
        if not force and not await self.can_be_cancelled():
            logger.info("job.cancel.denied job=%s id=%s", self.job, self.id)
            raise JobCannotBeCancelled(self)

        await self.refresh()
        self.status = JobStatus.cancelled
        await self._save()

        logger.info("job.cancelled job=%s id=%s", self.job, self.id)
        return self

    async def cancel_and_exit(self) -> None:
        """cancel(), then unwind the running job. Only for use inside jobs."""
        await self.cancel()
        raise JobWasCancelled(self)

    async def exit_if_cancelled(self, cleanup: Optional[Cleanup] = None) -> "JobState":
        """Checkpoint: raise JobWasCancelled if someone cancelled the job."""
        await self.refresh()
        if not self.status.is_cancelled():
            return self

        await _run_cleanup(cleanup)
        raise JobWasCancelled(self)

    async def exit_if_processing(
        self, cleanup: Optional[Cleanup] = None
    ) -> "JobState":
        """Guard at job start against a second concurrent execution."""
        await self.refresh()
        if not self.status.is_processing():
            return self

        await _run_cleanup(cleanup)
        raise JobAlreadyProcessing(self)

    async def can_be_cancelled(self) -> bool:
        return await self.manager.can_be_cancelled(self.job, self.id)

    def split(self, steps: int | Sequence[float]) -> list[ProgressSplit]:
        """
        Divide 0..100% into consecutive slices.

        - int: that many equal slices; the last one takes whatever is left
          up to 100 so float drift never leaves the job short.
        - sequence of weights: slices proportional to the weights, which
          need not add up to 100 ([25, 50, 50] -> 20, 40, 40).
        """
        if isinstance(steps, int):
            count = max(1, steps)
            sizes = [100.0 / count] * count
        else:
            weights = [float(w) for w in steps]
            count = len(weights)
            weight_sum = sum(weights)
            if count and weight_sum == 0:
                # Degenerate weights: fall back to equal slices.
                sizes = [100.0 / count] * count
            else:
                fraction = weight_sum / 100.0
                sizes = [w / fraction for w in weights]

        splits: list[ProgressSplit] = []
        running = 0.0
        for i, size in enumerate(sizes):
            is_last = i == count - 1
            if is_last:
                size = 100.0 - running
            splits.append(
                ProgressSplit(state=self, base=running, size=size, completes=is_last)
            )
            running += size
        return splits
