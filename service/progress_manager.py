# service/progress_manager.py
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from config.progress import DEFAULT_CACHE_PREFIX, ProgressSettings
from core.average_duration import AverageDuration
from core.job_state import JobState
from model.job import JobStatus
from repository.namespaces import AVERAGE
from repository.state_store import StateStore
from util.functions import short_hash

logger = logging.getLogger(__name__)


class JobProgressManager:
    """
    Reads and writes job state for one job type.

    Flow:
    - Keys are `prefix:hash(job):id`, or whatever `make_cache_key` returns.
    - Reads never raise: broken or unreachable entries count as missing.
    - Writes overwrite the whole record and refresh its TTL.
    """

    def __init__(
        self,
        settings: ProgressSettings,
        store: StateStore,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._settings = settings
        self._store = store
        self._clock = clock

    @property
    def settings(self) -> ProgressSettings:
        return self._settings

    def get_cache_duration(self) -> int:
        return self._settings.cache_duration

    def get_cancel_threshold(self) -> float:
        return self._settings.cancel_threshold

    def get_cache_prefix(self) -> str:
        prefix = self._settings.cache_prefix
        if callable(prefix):
            prefix = prefix()
        return prefix or DEFAULT_CACHE_PREFIX

    def compose_cache_key(self, job: str, id: str) -> str:
        if self._settings.make_cache_key is not None:
            return self._settings.make_cache_key(job, id)
        return f"{self.get_cache_prefix()}:{short_hash(job)}:{id}"

    def compose_average_key(self, job: str) -> str:
        return f"{self.get_cache_prefix()}:{short_hash(job)}:{AVERAGE}"

    # ---------------- Job state ----------------

    async def create_pending_state(self, job: str, id: str) -> JobState:
        state = JobState(id=id, job=job, status=JobStatus.pending, progress=0.0)
        state.bind(self)
        await self.save_job_progress(state)
        return state

    async def save_job_progress(self, state: JobState) -> None:
        await self._store.put(
            self.compose_cache_key(state.job, state.id),
            state.model_dump_json(),
            self.get_cache_duration(),
        )

    async def get_job_progress(self, job: str, id: str) -> Optional[JobState]:
        key = self.compose_cache_key(job, id)
        try:
            raw = await self._store.get(key)
            if raw is None:
                return None
            state = JobState.model_validate_json(raw)
        except Exception:
            # Unreadable entries count as missing.
            logger.exception("job.progress.read.error key=%s", key)
            return None
        return state.bind(self)

    async def can_be_cancelled(self, job: str, id: str) -> bool:
        state = await self.get_job_progress(job, id)

        if state is None or state.status in (JobStatus.pending, JobStatus.cancelled):
            return True
        if state.status is JobStatus.processing:
            return state.progress < self.get_cancel_threshold()
        return False

    async def lock(self, job: str, id: str) -> Optional[JobState]:
        """
        Pending state for (job, id), or None while another one is still
        pending or processing. Finished states are replaced.

        Only as atomic as the store's get-then-put.
        """
        state = await self.get_job_progress(job, id)
        if state is not None and state.status.is_running():
            return None
        return await self.create_pending_state(job, id)

    # ---------------- Average durations ----------------

    async def get_average(self, job: str) -> Optional[AverageDuration]:
        key = self.compose_average_key(job)
        try:
            raw = await self._store.get(key)
            if raw is None:
                return None
            return AverageDuration.model_validate_json(raw)
        except Exception:
            logger.exception("job.average.read.error key=%s", key)
            return None

    async def get_average_duration(self, job: str) -> Optional[timedelta]:
        average = await self.get_average(job)
        return average.interval() if average is not None else None

    async def add_to_average_duration(self, job: str, duration: timedelta) -> None:
        resolution = self._settings.average_resolution
        if resolution is None:
            return

        now = self._clock()
        average = await self.get_average(job)
        if average is None:
            average = AverageDuration.new(resolution, duration, now=now)
        else:
            average.add(duration, now=now)

        # Kept until the next reset boundary, after which it is stale anyway.
        ttl = max(1, math.ceil((average.reset_at - now).total_seconds()))
        await self._store.put(
            self.compose_average_key(job), average.model_dump_json(), ttl
        )
        logger.debug(
            "job.average.updated job=%s samples=%d", job, len(average.durations)
        )
