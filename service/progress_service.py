# service/progress_service.py
import logging
from datetime import timedelta
from core.job_state import JobState
from model.api import AverageDurationResponse, JobProgressResponse
from service.progress_manager import JobProgressManager
from service.progress_registry import ProgressRegistry
from util.enums import ErrorMessage
from util.errors import AppError, JobCannotBeCancelled

logger = logging.getLogger(__name__)


class ProgressService:
    """
    Read side for observers (polling UIs, other services).

    Only registered job types are exposed, so arbitrary keys cannot be
    probed through the API.
    """

    def __init__(self, registry: ProgressRegistry) -> None:
        self._registry = registry

    def _manager(self, job_type: str) -> JobProgressManager:
        if not self._registry.is_registered(job_type):
            logger.warning("progress.unknown_type job=%s", job_type)
            raise AppError(
                ErrorMessage.UNKNOWN_JOB_TYPE.value.message,
                ErrorMessage.UNKNOWN_JOB_TYPE.value.http_status,
            )
        return self._registry.manager_for(job_type)

    async def _state(self, job_type: str, job_id: str) -> JobState:
        state = await self._manager(job_type).get_job_progress(job_type, job_id)
        if state is None:
            raise AppError(
                ErrorMessage.UNKNOWN_JOB.value.message,
                ErrorMessage.UNKNOWN_JOB.value.http_status,
            )
        return state

    @staticmethod
    async def _response(state: JobState) -> JobProgressResponse:
        return JobProgressResponse(
            job=state.job,
            id=state.id,
            status=state.status,
            progress=state.progress,
            error=state.error,
            result=state.result,
            cancellable=await state.can_be_cancelled(),
        )

    async def get_progress(self, job_type: str, job_id: str) -> JobProgressResponse:
        return await self._response(await self._state(job_type, job_id))

    async def cancel(self, job_type: str, job_id: str) -> JobProgressResponse:
        state = await self._state(job_type, job_id)
        try:
            await state.cancel()
        except JobCannotBeCancelled as e:
            logger.info(
                "progress.cancel.refused job=%s id=%s status=%s progress=%s",
                e.state.job,
                e.state.id,
                e.state.status.value,
                e.state.progress,
            )
            raise AppError(
                ErrorMessage.CANNOT_CANCEL.value.message,
                ErrorMessage.CANNOT_CANCEL.value.http_status,
            )
        logger.info("progress.cancel.ok job=%s id=%s", job_type, job_id)
        return await self._response(state)

    async def get_average(self, job_type: str) -> AverageDurationResponse:
        duration = await self._manager(job_type).get_average_duration(job_type)
        average_ms = None
        if duration is not None:
            average_ms = duration // timedelta(milliseconds=1)
        return AverageDurationResponse(job=job_type, averageMs=average_ms)
