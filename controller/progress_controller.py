# controller/progress_controller.py
from fastapi import APIRouter, Depends, status
from controller.controller_dependencies import get_progress_service
from model.api import AverageDurationResponse, JobProgressResponse
from service.progress_service import ProgressService
from util.constants import InternalURIs

progress_router = APIRouter()


# Registered before JOB_PROGRESS so "average" is not taken for a job id.
@progress_router.get(
    InternalURIs.JOB_AVERAGE,
    response_model=AverageDurationResponse,
    status_code=status.HTTP_200_OK,
)
async def get_average_duration(
    job_type: str,
    service: ProgressService = Depends(get_progress_service),
) -> AverageDurationResponse:
    return await service.get_average(job_type)


@progress_router.get(
    InternalURIs.JOB_PROGRESS,
    response_model=JobProgressResponse,
    status_code=status.HTTP_200_OK,
)
async def get_job_progress(
    job_type: str,
    job_id: str,
    service: ProgressService = Depends(get_progress_service),
) -> JobProgressResponse:
    return await service.get_progress(job_type, job_id)


@progress_router.post(
    InternalURIs.CANCEL_JOB,
    response_model=JobProgressResponse,
    status_code=status.HTTP_200_OK,
)
async def cancel_job(
    job_type: str,
    job_id: str,
    service: ProgressService = Depends(get_progress_service),
) -> JobProgressResponse:
    return await service.cancel(job_type, job_id)
