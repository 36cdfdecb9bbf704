# model/api.py
from typing import Any
from pydantic import BaseModel
from model.job import JobStatus


class JobProgressResponse(BaseModel):
    job: str
    id: str
    status: JobStatus
    progress: float
    error: str | None = None
    result: Any = None
    cancellable: bool


class AverageDurationResponse(BaseModel):
    job: str
    averageMs: int | None = None
