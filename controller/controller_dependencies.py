# controller/controller_dependencies.py
from fastapi import Request
from service.progress_registry import ProgressRegistry
from service.progress_service import ProgressService


def get_registry(request: Request) -> ProgressRegistry:
    # Built in main.lifespan; tests may put their own on app.state.
    return request.app.state.registry


def get_progress_service(request: Request) -> ProgressService:
    return ProgressService(get_registry(request))
