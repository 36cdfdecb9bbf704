import routes
from contextlib import asynccontextmanager
from typing import Optional
from util.enums import Environment, Color
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from config.settings import settings
from config.cache import close_redis, get_redis
from repository.redis_state_store import RedisStateStore
from service.progress_registry import ProgressRegistry
from util.logger import init_logger


def build_registry() -> ProgressRegistry:
    """Redis-backed registry with every job type listed in JOB_PROGRESS_TYPES."""
    stores = {"default": RedisStateStore("default")}
    stores.update({name: RedisStateStore(name) for name in settings.CACHE_STORES})

    registry = ProgressRegistry(stores)
    for job_type, overrides in settings.JOB_PROGRESS_TYPES.items():
        registry.register(job_type, **overrides)
    return registry


def create_app(registry: Optional[ProgressRegistry] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(fastApi: FastAPI):
        init_logger()
        print(f"{Color.GREEN}Initializing...{Color.RESET}")
        if registry is None:
            try:
                # Warm Redis
                await get_redis()
            except Exception as e:
                print("Failed to connect to Redis:", e)
                raise
            fastApi.state.registry = build_registry()
        else:
            fastApi.state.registry = registry
        print(f"{Color.BLUE}Server Started{Color.RESET}")

        try:
            yield
        finally:
            try:
                await close_redis()
            except Exception as e:
                print("Error closing Redis:", e)

            print(f"{Color.RED}Server Shutdown{Color.RESET}")

    app: FastAPI = FastAPI(lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.ALLOWED_ORIGIN],
        allow_credentials=True,  # Allow cookies and other credentials
        allow_methods=["GET", "POST"],  # Allowed HTTP Methods
        allow_headers=["Authorization", "Content-Type", "Accept"],  # Allowed HTTP Headers
    )

    @app.get("/healthz")
    async def healthz():
        return {"ok": True}

    routes.register_routes(app)
    return app


app: FastAPI = create_app()

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=reload)
