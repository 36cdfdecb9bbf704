# service/progress_registry.py
import logging
from typing import Any, Callable, Mapping, Optional
from datetime import datetime, timezone

from config.progress import ProgressSettings
from repository.state_store import StateStore
from service.progress_manager import JobProgressManager
from util.functions import job_type_name

logger = logging.getLogger(__name__)


class ProgressRegistry:
    """
    Maps job types to their ProgressSettings and managers.

    Flow:
    - register() once per job type, at start-up; unregistered types fall
      back to `defaults`.
    - settings_for() / manager_for() resolve once and cache the result.
    - `stores` maps cache store names (ProgressSettings.cache_store) to
      StateStore instances.
    """

    def __init__(
        self,
        stores: Mapping[str, StateStore],
        defaults: Optional[ProgressSettings] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._stores = dict(stores)
        self._defaults = defaults or ProgressSettings.from_env()
        self._clock = clock
        self._settings: dict[str, ProgressSettings] = {}
        self._managers: dict[str, JobProgressManager] = {}

    def register(
        self,
        job_type: Any,
        settings: Optional[ProgressSettings] = None,
        **overrides: Any,
    ) -> ProgressSettings:
        """
        Usage:
          registry.register(ReportJob, cancel_threshold=0.5)
          registry.register("reports.export", ProgressSettings(cache_duration=60))
        """
        name = job_type_name(job_type)
        base = settings or self._defaults
        # Validated here so bad overrides fail at start-up, not on first use.
        resolved = ProgressSettings(**{**base.model_dump(), **overrides})

        if resolved.cache_store not in self._stores:
            raise KeyError(f"Cache store '{resolved.cache_store}' is not registered")

        self._settings[name] = resolved
        self._managers.pop(name, None)
        logger.info(
            "job.registry.registered job=%s store=%s threshold=%s",
            name,
            resolved.cache_store,
            resolved.cancel_threshold,
        )
        return resolved

    def is_registered(self, job_type: Any) -> bool:
        return job_type_name(job_type) in self._settings

    def settings_for(self, job_type: Any) -> ProgressSettings:
        return self._settings.get(job_type_name(job_type), self._defaults)

    def manager_for(self, job_type: Any) -> JobProgressManager:
        name = job_type_name(job_type)
        manager = self._managers.get(name)
        if manager is None:
            settings = self.settings_for(name)
            try:
                store = self._stores[settings.cache_store]
            except KeyError:
                raise KeyError(
                    f"Cache store '{settings.cache_store}' is not registered"
                ) from None
            manager = JobProgressManager(settings, store, clock=self._clock)
            self._managers[name] = manager
        return manager
