# core/progress_split.py
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from util.functions import clamp

if TYPE_CHECKING:
    from core.job_state import JobState


@dataclass
class ProgressSplit:
    """
    Slice of a job's 0..100% range: `size` percentage points from `base`.

    If `completes` is set, finishing this split finishes the whole job,
    whatever the arithmetic adds up to.
    """

    state: "JobState"
    base: float
    size: float
    completes: bool = False

    @property
    def end(self) -> float:
        return min(100.0, self.base + self.size)

    async def update(self, progress: float, result: Any = None) -> "JobState":
        """Local progress (0..1) inside this slice."""
        local = clamp(float(progress), 0.0, 1.0)
        percentage = min(100.0, self.base + self.size * local)
        return await self.state.update(percentage / 100.0, result=result)

    async def update_with_steps(
        self, completed: int, total: int, result: Any = None
    ) -> "JobState":
        return await self.state.update_with_steps(
            completed,
            total,
            result=result,
            maximum=self.size,
            base=self.base,
        )

    async def complete(self, result: Any = None) -> "JobState":
        if self.completes:
            return await self.state.complete(result=result)
        return await self.state.update(self.end / 100.0, result=result)
