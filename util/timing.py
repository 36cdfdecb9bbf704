# util/timing.py
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Iterator, Any
import logging

from util.functions import round_half_up


@dataclass
class Elapsed:
    # Exact wall time; rounding happens where it is consumed.
    duration: timedelta = field(default_factory=timedelta)

    @property
    def ms(self) -> int:
        return round_half_up(self.duration / timedelta(milliseconds=1))


@contextmanager
def timed(logger: logging.Logger, name: str, **kv: Any) -> Iterator[Elapsed]:
    """
    Usage:
      with timed(logger, "job.handle", job=job_type) as elapsed:
          ...
      elapsed.duration  # wall time once the block exits
    Emits one INFO on exit: "<name>.done ms=<int> key=val ..."
    """
    elapsed = Elapsed()
    t0 = time.perf_counter()
    try:
        yield elapsed
    finally:
        elapsed.duration = timedelta(seconds=time.perf_counter() - t0)
        suffix = "".join(f" {k}={v}" for k, v in kv.items())
        logger.info("%s.done ms=%d%s", name, elapsed.ms, suffix)
