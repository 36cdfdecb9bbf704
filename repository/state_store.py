# repository/state_store.py
import time
from typing import Callable, Optional, Protocol, runtime_checkable


@runtime_checkable
class StateStore(Protocol):
    """
    Key-value cache with TTL that holds serialized job state.

    lock() assumes get-then-put behaves atomically from the caller's point of
    view; implementations shared between processes must provide that.
    """

    async def get(self, key: str) -> Optional[str | bytes]: ...

    async def put(self, key: str, value: str, ttl: Optional[int]) -> None: ...


class InMemoryStateStore:
    """
    Process-local store. Entries expire `ttl` seconds after their last put;
    ttl=None keeps them until the process exits.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._data: dict[str, tuple[str, Optional[float]]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return value

    async def put(self, key: str, value: str, ttl: Optional[int]) -> None:
        expires_at = None if ttl is None else self._clock() + int(ttl)
        self._data[key] = (value, expires_at)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)
