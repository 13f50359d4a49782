"""
Debounced autosave.

A single-slot timer: every schedule() cancels the pending timer and starts
a new one, so a burst of edits produces one write carrying the latest
state. Writes run one at a time in issue order, so an older state never
lands after a newer one.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, Optional, Set, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class DebouncedSaver(Generic[T]):
    """Debounce writes of a state value through an async persist callable."""

    def __init__(self, persist: Callable[[T], Awaitable[Any]], delay: float = 1.0):
        self._persist = persist
        self.delay = delay
        self._timer: Optional[asyncio.Task] = None
        self._latest: Optional[T] = None
        self._lock = asyncio.Lock()
        self._in_flight: Set[asyncio.Task] = set()
        self.saves = 0
        self.failures = 0

    @property
    def pending(self) -> bool:
        """A timer is armed and has not fired yet."""
        return self._timer is not None and not self._timer.done()

    @property
    def writing(self) -> bool:
        return bool(self._in_flight)

    def schedule(self, state: T) -> None:
        self._latest = state
        if self._timer is not None:
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().create_task(self._wait_and_write())

    def cancel(self) -> None:
        """Drop the pending timer. Writes already issued still run."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def flush(self) -> None:
        """Write the pending state now, then wait for every write to finish."""
        if self.pending:
            self.cancel()
            self._issue(self._latest)
        await self.wait_idle()

    async def wait_idle(self) -> None:
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    async def run_exclusive(self, write: Callable[[], Awaitable[R]]) -> R:
        """
        Run a write outside the debounce, in line with autosaves.
        Autosaves issued while it runs land after it. Errors propagate.
        """
        async with self._lock:
            return await write()

    async def _wait_and_write(self) -> None:
        await asyncio.sleep(self.delay)
        self._timer = None
        self._issue(self._latest)

    def _issue(self, state: T) -> None:
        task = asyncio.get_running_loop().create_task(self._write(state))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _write(self, state: T) -> None:
        async with self._lock:
            try:
                await self._persist(state)
                self.saves += 1
            except Exception as e:
                # The next edit schedules another write
                self.failures += 1
                logger.warning(f"Autosave failed: {e}")
