"""In-process background task runner.

Runs fire-and-forget work (emails, deferred checks) off the request path.
Each task is bounded by a timeout and its failures are logged, never raised
back to the caller. Work that is still pending at shutdown is cancelled.
"""

import asyncio
from collections.abc import Awaitable, Callable

import structlog

logger = structlog.get_logger()

DEFAULT_TASK_TIMEOUT_SECONDS = 30.0


class BackgroundTaskRunner:
    """Tracks asyncio tasks scheduled for background execution.

    Keyed tasks are debounced: scheduling a key whose task is still waiting
    pushes that task's start back by ``delay`` instead of adding a second
    task. Once a keyed task has started, the key is free again, so work
    scheduled while it runs gets a task of its own.
    """

    def __init__(self, default_timeout: float = DEFAULT_TASK_TIMEOUT_SECONDS) -> None:
        self._default_timeout = default_timeout
        self._tasks: set[asyncio.Task[None]] = set()
        # key -> loop time at which the waiting task may start
        self._deadlines: dict[str, float] = {}
        self._closed = False

    @property
    def pending(self) -> int:
        """Number of tasks that have not finished yet."""
        return len(self._tasks)

    def is_scheduled(self, key: str) -> bool:
        """Check whether a keyed task is still waiting to start."""
        return key in self._deadlines

    def schedule(
        self,
        name: str,
        coro_factory: Callable[[], Awaitable[None]],
        delay: float = 0.0,
        timeout: float | None = None,
        key: str | None = None,
    ) -> bool:
        """Schedule ``coro_factory()`` to run after ``delay`` seconds.

        When ``key`` is given and a task with the same key has not started
        yet, its start is moved to ``delay`` seconds from now and False is
        returned.
        """
        if self._closed:
            logger.warning("background_task_rejected", task=name, reason="runner_closed")
            return False

        deadline = asyncio.get_running_loop().time() + delay
        if key is not None and key in self._deadlines:
            self._deadlines[key] = max(self._deadlines[key], deadline)
            logger.debug("background_task_postponed", task=name, key=key)
            return False

        if key is not None:
            self._deadlines[key] = deadline

        task = asyncio.create_task(
            self._run(name, coro_factory, delay, timeout or self._default_timeout, key),
            name=name,
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True

    async def drain(self) -> None:
        """Wait until every scheduled task, including ones scheduled meanwhile, is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel pending tasks and wait for them to finish."""
        self._closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info("background_tasks_cancelled", count=len(tasks))

    async def _wait_for_deadline(self, key: str) -> None:
        loop = asyncio.get_running_loop()
        try:
            remaining = self._deadlines[key] - loop.time()
            while remaining > 0:
                await asyncio.sleep(remaining)
                remaining = self._deadlines[key] - loop.time()
        finally:
            # Free the key before the work starts.
            del self._deadlines[key]

    async def _run(
        self,
        name: str,
        coro_factory: Callable[[], Awaitable[None]],
        delay: float,
        timeout: float,
        key: str | None,
    ) -> None:
        if key is not None:
            await self._wait_for_deadline(key)
        elif delay > 0:
            await asyncio.sleep(delay)
        try:
            await asyncio.wait_for(coro_factory(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("background_task_timed_out", task=name, timeout=timeout)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("background_task_failed", task=name)
