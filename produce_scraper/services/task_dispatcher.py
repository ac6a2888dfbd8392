from typing import Any, Awaitable, Callable, Coroutine, Optional, Set
import asyncio
import logging

logger = logging.getLogger(__name__)

class BackgroundDispatcher:
    """Runs detached jobs as tracked asyncio tasks.

    Tasks are held in a set until they finish so they cannot be garbage
    collected mid-run, and every exception that escapes a task is logged.
    """

    def __init__(self):
        self._background_tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._background_tasks)

    def dispatch(self, coro: Coroutine[Any, Any, Any], name: Optional[str] = None) -> asyncio.Task:
        """Schedule a coroutine on the running loop and track it."""
        task = asyncio.create_task(coro, name=name)
        self._background_tasks.add(task)
        task.add_done_callback(self._task_done_callback)
        logger.debug(f"Dispatched background task {task.get_name()} ({self.pending} in flight)")
        return task

    async def submit(self, func: Callable[..., Awaitable[Any]], *args: Any, name: Optional[str] = None) -> asyncio.Task:
        """Dispatch func(*args); usable as a post-response background hook."""
        return self.dispatch(func(*args), name=name)

    def _task_done_callback(self, task: asyncio.Task):
        """Remove task from set when done and report how it ended."""
        self._background_tasks.discard(task)
        if task.cancelled():
            logger.warning(f"Background task {task.get_name()} was cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Background task {task.get_name()} failed: {exc}", exc_info=exc)

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for in-flight tasks, cancelling whatever is still running after timeout."""
        if not self._background_tasks:
            return
        tasks = list(self._background_tasks)
        logger.info(f"Waiting up to {timeout}s for {len(tasks)} background task(s)")
        _, still_running = await asyncio.wait(tasks, timeout=timeout)

        for task in still_running:
            logger.warning(f"Abandoning background task {task.get_name()}; no status will be written")
            task.cancel()
        if still_running:
            await asyncio.gather(*still_running, return_exceptions=True)
