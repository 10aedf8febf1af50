"""
Detached background tasks - work that must not hold up the HTTP response.

spawn() wraps the coroutine in an error boundary so a failure is logged and
never propagates, and keeps a strong reference until the task finishes
(the event loop only holds weak references to tasks).
"""
import asyncio
import logging
from typing import Awaitable

logger = logging.getLogger(__name__)

_background_tasks: set[asyncio.Task] = set()


async def _guarded(coro: Awaitable, name: str) -> None:
    try:
        await coro
    except asyncio.CancelledError:
        logger.warning("Background task cancelled: %s", name)
        raise
    except Exception as e:
        logger.error("Background task failed: %s: %s", name, str(e))


def spawn(coro: Awaitable, name: str) -> None:
    """Run a coroutine in the background. The caller gets no handle."""
    task = asyncio.create_task(_guarded(coro, name), name=name)
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)


def pending_count() -> int:
    return len(_background_tasks)


async def drain(timeout: float = 10.0) -> None:
    """Wait for in-flight tasks, cancelling any still running after `timeout`."""
    if not _background_tasks:
        return
    tasks = list(_background_tasks)
    logger.info("Waiting for %d background tasks...", len(tasks))
    done, pending = await asyncio.wait(tasks, timeout=timeout)
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
        logger.warning("Cancelled %d background tasks at shutdown", len(pending))
