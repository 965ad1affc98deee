"""Run blocking database work on a bounded worker pool and await the result from the event loop."""

import logging
from collections.abc import Callable
from functools import partial
from typing import TypeVar

import anyio
import anyio.to_thread

from crudkit.core.errors import ApiError, BlockingError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BlockingExecutor:
    """
    Dispatch interface between async handlers and blocking repository calls.

    At most `max_workers` calls run at once; further callers wait on the limiter
    without holding the event loop. ApiError raised by the callable is the
    callable's own error result and is re-raised unchanged. Anything else, or a
    call made after shutdown(), surfaces as BlockingError.

    Cancelling the awaiting task abandons the result only: the worker thread
    runs the callable to completion.
    """

    def __init__(self, max_workers: int) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._limiter: anyio.CapacityLimiter | None = None
        self._max_workers = max_workers
        self._closed = False

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def closed(self) -> bool:
        return self._closed

    def _get_limiter(self) -> anyio.CapacityLimiter:
        # Created on first use so it belongs to the running event loop.
        if self._limiter is None:
            self._limiter = anyio.CapacityLimiter(self._max_workers)
        return self._limiter

    async def run(self, func: Callable[..., T], *args, **kwargs) -> T:
        if self._closed:
            raise BlockingError()
        call = partial(func, *args, **kwargs)
        try:
            return await anyio.to_thread.run_sync(call, limiter=self._get_limiter())
        except ApiError:
            raise
        except Exception as e:
            logger.exception(
                "Blocking call %s failed: %s",
                getattr(func, "__qualname__", repr(func)),
                e,
            )
            raise BlockingError() from e

    def shutdown(self) -> None:
        """Refuse new work; calls already running finish on their threads."""
        if not self._closed:
            self._closed = True
            logger.info("Blocking executor shut down")
