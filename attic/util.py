"""Miscellaneous utilities."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Optional, Set

_background_tasks: Set["asyncio.Future[Any]"] = set()


class Finally:
    """Runs an awaitable in the background when closed or dropped.

    Used to clean up external resources that are hard to tie to the
    lifetime of a single object. Use :meth:`cancel` to discard the
    awaitable without running it.
    """

    def __init__(self, awaitable: Awaitable[Any]) -> None:
        self._awaitable: Optional[Awaitable[Any]] = awaitable

    def cancel(self) -> None:
        """Discards the awaitable without running it."""
        awaitable, self._awaitable = self._awaitable, None
        if inspect.iscoroutine(awaitable):
            awaitable.close()

    def close(self) -> Optional["asyncio.Future[Any]"]:
        """Schedules the awaitable on the running loop and returns its task.

        Returns None if it was already scheduled or cancelled. Raises
        RuntimeError when no event loop is running.
        """
        if self._awaitable is None:
            return None
        loop = asyncio.get_running_loop()
        awaitable, self._awaitable = self._awaitable, None
        task = asyncio.ensure_future(awaitable, loop=loop)
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)
        return task

    def __enter__(self) -> Finally:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_awaitable", None) is None:
            return
        try:
            self.close()
        except RuntimeError:
            self.cancel()