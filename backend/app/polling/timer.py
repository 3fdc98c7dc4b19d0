from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class PollingTimer:
    """Repeating task that awaits ``callback`` every ``interval_seconds``.

    The first call happens one interval after ``start()``. The handle is
    released with ``cancel()`` or by leaving an ``async with`` block.
    """

    def __init__(
        self,
        interval_seconds: float,
        callback: Callable[[], Awaitable[None]],
        name: str = "polling-timer",
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive.")
        self.interval_seconds = interval_seconds
        self._callback = callback
        self._name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.active:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self._name)

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def __aenter__(self) -> PollingTimer:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.cancel()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self._callback()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Error in %s tick", self._name)
