from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, Optional, TypeVar

from app.polling.timer import PollingTimer
from app.schemas.provider import Failure, Result, Success

logger = logging.getLogger(__name__)

T = TypeVar("T")

Fetcher = Callable[[Optional[str]], Awaitable[Result[T]]]


@dataclasses.dataclass(frozen=True)
class ViewState(Generic[T]):
    data: Optional[T] = None
    is_loading: bool = True
    error_message: Optional[str] = None


class PollingConsumer(Generic[T]):
    """Owns one view's state, its fetch cycles and its refresh timer.

    Every issued fetch takes the next request token. A result is applied only
    while its token is the current one and the consumer is still open, so a
    response for a replaced symbol or a closed view is dropped.
    """

    def __init__(
        self,
        name: str,
        fetcher: Fetcher[T],
        interval_seconds: float | None = None,
        requires_parameter: bool = False,
        supports_refresh: bool = False,
    ) -> None:
        self.name = name
        self.interval_seconds = interval_seconds
        self.requires_parameter = requires_parameter
        self.supports_refresh = supports_refresh
        self._fetcher = fetcher
        self._state: ViewState[T] = ViewState()
        self._parameter: str | None = None
        self._token = 0
        self._timer: PollingTimer | None = None
        self._pending: set[asyncio.Task[None]] = set()
        self._mounted = False
        self._closed = False

    @property
    def state(self) -> ViewState[T]:
        return self._state

    @property
    def parameter(self) -> str | None:
        return self._parameter

    @property
    def needs_parameter(self) -> bool:
        return self.requires_parameter and not self._parameter

    @property
    def timer_active(self) -> bool:
        return self._timer is not None and self._timer.active

    @property
    def closed(self) -> bool:
        return self._closed

    def mount(self, parameter: str | None = None) -> None:
        if self._closed:
            raise RuntimeError(f"{self.name} consumer is closed.")
        if self._mounted:
            raise RuntimeError(f"{self.name} consumer is already mounted.")
        self._mounted = True
        self._retarget(_clean(parameter))

    def set_parameter(self, parameter: str | None) -> None:
        if self._closed:
            return
        cleaned = _clean(parameter)
        if not self._mounted:
            self.mount(cleaned)
            return
        if cleaned == self._parameter:
            return
        self._retarget(cleaned)

    def refresh(self) -> None:
        if self._closed or not self._mounted or self.needs_parameter:
            return
        self._state = dataclasses.replace(self._state, is_loading=True)
        self._issue()

    async def close(self) -> None:
        self._closed = True
        self._token += 1
        self._cancel_timer()

    async def settle(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def __aenter__(self) -> PollingConsumer[T]:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _retarget(self, parameter: str | None) -> None:
        self._cancel_timer()
        self._parameter = parameter
        self._token += 1
        if self.needs_parameter:
            self._state = ViewState(is_loading=False)
            return

        self._state = ViewState()
        self._issue()
        if self.interval_seconds:
            self._timer = PollingTimer(
                self.interval_seconds, self._tick, name=f"{self.name}-poll"
            )
            self._timer.start()

    async def _tick(self) -> None:
        if self._closed:
            return
        self._state = dataclasses.replace(self._state, is_loading=True)
        self._issue()

    def _issue(self) -> None:
        self._token += 1
        task = asyncio.get_running_loop().create_task(
            self._run_cycle(self._token, self._parameter), name=f"{self.name}-fetch"
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _run_cycle(self, token: int, parameter: str | None) -> None:
        try:
            result = await self._fetcher(parameter)
        except Exception:
            logger.exception("%s fetch raised", self.name)
            result = Failure(message=f"An error occurred while fetching {self.name}.")

        if self._closed or token != self._token:
            logger.debug("Dropping stale %s result for %r", self.name, parameter)
            return
        self._apply(result)

    def _apply(self, result: Result[T]) -> None:
        if isinstance(result, Success):
            self._state = ViewState(data=result.payload, is_loading=False, error_message=None)
            return
        message = result.message or f"Failed to fetch {self.name}."
        logger.warning("%s fetch failed: %s", self.name, message)
        self._state = ViewState(data=self._state.data, is_loading=False, error_message=message)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


def _clean(parameter: str | None) -> str | None:
    if parameter is None:
        return None
    cleaned = parameter.strip()
    return cleaned or None
