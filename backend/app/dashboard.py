from __future__ import annotations

import asyncio
import logging
from typing import Any

from app.config.settings import PollingSettings
from app.polling.consumer import PollingConsumer
from app.providers.alphavantage import AlphaVantageClient
from app.schemas.market import (
    CompanyOverview,
    GlobalQuoteResponse,
    MarketStatusResponse,
    TopMoversResponse,
)
from app.schemas.panel import Panel, ViewName
from app.schemas.provider import Failure, Result
from app.views.render import (
    render_market_status,
    render_overview,
    render_quote,
    render_top_movers,
)

logger = logging.getLogger(__name__)

VIEW_NAMES: tuple[ViewName, ...] = ("quote", "overview", "market_status", "top_movers")


def normalize_symbol(symbol: str | None) -> str | None:
    cleaned = (symbol or "").strip().upper()
    return cleaned or None


class Dashboard:
    """The four dashboard views, wired to one Alpha Vantage client."""

    def __init__(self, client: AlphaVantageClient, polling: PollingSettings) -> None:
        self.client = client
        self.polling = polling
        self.quote: PollingConsumer[GlobalQuoteResponse] = PollingConsumer(
            "stock quote",
            self._fetch_quote,
            interval_seconds=polling.quote_interval_seconds,
            requires_parameter=True,
            supports_refresh=True,
        )
        self.overview: PollingConsumer[CompanyOverview] = PollingConsumer(
            "company overview",
            self._fetch_overview,
            interval_seconds=polling.overview_interval_seconds,
            requires_parameter=True,
        )
        self.market_status: PollingConsumer[MarketStatusResponse] = PollingConsumer(
            "market status",
            self._fetch_market_status,
            interval_seconds=polling.market_status_interval_seconds,
        )
        self.top_movers: PollingConsumer[TopMoversResponse] = PollingConsumer(
            "top movers",
            self._fetch_top_movers,
            interval_seconds=polling.top_movers_interval_seconds,
        )
        self._symbol: str | None = None
        self._started = False

    @property
    def symbol(self) -> str | None:
        return self._symbol

    def consumer(self, view: str) -> PollingConsumer[Any]:
        consumers: dict[str, PollingConsumer[Any]] = {
            "quote": self.quote,
            "overview": self.overview,
            "market_status": self.market_status,
            "top_movers": self.top_movers,
        }
        try:
            return consumers[view]
        except KeyError:
            raise KeyError(f"Unknown view: {view}") from None

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        self.market_status.mount()
        self.top_movers.mount()
        self.quote.mount(self._symbol)
        self.overview.mount(self._symbol)
        logger.info("Dashboard started")

    def select_symbol(self, symbol: str | None) -> str | None:
        self._symbol = normalize_symbol(symbol)
        if self._started:
            self.quote.set_parameter(self._symbol)
            self.overview.set_parameter(self._symbol)
        logger.info("Selected symbol %s", self._symbol)
        return self._symbol

    def refresh(self, view: str) -> bool:
        consumer = self.consumer(view)
        if not consumer.supports_refresh:
            return False
        consumer.refresh()
        return True

    def render(self, view: str) -> Panel:
        if view == "quote":
            return render_quote(self.quote.state, self.quote.parameter)
        if view == "overview":
            return render_overview(self.overview.state, self.overview.parameter)
        if view == "market_status":
            return render_market_status(self.market_status.state)
        if view == "top_movers":
            return render_top_movers(self.top_movers.state, self.polling.top_movers_limit)
        raise KeyError(f"Unknown view: {view}")

    def render_all(self) -> list[Panel]:
        return [self.render(view) for view in VIEW_NAMES]

    async def settle(self) -> None:
        await asyncio.gather(*(self.consumer(view).settle() for view in VIEW_NAMES))

    async def close(self) -> None:
        for view in VIEW_NAMES:
            await self.consumer(view).close()
        # Fetches already issued still hold the client; drain them before it is released.
        await self.settle()
        logger.info("Dashboard closed")

    async def __aenter__(self) -> Dashboard:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _fetch_quote(self, symbol: str | None) -> Result[GlobalQuoteResponse]:
        if not symbol:
            return Failure(message="No symbol selected.")
        return await self.client.get_stock_quote(symbol)

    async def _fetch_overview(self, symbol: str | None) -> Result[CompanyOverview]:
        if not symbol:
            return Failure(message="No symbol selected.")
        return await self.client.get_company_overview(symbol)

    async def _fetch_market_status(self, _: str | None) -> Result[MarketStatusResponse]:
        return await self.client.get_market_status()

    async def _fetch_top_movers(self, _: str | None) -> Result[TopMoversResponse]:
        return await self.client.get_top_movers()
