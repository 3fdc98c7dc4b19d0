from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from app.config.settings import ProviderSettings
from app.schemas.market import (
    CompanyOverview,
    GlobalQuoteResponse,
    MarketStatusResponse,
    TopMoversResponse,
)
from app.schemas.provider import Failure, FailureKind, QueryRequest, Result, Selector, Success

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Alpha Vantage answers with HTTP 200 and one of these keys when a call fails.
_FAILURE_KEYS: tuple[tuple[str, FailureKind], ...] = (
    ("Error Message", "api_error"),
    ("Information", "api_information"),
    ("Note", "api_note"),
)


def classify_payload(payload: Any) -> Failure | None:
    if not isinstance(payload, dict):
        return None
    for key, kind in _FAILURE_KEYS:
        if key in payload:
            return Failure(message=str(payload[key]), kind=kind)
    return None


class AlphaVantageClient:
    def __init__(
        self,
        config: ProviderSettings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.request_timeout_seconds)

    async def __aenter__(self) -> AlphaVantageClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def fetch(
        self,
        selector: Selector,
        arguments: Mapping[str, str] | None,
        model: type[ModelT],
    ) -> Result[ModelT]:
        request = QueryRequest(selector=selector, arguments=dict(arguments or {}))
        api_key = self._config.alphavantage_api_key
        if not api_key:
            return Failure(message="Alpha Vantage API key is not configured.", kind="missing_key")

        try:
            response = await self._http.get(
                self._config.alphavantage_base_url,
                params=request.to_params(api_key),
                timeout=self._config.request_timeout_seconds,
            )
        except httpx.HTTPError as exc:
            logger.warning("%s request failed: %s", selector.value, exc)
            return Failure(message=str(exc) or exc.__class__.__name__, kind="transport")
        except Exception as exc:
            logger.exception("%s request raised unexpectedly", selector.value)
            return Failure(message=str(exc) or "Unknown error", kind="transport")

        if not response.is_success:
            logger.warning("%s returned HTTP %s", selector.value, response.status_code)
            return Failure(message=f"API error: {response.status_code}", kind="http_error")

        try:
            payload = response.json()
        except ValueError:
            logger.warning("%s returned a body that is not JSON", selector.value)
            return Failure(message="Invalid JSON in API response.", kind="parse")

        failure = classify_payload(payload)
        if failure is not None:
            logger.warning("%s rejected by API: %s", selector.value, failure.message)
            return failure

        if not isinstance(payload, dict):
            return Failure(message="Unexpected API response shape.", kind="parse")

        try:
            return Success(payload=model.model_validate(payload))
        except ValidationError as exc:
            logger.warning("%s payload did not validate: %s", selector.value, exc)
            return Failure(message="Unexpected API response shape.", kind="parse")

    async def get_stock_quote(self, symbol: str) -> Result[GlobalQuoteResponse]:
        return await self.fetch(Selector.GLOBAL_QUOTE, {"symbol": symbol}, GlobalQuoteResponse)

    async def get_market_status(self) -> Result[MarketStatusResponse]:
        return await self.fetch(Selector.MARKET_STATUS, None, MarketStatusResponse)

    async def get_top_movers(self) -> Result[TopMoversResponse]:
        return await self.fetch(Selector.TOP_GAINERS_LOSERS, None, TopMoversResponse)

    async def get_company_overview(self, symbol: str) -> Result[CompanyOverview]:
        return await self.fetch(Selector.OVERVIEW, {"symbol": symbol}, CompanyOverview)
