from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class AlphaVantageModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _null_means_default(cls, data: Any) -> Any:
        # null falls back to the field default ("" for text, [] for lists).
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class GlobalQuote(AlphaVantageModel):
    symbol: Optional[str] = Field(default=None, alias="01. symbol")
    open: Optional[str] = Field(default=None, alias="02. open")
    high: Optional[str] = Field(default=None, alias="03. high")
    low: Optional[str] = Field(default=None, alias="04. low")
    price: Optional[str] = Field(default=None, alias="05. price")
    volume: Optional[str] = Field(default=None, alias="06. volume")
    latest_trading_day: Optional[str] = Field(default=None, alias="07. latest trading day")
    previous_close: Optional[str] = Field(default=None, alias="08. previous close")
    change: Optional[str] = Field(default=None, alias="09. change")
    change_percent: Optional[str] = Field(default=None, alias="10. change percent")


class GlobalQuoteResponse(AlphaVantageModel):
    global_quote: Optional[GlobalQuote] = Field(default=None, alias="Global Quote")

    @field_validator("global_quote", mode="before")
    @classmethod
    def _empty_quote_is_absent(cls, value: Any) -> Any:
        # Unknown symbols come back as {"Global Quote": {}}.
        if isinstance(value, dict) and not value:
            return None
        return value


class CompanyOverview(AlphaVantageModel):
    symbol: Optional[str] = Field(default=None, alias="Symbol")
    name: Optional[str] = Field(default=None, alias="Name")
    description: Optional[str] = Field(default=None, alias="Description")
    exchange: Optional[str] = Field(default=None, alias="Exchange")
    sector: Optional[str] = Field(default=None, alias="Sector")
    industry: Optional[str] = Field(default=None, alias="Industry")
    market_capitalization: Optional[str] = Field(default=None, alias="MarketCapitalization")
    pe_ratio: Optional[str] = Field(default=None, alias="PERatio")
    dividend_yield: Optional[str] = Field(default=None, alias="DividendYield")
    eps: Optional[str] = Field(default=None, alias="EPS")
    beta: Optional[str] = Field(default=None, alias="Beta")
    week_52_high: Optional[str] = Field(default=None, alias="52WeekHigh")
    week_52_low: Optional[str] = Field(default=None, alias="52WeekLow")
    moving_average_50_day: Optional[str] = Field(default=None, alias="50DayMovingAverage")
    moving_average_200_day: Optional[str] = Field(default=None, alias="200DayMovingAverage")

    @property
    def is_empty(self) -> bool:
        return not (self.symbol or self.name)


class MarketStatusEntry(AlphaVantageModel):
    market_type: str = ""
    region: str = ""
    primary_exchanges: str = ""
    local_open: str = ""
    local_close: str = ""
    current_status: str = ""
    notes: Optional[str] = None


class MarketStatusResponse(AlphaVantageModel):
    endpoint: Optional[str] = None
    markets: list[MarketStatusEntry] = Field(default_factory=list)


class StockMover(AlphaVantageModel):
    ticker: str = ""
    price: str = ""
    change_amount: str = ""
    change_percentage: str = ""
    volume: str = ""


class TopMoversResponse(AlphaVantageModel):
    metadata: Optional[str] = None
    last_updated: Optional[str] = None
    top_gainers: list[StockMover] = Field(default_factory=list)
    top_losers: list[StockMover] = Field(default_factory=list)
    most_actively_traded: list[StockMover] = Field(default_factory=list)
