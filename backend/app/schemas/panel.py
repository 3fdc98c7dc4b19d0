from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from app.formatting import MarketTone, Polarity

PanelStatus = Literal["loading", "error", "empty", "prompt", "ready"]
ViewName = Literal["quote", "overview", "market_status", "top_movers"]


class Metric(BaseModel):
    label: str
    value: str


class QuoteContent(BaseModel):
    symbol: str
    price: str
    change: str
    change_percent: str
    polarity: Polarity
    color: str
    as_of: str
    metrics: list[Metric] = Field(default_factory=list)


class OverviewContent(BaseModel):
    name: str
    symbol: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    description: Optional[str] = None
    headline_metrics: list[Metric] = Field(default_factory=list)
    detail_metrics: list[Metric] = Field(default_factory=list)
    website: Optional[str] = None


class MarketRow(BaseModel):
    label: str
    current_status: str
    tone: MarketTone
    color: str
    trading_hours: str
    notes: Optional[str] = None


class MarketStatusContent(BaseModel):
    markets: list[MarketRow] = Field(default_factory=list)


class MoverRow(BaseModel):
    ticker: str
    price: str
    change_amount: str
    change_percentage: str
    polarity: Polarity
    color: str
    volume: str


class MoverTab(BaseModel):
    key: Literal["gainers", "losers", "active"]
    label: str
    rows: list[MoverRow] = Field(default_factory=list)


class TopMoversContent(BaseModel):
    tabs: list[MoverTab] = Field(default_factory=list)
    last_updated: Optional[str] = None


PanelContent = Union[QuoteContent, OverviewContent, MarketStatusContent, TopMoversContent]


class Panel(BaseModel):
    view: ViewName
    title: str
    status: PanelStatus
    busy: bool = False
    message: Optional[str] = None
    error: Optional[str] = None
    content: Optional[PanelContent] = None


class DashboardResponse(BaseModel):
    symbol: Optional[str] = None
    panels: list[Panel] = Field(default_factory=list)


class SymbolRequest(BaseModel):
    symbol: str = ""


class QueryResponse(BaseModel):
    success: bool
    data: Optional[dict] = None
    error: Optional[str] = None
    kind: Optional[str] = None
