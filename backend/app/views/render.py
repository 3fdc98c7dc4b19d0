from __future__ import annotations

from collections.abc import Callable
from typing import Optional, TypeVar

from app.formatting import (
    POLARITY_COLORS,
    TONE_COLORS,
    change_polarity,
    company_website,
    format_currency,
    format_decimal,
    format_dividend_yield,
    format_market_cap,
    format_positive_ratio,
    format_volume,
    market_status_tone,
)
from app.polling.consumer import ViewState
from app.schemas.market import (
    CompanyOverview,
    GlobalQuoteResponse,
    MarketStatusResponse,
    StockMover,
    TopMoversResponse,
)
from app.schemas.panel import (
    MarketRow,
    MarketStatusContent,
    Metric,
    MoverRow,
    MoverTab,
    OverviewContent,
    Panel,
    PanelContent,
    QuoteContent,
    TopMoversContent,
    ViewName,
)

T = TypeVar("T")

PROMPT_MESSAGE = "Enter a stock symbol to see details."
NO_SYMBOL_DATA_MESSAGE = "No data available for this symbol"
NO_DATA_MESSAGE = "No data available"


def _panel(
    view: ViewName,
    title: str,
    state: ViewState[T],
    build: Callable[[T], Optional[PanelContent]],
    needs_parameter: bool = False,
    empty_message: str = NO_DATA_MESSAGE,
) -> Panel:
    if needs_parameter:
        return Panel(view=view, title=title, status="prompt", message=PROMPT_MESSAGE)

    if state.data is not None:
        content = build(state.data)
        if content is None:
            return Panel(
                view=view,
                title=title,
                status="empty",
                busy=state.is_loading,
                message=empty_message,
                error=state.error_message,
            )
        return Panel(
            view=view,
            title=title,
            status="ready",
            busy=state.is_loading,
            error=state.error_message,
            content=content,
        )

    if state.error_message:
        return Panel(
            view=view,
            title=title,
            status="error",
            busy=state.is_loading,
            message=state.error_message,
            error=state.error_message,
        )
    if state.is_loading:
        return Panel(view=view, title=title, status="loading", busy=True)
    return Panel(view=view, title=title, status="empty", message=empty_message)


def build_quote_content(response: GlobalQuoteResponse) -> Optional[QuoteContent]:
    quote = response.global_quote
    if quote is None:
        return None
    polarity = change_polarity(quote.change_percent)
    return QuoteContent(
        symbol=quote.symbol or "",
        price=format_currency(quote.price),
        change=quote.change or "",
        change_percent=quote.change_percent or "",
        polarity=polarity,
        color=POLARITY_COLORS[polarity],
        as_of=f"As of {quote.latest_trading_day or 'N/A'}",
        metrics=[
            Metric(label="Previous Close", value=format_currency(quote.previous_close)),
            Metric(label="Open", value=format_currency(quote.open)),
            Metric(label="High", value=format_currency(quote.high)),
            Metric(label="Low", value=format_currency(quote.low)),
            Metric(label="Volume", value=format_volume(quote.volume)),
        ],
    )


def render_quote(state: ViewState[GlobalQuoteResponse], symbol: str | None) -> Panel:
    title = f"Stock Details: {symbol}" if symbol else "Stock Details"
    data = state.data
    if data is not None and data.global_quote is not None and data.global_quote.symbol:
        title = f"Stock Details: {data.global_quote.symbol}"
    return _panel(
        "quote",
        title,
        state,
        build_quote_content,
        needs_parameter=not symbol,
        empty_message=NO_SYMBOL_DATA_MESSAGE,
    )


def build_overview_content(overview: CompanyOverview) -> Optional[OverviewContent]:
    if overview.is_empty:
        return None
    tags = [tag for tag in (overview.exchange, overview.sector, overview.industry) if tag]
    return OverviewContent(
        name=overview.name or overview.symbol or "",
        symbol=overview.symbol,
        tags=tags,
        description=overview.description,
        headline_metrics=[
            Metric(label="Market Cap", value=format_market_cap(overview.market_capitalization)),
            Metric(label="P/E Ratio", value=format_positive_ratio(overview.pe_ratio)),
            Metric(label="Dividend Yield", value=format_dividend_yield(overview.dividend_yield)),
        ],
        detail_metrics=[
            Metric(label="52 Week High", value=format_currency(overview.week_52_high)),
            Metric(label="52 Week Low", value=format_currency(overview.week_52_low)),
            Metric(label="50 Day Avg", value=format_currency(overview.moving_average_50_day)),
            Metric(label="200 Day Avg", value=format_currency(overview.moving_average_200_day)),
            Metric(label="EPS", value=format_currency(overview.eps)),
            Metric(label="Beta", value=format_decimal(overview.beta)),
        ],
        website=company_website(overview.name),
    )


def render_overview(state: ViewState[CompanyOverview], symbol: str | None) -> Panel:
    title = f"Company Overview: {symbol}" if symbol else "Company Overview"
    if state.data is not None and state.data.name:
        title = f"Company Overview: {state.data.name}"
    return _panel(
        "overview",
        title,
        state,
        build_overview_content,
        needs_parameter=not symbol,
        empty_message=NO_SYMBOL_DATA_MESSAGE,
    )


def build_market_status_content(response: MarketStatusResponse) -> MarketStatusContent:
    rows: list[MarketRow] = []
    for market in response.markets:
        tone = market_status_tone(market.current_status)
        rows.append(
            MarketRow(
                label=f"{market.market_type} ({market.region})",
                current_status=market.current_status,
                tone=tone,
                color=TONE_COLORS[tone],
                trading_hours=f"Trading Hours: {market.local_open} - {market.local_close}",
                notes=market.notes or None,
            )
        )
    return MarketStatusContent(markets=rows)


def render_market_status(state: ViewState[MarketStatusResponse]) -> Panel:
    return _panel("market_status", "Market Status", state, build_market_status_content)


def _mover_row(mover: StockMover) -> MoverRow:
    polarity = change_polarity(mover.change_percentage)
    return MoverRow(
        ticker=mover.ticker,
        price=format_currency(mover.price),
        change_amount=mover.change_amount,
        change_percentage=mover.change_percentage,
        polarity=polarity,
        color=POLARITY_COLORS[polarity],
        volume=format_volume(mover.volume),
    )


def build_top_movers_content(response: TopMoversResponse, limit: int = 10) -> TopMoversContent:
    sections = (
        ("gainers", "Top Gainers", response.top_gainers),
        ("losers", "Top Losers", response.top_losers),
        ("active", "Most Active", response.most_actively_traded),
    )
    tabs = [
        MoverTab(key=key, label=label, rows=[_mover_row(mover) for mover in movers[:limit]])
        for key, label, movers in sections
    ]
    return TopMoversContent(tabs=tabs, last_updated=response.last_updated)


def render_top_movers(state: ViewState[TopMoversResponse], limit: int = 10) -> Panel:
    return _panel(
        "top_movers",
        "Market Movers",
        state,
        lambda response: build_top_movers_content(response, limit),
    )
