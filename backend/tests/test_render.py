from app.polling.consumer import ViewState
from app.schemas.market import (
    CompanyOverview,
    GlobalQuoteResponse,
    MarketStatusResponse,
    TopMoversResponse,
)
from app.views.render import (
    render_market_status,
    render_overview,
    render_quote,
    render_top_movers,
)


def build_quote(change_percent: str = "1.2000%") -> GlobalQuoteResponse:
    return GlobalQuoteResponse.model_validate(
        {
            "Global Quote": {
                "01. symbol": "MSFT",
                "02. open": "410.00",
                "03. high": "415.50",
                "04. low": "408.10",
                "05. price": "414.7400",
                "06. volume": "18000000",
                "07. latest trading day": "2024-05-10",
                "08. previous close": "409.8000",
                "09. change": "4.9400",
                "10. change percent": change_percent,
            }
        }
    )


def test_quote_prompt_without_symbol() -> None:
    panel = render_quote(ViewState(is_loading=False), None)
    assert panel.status == "prompt"
    assert panel.content is None


def test_quote_skeleton_while_first_load() -> None:
    panel = render_quote(ViewState(), "MSFT")
    assert panel.status == "loading"
    assert panel.busy is True
    assert panel.title == "Stock Details: MSFT"


def test_quote_error_without_prior_data() -> None:
    panel = render_quote(ViewState(is_loading=False, error_message="Invalid API call."), "XXXX")
    assert panel.status == "error"
    assert panel.message == "Invalid API call."


def test_quote_empty_global_quote_is_no_data_not_error() -> None:
    state = ViewState(data=GlobalQuoteResponse.model_validate({"Global Quote": {}}), is_loading=False)
    panel = render_quote(state, "XXXX")
    assert panel.status == "empty"
    assert panel.message == "No data available for this symbol"
    assert panel.error is None


def test_quote_ready_with_stale_data_while_refreshing() -> None:
    state = ViewState(data=build_quote("-0.00%"), is_loading=True, error_message="rate limit")
    panel = render_quote(state, "MSFT")
    assert panel.status == "ready"
    assert panel.busy is True
    assert panel.error == "rate limit"
    assert panel.content.polarity == "negative"
    assert panel.content.color == "red"
    assert panel.content.price == "$414.74"
    assert [metric.label for metric in panel.content.metrics] == [
        "Previous Close",
        "Open",
        "High",
        "Low",
        "Volume",
    ]
    assert panel.content.metrics[-1].value == "18,000,000"


def test_overview_ready() -> None:
    overview = CompanyOverview.model_validate(
        {
            "Symbol": "IBM",
            "Name": "International Business Machines",
            "Exchange": "NYSE",
            "Sector": "TECHNOLOGY",
            "Industry": "COMPUTER & OFFICE EQUIPMENT",
            "MarketCapitalization": "153000000000",
            "PERatio": "0",
            "DividendYield": "0.0065",
            "EPS": "8.14",
            "Beta": "0.712",
            "52WeekHigh": "199.18",
            "52WeekLow": "135.87",
            "50DayMovingAverage": "178.2",
            "200DayMovingAverage": "165.1",
        }
    )
    panel = render_overview(ViewState(data=overview, is_loading=False), "IBM")

    assert panel.status == "ready"
    assert panel.title == "Company Overview: International Business Machines"
    values = {metric.label: metric.value for metric in panel.content.headline_metrics}
    assert values == {
        "Market Cap": "$153.00B",
        "P/E Ratio": "N/A",
        "Dividend Yield": "0.65%",
    }
    details = {metric.label: metric.value for metric in panel.content.detail_metrics}
    assert details["EPS"] == "$8.14"
    assert details["Beta"] == "0.71"
    assert panel.content.tags == ["NYSE", "TECHNOLOGY", "COMPUTER & OFFICE EQUIPMENT"]
    assert panel.content.website == "https://internationalbusinessmachines.com"


def test_overview_without_symbol_is_no_data() -> None:
    panel = render_overview(ViewState(data=CompanyOverview(), is_loading=False), "XXXX")
    assert panel.status == "empty"


def test_market_status_omits_missing_notes() -> None:
    response = MarketStatusResponse.model_validate(
        {
            "endpoint": "Global Market Open & Close Status",
            "markets": [
                {
                    "market_type": "Equity",
                    "region": "United States",
                    "primary_exchanges": "NASDAQ, NYSE",
                    "local_open": "09:30",
                    "local_close": "16:15",
                    "current_status": "open",
                    "notes": "",
                },
                {
                    "market_type": "Equity",
                    "region": "Japan",
                    "primary_exchanges": "Tokyo",
                    "local_open": "09:00",
                    "local_close": "15:00",
                    "current_status": "closed",
                    "notes": "Lunch break 11:30-12:30",
                },
            ],
        }
    )
    panel = render_market_status(ViewState(data=response, is_loading=False))

    rows = panel.content.markets
    assert rows[0].label == "Equity (United States)"
    assert rows[0].color == "green"
    assert rows[0].notes is None
    assert rows[0].trading_hours == "Trading Hours: 09:30 - 16:15"
    assert rows[1].tone == "closed"
    assert rows[1].notes == "Lunch break 11:30-12:30"


def test_top_movers_tabs_are_truncated() -> None:
    gainers = [
        {
            "ticker": f"G{index}",
            "price": "2.5",
            "change_amount": "1.0",
            "change_percentage": "66.6%",
            "volume": "123456",
        }
        for index in range(15)
    ]
    losers = [
        {
            "ticker": "L1",
            "price": "0.4",
            "change_amount": "-0.6",
            "change_percentage": "-60%",
            "volume": "99",
        }
    ]
    response = TopMoversResponse.model_validate(
        {
            "last_updated": "2024-05-10 16:15:59 US/Eastern",
            "top_gainers": gainers,
            "top_losers": losers,
            "most_actively_traded": [],
        }
    )
    panel = render_top_movers(ViewState(data=response, is_loading=False), limit=10)

    tabs = {tab.key: tab for tab in panel.content.tabs}
    assert len(tabs["gainers"].rows) == 10
    assert tabs["gainers"].rows[0].volume == "123,456"
    assert tabs["losers"].rows[0].color == "red"
    assert tabs["active"].rows == []
    assert panel.content.last_updated == "2024-05-10 16:15:59 US/Eastern"
