from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel

from app.dashboard import Dashboard
from app.providers.alphavantage import AlphaVantageClient
from app.schemas.panel import DashboardResponse, Panel, QueryResponse, SymbolRequest
from app.schemas.provider import Result, Success

router = APIRouter()


def get_client(request: Request) -> AlphaVantageClient:
    return request.app.state.client


def get_dashboard(request: Request) -> Dashboard:
    return request.app.state.dashboard


def _to_response(result: Result[BaseModel]) -> QueryResponse:
    if isinstance(result, Success):
        return QueryResponse(success=True, data=result.payload.model_dump(by_alias=True))
    return QueryResponse(success=False, error=result.message, kind=result.kind)


def _render_or_404(dashboard: Dashboard, view: str) -> Panel:
    try:
        return dashboard.render(view)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found.")


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/api/quote/{symbol}", response_model=QueryResponse)
async def quote_endpoint(
    symbol: str, client: AlphaVantageClient = Depends(get_client)
) -> QueryResponse:
    return _to_response(await client.get_stock_quote(symbol.strip().upper()))


@router.get("/api/overview/{symbol}", response_model=QueryResponse)
async def overview_endpoint(
    symbol: str, client: AlphaVantageClient = Depends(get_client)
) -> QueryResponse:
    return _to_response(await client.get_company_overview(symbol.strip().upper()))


@router.get("/api/market-status", response_model=QueryResponse)
async def market_status_endpoint(
    client: AlphaVantageClient = Depends(get_client),
) -> QueryResponse:
    return _to_response(await client.get_market_status())


@router.get("/api/top-movers", response_model=QueryResponse)
async def top_movers_endpoint(
    client: AlphaVantageClient = Depends(get_client),
) -> QueryResponse:
    return _to_response(await client.get_top_movers())


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard_endpoint(dashboard: Dashboard = Depends(get_dashboard)) -> DashboardResponse:
    return DashboardResponse(symbol=dashboard.symbol, panels=dashboard.render_all())


@router.put("/dashboard/symbol", response_model=DashboardResponse)
async def select_symbol_endpoint(
    payload: SymbolRequest, dashboard: Dashboard = Depends(get_dashboard)
) -> DashboardResponse:
    dashboard.select_symbol(payload.symbol)
    return DashboardResponse(symbol=dashboard.symbol, panels=dashboard.render_all())


@router.get("/dashboard/{view}", response_model=Panel)
async def panel_endpoint(view: str, dashboard: Dashboard = Depends(get_dashboard)) -> Panel:
    return _render_or_404(dashboard, view)


@router.post("/dashboard/{view}/refresh", response_model=Panel)
async def refresh_endpoint(view: str, dashboard: Dashboard = Depends(get_dashboard)) -> Panel:
    try:
        refreshed = dashboard.refresh(view)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found.")
    if not refreshed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": f"{view} does not support manual refresh."},
        )
    return dashboard.render(view)
