from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.routes import router
from app.config.settings import Settings, settings
from app.dashboard import Dashboard
from app.log import setup_logging
from app.providers.alphavantage import AlphaVantageClient


def create_app(app_settings: Settings | None = None) -> FastAPI:
    config = app_settings or settings
    setup_logging(config.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with AlphaVantageClient(config.providers) as client:
            async with Dashboard(client, config.polling) as dashboard:
                app.state.client = client
                app.state.dashboard = dashboard
                yield

    app = FastAPI(title="StockDash", lifespan=lifespan)
    app.include_router(router)
    return app


app = create_app()
