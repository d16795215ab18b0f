from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.dashboard import router as dashboard_router
from app.api.routes import router
from app.config.settings import get_settings
from app.integrations.forex_feed import ForexFeedClient
from app.integrations.yahoo_quotes import DemoQuoteClient, YahooQuoteClient
from app.services.quote_source import QuoteSourceAdapter
from app.services.refresh_cycle import RefreshCycleController


def _apply_settings(app: FastAPI, settings) -> None:
    adapter = app.state.quote_source
    adapter.symbols = list(settings.FOREX_SYMBOLS)
    if settings.FOREX_PROVIDER == "demo":
        adapter.provider = DemoQuoteClient()
    elif isinstance(adapter.provider, YahooQuoteClient):
        adapter.provider.base_url = settings.FOREX_PROVIDER_URL.rstrip("/")

    controller = app.state.board_controller
    controller.interval_sec = settings.FOREX_REFRESH_INTERVAL_SEC
    if isinstance(controller.fetcher, ForexFeedClient):
        controller.fetcher.base_url = settings.FOREX_FEED_URL

    app.state.page_refresh_sec = settings.FOREX_PAGE_REFRESH_SEC


@asynccontextmanager
async def lifespan(app: FastAPI):
    _apply_settings(app, app.state.get_settings())

    app.state.board_controller.start()
    try:
        yield
    finally:
        app.state.board_controller.stop()


app = FastAPI(title="Forex Market Overview", version="0.1.0", lifespan=lifespan)
app.include_router(router, prefix="/api")
app.include_router(dashboard_router)

# NOTE: settings are applied in lifespan so app import does not read env.
app.state.get_settings = get_settings
app.state.page_refresh_sec = 5
app.state.quote_source = QuoteSourceAdapter(provider=YahooQuoteClient())
app.state.board_controller = RefreshCycleController(fetcher=ForexFeedClient())
