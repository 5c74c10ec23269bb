"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import asyncio
import contextlib
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.ml_client.dependencies import close_client, get_client, get_wallet_provider
from src.ml_common.errors import AppError
from src.ml_common.request_log import RequestLogMiddleware
from src.ml_common.response import error_response
from src.ml_ledger.api.router import router as ledger_router
from src.ml_session.api.router import router as wallet_router
from src.ml_tx.api.router import router as tx_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: build the client, start the wallet watcher. Shutdown: stop and close."""
    get_client()
    watcher: asyncio.Task[None] | None = None
    if settings.WALLET_WATCH_INTERVAL > 0:
        watcher = asyncio.create_task(
            get_wallet_provider().watch(settings.WALLET_WATCH_INTERVAL)
        )
        logger.info("Wallet watcher started (every %.1fs)", settings.WALLET_WATCH_INTERVAL)
    yield
    if watcher is not None:
        watcher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher
    await close_client()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(wallet_router, prefix="/api/v1")
app.include_router(ledger_router, prefix="/api/v1")
app.include_router(tx_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
