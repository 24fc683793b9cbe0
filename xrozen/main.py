"""
FastAPI application factory
"""
import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from xrozen.api.v1 import finance
from xrozen.application.scheduler import start_snapshot_refresh, shutdown_scheduler
from xrozen.application.snapshot import SnapshotLoader, SnapshotStore
from xrozen.config import get_settings
from xrozen.infrastructure.api_client import RemoteApiClient

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Log every unhandled exception with its traceback and answer 500."""

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            tb_str = traceback.format_exc()
            logger.error(f"\n{'='*60}\nERROR on {request.method} {request.url.path}\n{tb_str}{'='*60}")
            return Response(content=f"Internal Server Error: {exc}", status_code=500)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    # Background refresh only with a service token; requests otherwise fetch with the caller's token
    if settings.REFRESH_INTERVAL_SECONDS > 0 and settings.API_SERVICE_TOKEN:
        loader = SnapshotLoader(RemoteApiClient.from_settings(settings, token=settings.API_SERVICE_TOKEN))
        start_snapshot_refresh(app.state.snapshot_store, loader, settings.REFRESH_INTERVAL_SECONDS)
    yield
    shutdown_scheduler()


def create_app() -> FastAPI:
    """
    Application factory - создаёт и настраивает FastAPI приложение

    Returns:
        Настроенный FastAPI app
    """
    settings = get_settings()

    app = FastAPI(
        title="Xrozen Finance",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.snapshot_store = SnapshotStore()

    app.add_middleware(ErrorLoggingMiddleware)

    app.include_router(finance.router)

    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "xrozen.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
