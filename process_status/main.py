import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request

from process_status.api.v1.metrics import router as metrics_router
from process_status.api.v1.processes import router as processes_router
from process_status.logging_config import configure_logging
from process_status.settings import settings
from process_status.store.redis_store import StatusStore
from process_status.tracking.tracker import LifecycleTracker

logger = logging.getLogger(__name__)

def create_app(store: Optional[StatusStore] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.LOG_LEVEL)

        # One store client per process, shared by every request
        status_store = store or StatusStore.from_url(settings.REDIS_URL)
        app.state.store = status_store
        app.state.tracker = LifecycleTracker(status_store)
        logger.info("Status store ready (namespace=%s)", status_store.namespace)

        yield

        await status_store.aclose()
        logger.info("Status store closed")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        lifespan=lifespan
    )

    app.include_router(processes_router, prefix="/api/v1/processes", tags=["processes"])
    app.include_router(metrics_router, tags=["metrics"])

    @app.get("/health")
    async def health(request: Request):
        store_up = await request.app.state.store.ping()
        return {"status": "ok", "store": "up" if store_up else "down"}

    return app

app = create_app()
