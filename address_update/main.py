from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from address_update.core.settings import S
from address_update.metrics import metrics_endpoint, metrics_middleware, set_app_info
from address_update.routers.form import router as form_router
from address_update.routers.misc import router as misc_router
from address_update.routers.webhooks import router as webhooks_router
from address_update.services.form_state import FormState
from address_update.services.lookups import LookupClient
from address_update.services.webhook_store import WebhookStore

logging.basicConfig(level=S.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

API_PREFIXES = ("api/", "ui/", "webhook/", "static/", "metrics", "health")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Webhook endpoint: http://%s:%s/webhook/{webhookId}", S.host, S.port)
    logger.info("API endpoint: http://%s:%s/api/webhook-data", S.host, S.port)
    yield
    app.state.form.close()
    logger.info("Shutting down...")


def create_app(lookups: LookupClient | None = None) -> FastAPI:
    app = FastAPI(title=S.app_title, version="0.1.0", lifespan=lifespan)
    static_dir = Path(__file__).resolve().parent / "static"

    app.state.webhook_store = WebhookStore()
    app.state.form = FormState(lookups=lookups)

    app.mount("/static", StaticFiles(directory=static_dir), name="static")

    @app.get("/")
    async def index():
        return FileResponse(static_dir / "index.html")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if S.metrics_enabled:
        app.middleware("http")(metrics_middleware)
        set_app_info(app.title, app.version)
        app.get("/metrics")(metrics_endpoint)

    app.include_router(webhooks_router)
    app.include_router(form_router)
    app.include_router(misc_router)

    # Registered last so every real route wins.
    @app.get("/{full_path:path}", include_in_schema=False)
    async def spa_fallback(full_path: str):
        if full_path.startswith(API_PREFIXES):
            raise HTTPException(404, "Not Found")
        return FileResponse(static_dir / "index.html")

    return app

app = create_app()


if __name__ == "__main__":
    logger.info("Webhook server running on port %s", S.port)
    uvicorn.run("address_update.main:app", host=S.host, port=S.port)
