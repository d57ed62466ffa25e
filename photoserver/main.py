# Top imports
import uvicorn
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from photoserver import __version__
from photoserver.config import Settings, settings as default_settings
from photoserver.core.middleware import ErrorEnvelopeMiddleware
from photoserver.db import init_db, close_db
from photoserver.exceptions import PhotoServerError, TransformFailure
from photoserver.routers import build_router
from photoserver.services.metrics import metrics_middleware, metrics_endpoint
from photoserver.services.photo_store import PhotoStore
from photoserver.services.pipeline import ThumbnailPipeline
from photoserver.services.result_cache import ResultCache
from photoserver.services.thumbs import ThumbnailEngine


def build_pipeline(cfg: Settings) -> ThumbnailPipeline:
    return ThumbnailPipeline(
        store=PhotoStore(cfg.PHOTOS_ROOT),
        cache=ResultCache(cfg.LFU_CACHE_MAX_COUNT),
        engine=ThumbnailEngine(concurrency=cfg.CONCURRENCY_LEVEL, quality=cfg.JPEG_QUALITY),
    )


def create_app(cfg: Optional[Settings] = None) -> FastAPI:
    cfg = cfg or default_settings

    # Method: lifespan()
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logging.info("Starting photo server (root context %s)...", cfg.ROOT_CONTEXT)
        await init_db(cfg)
        app.state.pipeline = build_pipeline(cfg)
        logging.info(
            "Thumbnail cache max entries=%s, transform concurrency=%s",
            cfg.LFU_CACHE_MAX_COUNT,
            cfg.CONCURRENCY_LEVEL,
        )

        yield

        # Shutdown
        logging.info("Shutting down photo server...")
        app.state.pipeline.cache.clear()
        await close_db()
        logging.info("Database connections closed")

    app = FastAPI(
        title="Photo Server",
        description="On-demand resized and rotated JPEG thumbnails of stored photos",
        version=__version__,
        lifespan=lifespan,
    )

    @app.exception_handler(PhotoServerError)
    async def photo_server_exception_handler(request: Request, exc: PhotoServerError):
        detail = "Internal server error" if isinstance(exc, TransformFailure) else str(exc)
        return JSONResponse(status_code=exc.status_code, content={"detail": detail})

    # Universal health endpoint (always present)
    @app.get("/health")
    async def health():
        return {"status": "healthy", "timestamp": datetime.now().isoformat()}

    @app.get("/metrics")
    async def prometheus_metrics():
        return await metrics_endpoint(cfg.METRICS_ENABLED)

    app.include_router(build_router(cfg.ROOT_CONTEXT))

    # Middleware setup
    app.add_middleware(ErrorEnvelopeMiddleware)
    metrics_middleware(app, enabled=cfg.METRICS_ENABLED)

    return app


# Logging setup
logging.basicConfig(
    level=default_settings.LOG_LEVEL.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

app = create_app()


if __name__ == "__main__":
    uvicorn.run("photoserver.main:app", host="0.0.0.0", port=8080, log_level="info")
