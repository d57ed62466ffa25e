from fastapi import APIRouter, Depends
import time
import os

from photoserver.db import db_healthcheck
from photoserver.routers.deps import get_pipeline
from photoserver.services.pipeline import ThumbnailPipeline

router = APIRouter(prefix="/ops", tags=["ops"])

# Store startup time for uptime calculation
startup_time = time.time()


@router.get("/db-health")
async def db_health():
    """Simple database health check using Tortoise ORM"""
    return {"db_ok": await db_healthcheck()}


@router.get("/cache")
async def cache_stats(pipeline: ThumbnailPipeline = Depends(get_pipeline)):
    """Thumbnail cache occupancy and hit statistics"""
    return {
        **pipeline.cache.stats(),
        "uptime_seconds": round(time.time() - startup_time, 2),
        "process_id": os.getpid(),
    }
