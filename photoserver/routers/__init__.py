from fastapi import APIRouter
import logging


def build_router(root_context: str) -> APIRouter:
    router = APIRouter()
    log = logging.getLogger("routers")

    from .health import router as health_router
    router.include_router(health_router)
    log.info("Loaded router: health")

    # Catch-all photo routes go last so a root context of "/" cannot shadow /ops
    from .photos import build_photo_router
    router.include_router(build_photo_router(root_context))
    log.info("Loaded router: photos at %s", root_context)

    return router
