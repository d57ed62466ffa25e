# photoserver/routers/photos.py

import re
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Response

from photoserver.routers.deps import get_pipeline
from photoserver.services.pipeline import ThumbnailPipeline
from photoserver.utils.params import params_from_path

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.\- ]", re.ASCII)


def download_filename(name: Optional[str]) -> str:
    if name:
        return _UNSAFE_FILENAME_CHARS.sub("_", name)
    return f"photo-{uuid.uuid4()}.jpg"


def build_photo_router(root_context: str) -> APIRouter:
    router = APIRouter(prefix=root_context.rstrip("/"), tags=["photos"])

    # Method: get_photo()
    @router.get("/{params:path}")
    async def get_photo(params: str, pipeline: ThumbnailPipeline = Depends(get_pipeline)):
        """Serve a photo, e.g. ``id/42/size/medium`` or ``id/42/action/download/name/x.jpg``"""
        values = params_from_path(params)
        thumb = await pipeline.fetch(values.get("id"), values.get("size"))

        headers = {}
        if values.get("action") == "download":
            headers["Content-Disposition"] = f'attachment; filename="{download_filename(values.get("name"))}"'

        return Response(content=thumb.content, media_type=thumb.media_type, headers=headers)

    return router
