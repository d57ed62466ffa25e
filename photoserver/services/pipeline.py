"""
Thumbnail pipeline: photo id + size token -> image bytes.

One linear flow per request. Metadata comes from the photo store, the size
token picks a transform plan, and rendered JPEGs are memoized in the result
cache. The passthrough plan bypasses both the cache and the engine and
serves the stored file untouched.
"""
import asyncio
import logging
import mimetypes
import re
import time
from dataclasses import dataclass
from typing import Optional

from photoserver.exceptions import BadRequest, NotFound, SourceReadError, TransformFailure
from photoserver.services import metrics
from photoserver.services.cache_key import build_key
from photoserver.services.photo_store import PhotoRecord, PhotoStore
from photoserver.services.result_cache import ResultCache
from photoserver.services.sizes import Passthrough, TransformPlan, resolve
from photoserver.services.thumbs import ThumbnailEngine

logger = logging.getLogger(__name__)

JPEG = "image/jpeg"

_ID_RE = re.compile(r"[0-9]+")


@dataclass
class Thumbnail:
    content: bytes
    media_type: str
    plan: TransformPlan
    cache_hit: bool = False


def parse_photo_id(raw: Optional[str]) -> int:
    if not raw:
        logger.info("url did not contain id")
        raise BadRequest("url did not contain id")
    if not _ID_RE.fullmatch(raw):
        logger.info("url contained an invalid id value (%s)", raw)
        raise BadRequest(f"url contained an invalid id value ({raw})")
    return int(raw)


class ThumbnailPipeline:
    def __init__(self, store: PhotoStore, cache: ResultCache, engine: ThumbnailEngine):
        self.store = store
        self.cache = cache
        self.engine = engine

    async def fetch(self, raw_id: Optional[str], size_token: Optional[str] = None) -> Thumbnail:
        photo_id = parse_photo_id(raw_id)

        record = await self.store.lookup(photo_id)
        if record is None:
            logger.warning("Photo %d not found", photo_id)
            raise NotFound(photo_id)

        plan = resolve(size_token)
        if isinstance(plan, Passthrough):
            return await self._original(record, plan)

        key = build_key(str(record.source_path), record.rotation, record.version_token, size_token)
        cached = self.cache.get(key)
        metrics.record_cache_lookup(cached is not None)
        if cached is not None:
            return Thumbnail(cached, JPEG, plan, cache_hit=True)

        content = await self._render(record, plan)
        self.cache.put(key, content)
        return Thumbnail(content, JPEG, plan)

    async def _render(self, record: PhotoRecord, plan: TransformPlan) -> bytes:
        start = time.perf_counter()
        try:
            content = await asyncio.to_thread(self.engine.render, record.source_path, plan, record.rotation)
        except TransformFailure as e:
            logger.error("Thumbnail %s failed for %s: %s", e.stage, e.path, e.__cause__ or e)
            metrics.record_render(e.stage, time.perf_counter() - start)
            raise
        metrics.record_render("ok", time.perf_counter() - start)
        return content

    async def _original(self, record: PhotoRecord, plan: TransformPlan) -> Thumbnail:
        try:
            content = await asyncio.to_thread(record.source_path.read_bytes)
        except OSError as e:
            logger.error("failed to read file %s: %s", record.source_path, e)
            raise SourceReadError(record.source_path, "failed to read file", e) from e
        media_type, _ = mimetypes.guess_type(record.source_path.name)
        return Thumbnail(content, media_type or JPEG, plan)
