import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from tortoise.exceptions import BaseORMException

from photoserver.models import Photo

logger = logging.getLogger("db")


@dataclass(frozen=True)
class PhotoRecord:
    id: int
    relative_path: str
    rotation: int
    version_token: str
    source_path: Path


class PhotoStore:
    """Read-only view of the photo catalogue."""

    def __init__(self, photos_root: Union[str, Path]):
        self.photos_root = Path(photos_root)

    def source_path(self, relative_path: str) -> Path:
        return self.photos_root / relative_path.lstrip("/")

    async def lookup(self, photo_id: int) -> Optional[PhotoRecord]:
        """Record for ``photo_id``, or None when the row or its file is missing."""
        try:
            row = await Photo.filter(id=photo_id).first()
        except BaseORMException as e:
            logger.warning("failed to find photo with id %d: %s", photo_id, e)
            return None
        if row is None:
            logger.debug("no photo row with id %d", photo_id)
            return None

        source_path = self.source_path(row.path)
        try:
            source_path.stat()
        except OSError as e:
            logger.debug("photo file (%s) does not exist (%s)", source_path, e)
            return None

        return PhotoRecord(
            id=row.id,
            relative_path=row.path,
            rotation=row.rotation or 0,
            version_token=str(row.modified_timestamp or ""),
            source_path=source_path,
        )
