"""
Error taxonomy for the photo server.

Each error maps to exactly one HTTP status in ``photoserver.main``; the
message of a ``TransformFailure`` is for the server log only and is never
sent to the client.
"""
from typing import Optional


class PhotoServerError(Exception):
    status_code = 500


class BadRequest(PhotoServerError):
    """Missing or malformed photo identifier."""
    status_code = 400


class NotFound(PhotoServerError):
    """Unknown photo id, or the referenced file is missing on disk."""
    status_code = 404

    def __init__(self, photo_id: int):
        super().__init__(f"failed to find photo with id {photo_id}")
        self.photo_id = photo_id


class TransformFailure(PhotoServerError):
    stage = "transform"

    def __init__(self, path, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"{self.stage} failed for {path}: {message}")
        self.path = str(path)
        self.__cause__ = cause


class DecodeError(TransformFailure):
    stage = "decode"


class TransformError(TransformFailure):
    stage = "transform"


class EncodeError(TransformFailure):
    stage = "encode"


class SourceReadError(TransformFailure):
    stage = "read"
