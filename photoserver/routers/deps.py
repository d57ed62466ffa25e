from fastapi import Request
from photoserver.services.pipeline import ThumbnailPipeline


def get_pipeline(request: Request) -> ThumbnailPipeline:
    return request.app.state.pipeline
