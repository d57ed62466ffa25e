#!/usr/bin/env python3
"""
Photo Server Production Startup Script
Starts uvicorn with a single worker; the thumbnail cache lives in-process
"""

import logging
import uvicorn
from photoserver.config import settings


def start_production_server():
    """Start the production server"""
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    logging.info("Starting photo server on :8080 (root context %s)", settings.ROOT_CONTEXT)

    uvicorn.run(
        "photoserver.main:app",
        host="0.0.0.0",  # Bind to all interfaces
        port=8080,
        reload=False,
        workers=1,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=True
    )


if __name__ == "__main__":
    start_production_server()
