"""
Request/response logging middleware.
"""

import time
from fastapi import Request
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Never written to logs
REDACTED_HEADERS = {"authorization", "cookie"}


async def log_requests(request: Request, call_next):
    """Log each request line, its status and how long it took."""
    start_time = time.time()

    logger.info(f"Request: {request.method} {request.url.path}")
    logger.debug(
        f"Headers: { {k: v for k, v in request.headers.items() if k.lower() not in REDACTED_HEADERS} }"
    )

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {e}")
        raise

    process_time = time.time() - start_time
    logger.info(f"Response: {response.status_code} - {process_time:.3f}s")
    return response
