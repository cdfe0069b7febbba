"""
Logging setup and request logging middleware.

Everything goes through the standard logging module; setup_logging()
configures the root handler once from settings.log_level.
"""

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from shortener_app.config import settings

logger = logging.getLogger("shortener_app.requests")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = None) -> None:
    """Configure root logging (no-op if handlers are already installed)."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status code and processing time of every request.
    """

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        # Format: METHOD PATH STATUS_CODE PROCESS_TIME_MS
        logger.info(
            "%s %s %s %.2fms",
            request.method,
            request.url.path,
            response.status_code,
            process_time * 1000,
        )
        response.headers["X-Process-Time"] = f"{process_time:.6f}"
        return response


def add_logging_middleware(app):
    """Add logging middleware to FastAPI app."""
    app.add_middleware(LoggingMiddleware)
