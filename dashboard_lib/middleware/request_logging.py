import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)


#############################################
## Request logging middleware
## Logs method, path, status and duration of every request.
#############################################
class RequestLogging(BaseHTTPMiddleware):
    def __init__(self, app, level: int = logging.INFO):
        super().__init__(app)
        self.level = level

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("%s %s failed", request.method, request.url.path)
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.log(self.level, "%s %s -> %d (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response
