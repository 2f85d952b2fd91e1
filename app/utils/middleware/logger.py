import logging
import time
import uuid
import contextvars
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Context var to store request id so any code during the request can fetch it
request_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("request_id", default=None)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"


class RequestIdFilter(logging.Filter):
    """Attach request_id to every LogRecord so formatter can include it."""
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get() or "-"
        return True


def setup_logging(level: str | int = logging.INFO) -> None:
    """
    Install one stream handler on the root logger. Safe to call more than once;
    later calls only adjust the level.
    """
    root = logging.getLogger()
    root.setLevel(level)
    if any(isinstance(f, RequestIdFilter) for h in root.handlers for f in h.filters):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())
    root.addHandler(handler)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Request logger for the menu API.

    - Reuses the caller's X-Request-ID or generates one, keeps it in a context var
      for log records and echoes it back on the response.
    - Logs request start (method, path) and end (status, duration_ms).
    """

    async def dispatch(self, request: Request, call_next):
        req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_ctx.set(req_id)

        logger = logging.getLogger("menu.http")
        start = time.time()

        try:
            logger.info("request.start %s %s", request.method, request.url.path)

            response = await call_next(request)

            duration_ms = int((time.time() - start) * 1000)
            logger.info("request.end %s %dms", response.status_code, duration_ms)
            response.headers["X-Request-ID"] = req_id
            return response

        except Exception:
            duration_ms = int((time.time() - start) * 1000)
            logger.exception("request.error %dms", duration_ms)
            raise
        finally:
            request_id_ctx.reset(token)
