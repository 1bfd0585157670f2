"""JSON logging with per-request correlation.

``configure_logging`` installs a ``python-json-logger`` handler on the
``laundry`` logger. ``request_id_middleware`` assigns every request an id
(reusing the incoming ``X-Request-ID`` when the client sends one), stores it
in ``REQUEST_ID_CTX`` so ``RequestIdFilter`` can stamp it on log records,
and echoes it back on the response.
"""

import contextvars
import logging
import uuid

from fastapi import Request
from pythonjsonlogger import jsonlogger

REQUEST_ID_CTX = contextvars.ContextVar("request_id", default="-")

logger = logging.getLogger("laundry")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = REQUEST_ID_CTX.get()
        return True


def configure_logging(level: str = "INFO") -> None:
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s"))
        h.addFilter(RequestIdFilter())
        logger.addHandler(h)
    logger.setLevel(level.upper())


async def request_id_middleware(request: Request, call_next):
    rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = rid
    token = REQUEST_ID_CTX.set(rid)
    try:
        response = await call_next(request)
        logger.info("request handled", extra={"path": request.url.path, "method": request.method, "status": response.status_code})
    finally:
        REQUEST_ID_CTX.reset(token)
    response.headers["X-Request-ID"] = rid
    return response
