"""Per-request correlation id, shared by the middleware, the error body and every log line."""

import logging
import uuid
from contextvars import ContextVar
from typing import Optional

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def generate_request_id(incoming: Optional[str] = None) -> str:
    """Reuse the caller's id when it is short and printable, otherwise mint one."""
    if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH and incoming.isprintable():
        return incoming
    return uuid.uuid4().hex


def get_request_id() -> str:
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


class RequestIdLogFilter(logging.Filter):
    """Stamps ``request_id`` on records that were logged without one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            request_id = request_id_var.get()
            if request_id:
                record.request_id = request_id
        return True
