"""JSON logging with per-request trace and payment identifiers."""

import logging
import sys
from contextvars import ContextVar
from uuid import uuid4

from pythonjsonlogger.json import JsonFormatter

from paygate.common.config import settings


trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")
payment_id_ctx: ContextVar[str] = ContextVar("payment_id", default="")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(service_name)s %(trace_id)s %(payment_id)s %(message)s"


class RequestContextFilter(logging.Filter):
    """Stamp service name and current request identifiers onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = settings.service_name
        record.trace_id = trace_id_ctx.get()
        record.payment_id = payment_id_ctx.get()
        return True


def bind_trace_id(correlation_id: str | None) -> str:
    """Use the caller's correlation id for this request, or mint one."""

    trace_id = correlation_id or str(uuid4())
    trace_id_ctx.set(trace_id)
    return trace_id


def configure_logging() -> None:
    """Route all records through one stdout JSON handler."""

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JsonFormatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(settings.log_level)


logger = logging.getLogger("paygate")
