"""JSON logging with per-request correlation ids.

The request-id middleware in ``orders.main`` stores the current id in
``REQUEST_ID_CTX``; ``RequestIdFilter`` copies it onto every log record so
the JSON formatter can always reference ``%(request_id)s``.
"""

import contextvars
import logging
from logging import Filter, LogRecord

from pythonjsonlogger import jsonlogger

REQUEST_ID_CTX = contextvars.ContextVar("request_id", default="-")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s"


class RequestIdFilter(Filter):
    """Attach a ``request_id`` attribute to log records.

    Outside a request the context variable holds its default, a hyphen,
    so formatters never fail on a missing attribute.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = REQUEST_ID_CTX.get()
        return True


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Install the JSON handler on the ``orders`` logger.

    Calling it again only updates the level; the handler is added once.

    Args:
        level: Level name, e.g. ``"INFO"`` or ``"DEBUG"``.

    Returns:
        logging.Logger: The configured ``orders`` logger.
    """
    logger = logging.getLogger("orders")
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(jsonlogger.JsonFormatter(LOG_FORMAT))
        h.addFilter(RequestIdFilter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger
