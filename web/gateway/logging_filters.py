"""Logging filter that stamps records with the current request id.

The id comes from the ContextVar set by ``RequestIdMiddleware``. Records
emitted outside a request (management commands, migrations) get "-" so
formatters can always reference ``%(request_id)s``.
"""

from logging import Filter, LogRecord

from .middleware import REQUEST_ID_CTX


class RequestIdFilter(Filter):
    def filter(self, record: LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = REQUEST_ID_CTX.get()
        return True
