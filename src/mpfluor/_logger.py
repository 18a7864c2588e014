import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from rich.logging import RichHandler

_log_indent = ContextVar("log_indent", default=0)
logger = logging.getLogger("mpfluor")


@contextmanager
def logging_indented(delta: int = 1) -> Iterator[None]:
    token = _log_indent.set(_log_indent.get() + delta)
    try:
        yield
    finally:
        _log_indent.reset(token)


class IndentPrefixFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        prefix = "  " * _log_indent.get()
        record.msg = prefix + str(record.msg)
        return True


_filter = IndentPrefixFilter()


def configure_logging(level: int | str = "INFO") -> None:
    """Attach a rich handler to the package logger (idempotent)."""
    logger.setLevel(level)
    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return
    handler = RichHandler(show_path=False, log_time_format="[%X]")
    handler.addFilter(_filter)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
