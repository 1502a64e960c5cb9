import logging
import sys
from logging.handlers import RotatingFileHandler

from .config import is_debug, log_dir, log_file_name, log_levels


_MAX_LOG_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 5
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _build_handlers(level: int) -> list[logging.Handler]:
    directory = log_dir()
    directory.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    file_handler = RotatingFileHandler(
        directory / log_file_name(),
        maxBytes=_MAX_LOG_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    for handler in (stream_handler, file_handler):
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return [stream_handler, file_handler]


def _apply_logger_levels() -> None:
    for name, level in log_levels().items():
        logging.getLogger(name).setLevel(level)


def setup_logging() -> None:
    """Console plus rotating file output; BD_DEBUG switches everything to DEBUG.

    Calling it again only re-applies levels, so reloads keep a single set of handlers.
    """
    level = logging.DEBUG if is_debug() else logging.INFO
    root_logger = logging.getLogger()
    if not getattr(root_logger, "_bd_logging_configured", False):
        root_logger.handlers.clear()
        for handler in _build_handlers(level):
            root_logger.addHandler(handler)
        root_logger._bd_logging_configured = True
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)
    _apply_logger_levels()
