"""
Console logging setup for flightscout runs.
"""

import logging
import sys
from typing import Optional, Union

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _ColoredFormatter(logging.Formatter):
    _COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    _RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self._COLORS.get(record.levelname, "")
        if color:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{self._RESET}"
        return super().format(record)


def setup_logging(
    level: Union[int, str] = logging.INFO, fmt: Optional[str] = None
) -> None:
    """
    Configure root logging with a single stdout handler.

    Args:
        level: Log level name or number (e.g. 'INFO', logging.DEBUG)
        fmt: Log record format (default: timestamp, level, logger name)
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    log_format = fmt or DEFAULT_LOG_FORMAT

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = (
        _ColoredFormatter(log_format, datefmt=DATE_FORMAT)
        if sys.stdout.isatty()
        else logging.Formatter(log_format, datefmt=DATE_FORMAT)
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
