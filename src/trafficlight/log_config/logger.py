"""Root logging configuration and the transport-scoped ContextualLogger."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOG_FILE_NAME = "trafficlight.log"

_FORMATTER = logging.Formatter(
    "%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Third-party loggers that flood INFO; they follow our level only at DEBUG.
_NOISY_LOGGERS = ("urllib3", "paho", "gpiozero")


def setup_logging(
    log_level: str = "INFO",
    log_dir: str | None = "logs",
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> None:
    """(Re)configure the root logger: stderr plus an optional rotating file.

    Existing root handlers are closed and replaced, so calling this again
    (e.g. after the config is reloaded) does not duplicate output.

    Args:
        log_level: Level name; unknown names fall back to INFO.
        log_dir: Directory for ``trafficlight.log`` (created on demand).
            ``None`` or empty logs to the console only.
        max_bytes: Rotation threshold per file.
        backup_count: Rotated files kept.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                directory / LOG_FILE_NAME,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        )

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    root.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(_FORMATTER)
        root.addHandler(handler)

    third_party = level if level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class ContextualLogger:
    """Logger facade that tags every line with ``[key=value]`` pairs.

    Transports use it so interleaved lines from the timer, network and
    consumer threads can be told apart::

        log = ContextualLogger(get_logger(__name__), transport="push")
        log.info("Connected")  # "[transport=push] Connected"
    """

    def __init__(self, logger: logging.Logger, **context: Any) -> None:
        self._logger = logger
        self._tag = "".join(f"[{key}={value}]" for key, value in context.items())

    @property
    def logger(self) -> logging.Logger:
        """The wrapped stdlib logger (handed to paho's ``enable_logger``)."""
        return self._logger

    def log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._tag:
            msg = f"{self._tag} {msg}"
        kwargs.setdefault("stacklevel", 3)
        self._logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self.log(logging.ERROR, msg, *args, **kwargs)
