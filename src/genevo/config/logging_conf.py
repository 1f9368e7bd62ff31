"""Standard logging configuration for the package."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any, Mapping

from .constants import LOG_FILE_NAME
from .settings import Settings, get_settings

__all__ = ["JSONFormatter", "configure_logging"]


_RESERVED = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
}


class JSONFormatter(logging.Formatter):
    """Formatter serialising each ``LogRecord`` as one JSON object."""

    def __init__(self, *, default_context: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self._default_context = dict(default_context or {})

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info

        payload.update(self._default_context)

        for key, value in record.__dict__.items():
            if key in _RESERVED:
                continue
            payload.setdefault(key, value)

        return json.dumps(payload, ensure_ascii=False, default=str)


def _ensure_log_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def configure_logging(
    *,
    settings: Settings | None = None,
    level: int | str = logging.INFO,
    structured: bool | None = None,
    module_levels: Mapping[str, int | str] | None = None,
    stream: IO[str] | None = None,
    context: Mapping[str, Any] | None = None,
    log_file: Path | None = None,
) -> None:
    """Configure the root logger using the project defaults.

    Parameters
    ----------
    settings:
        :class:`Settings` instance to use. When ``None`` the cached
        :func:`get_settings` singleton is used.
    level:
        Level applied to the stream and file handlers.
    structured:
        When ``True`` records are written with :class:`JSONFormatter`. When
        ``None`` falls back to ``settings.structured_logging``.
    module_levels:
        Mapping ``logger -> level`` for fine tuning (e.g. quieting
        ``genevo.engine.genotype`` during long runs).
    stream:
        Target of the main ``StreamHandler``; ``sys.stderr`` by default.
    context:
        Extra fields added to every structured record (e.g. ``{"run": 3}``).
    log_file:
        Alternative path for the appended log copy. When ``None`` uses
        ``settings.logs_dir / 'genevo.log'``.
    """

    settings = settings or get_settings()
    structured = settings.structured_logging if structured is None else structured

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.DEBUG)

    formatter: logging.Formatter
    if structured:
        formatter = JSONFormatter(default_context=context)
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    stream_handler = logging.StreamHandler(stream)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    file_target = log_file or (settings.logs_dir / LOG_FILE_NAME)
    try:
        _ensure_log_dir(file_target.parent)
        file_handler = logging.FileHandler(file_target, encoding="utf-8")
    except OSError:  # pragma: no cover - filesystem issues exercised indirectly
        root_logger.warning("could not open log file %s", file_target)
    else:
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if module_levels:
        for logger_name, logger_level in module_levels.items():
            logging.getLogger(logger_name).setLevel(logger_level)
