"""Logging setup for mergegen runs.

Driver messages are tagged with the file they concern (``record.target``) via
:func:`for_target`. The console shows the tag in front of the message and the
file sink records it as its own column, so one output file's history can be
grepped out of a long regeneration log.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .config import LoggingConfig

_LOGGER_NAME = "mergegen"
_NO_TARGET = "-"

_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(target)s] %(message)s"


class _TargetDefault(logging.Filter):
    """Give untagged records a placeholder target so every format can use it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "target"):
            record.target = _NO_TARGET
        return True


class _ConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        target = getattr(record, "target", _NO_TARGET)
        if target == _NO_TARGET:
            return f"mergegen: {message}"
        return f"mergegen: {target}: {message}"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the mergegen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def for_target(logger: logging.Logger, target: Path | str) -> logging.LoggerAdapter:
    """Wrap ``logger`` so its records name the file being processed."""
    return logging.LoggerAdapter(logger, {"target": str(target)})


def configure_logging(
    settings: LoggingConfig | None = None, *, verbose: bool = False
) -> logging.Logger:
    """Install console and optional file handlers from the ``logging`` config block.

    ``verbose`` forces DEBUG on top of whatever the config says. Calling this
    again replaces the handlers installed by the previous call.
    """
    verbose = verbose or (settings is not None and settings.verbose)
    log_file = settings.file if settings is not None else None
    level = logging.DEBUG if verbose else logging.INFO

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setFormatter(_ConsoleFormatter("%(levelname)s %(message)s"))
    handlers: list[logging.Handler] = [console]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        handlers.append(sink)

    for handler in handlers:
        handler.setLevel(level)
        handler.addFilter(_TargetDefault())
        logger.addHandler(handler)
    return logger


__all__ = ["configure_logging", "for_target", "get_logger"]
