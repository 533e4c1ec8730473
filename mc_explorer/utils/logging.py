"""
Logging for the asset graph explorer.

Modules log through ``get_logger``; nothing reaches a console or file until
the host application calls ``setup_logging``. ``log_operation`` and
``log_error`` attach structured context (node ids, edge ids, counts) to the
record, which the formatter renders after the message and handlers can read
back from ``record.explorer_context``.
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal, Mapping, TextIO

ROOT_LOGGER_NAME = "mc_explorer"
CONTEXT_ATTR = "explorer_context"

# Id lists longer than this are shortened in rendered context
MAX_LISTED_IDS = 5

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

_package_logger = logging.getLogger(ROOT_LOGGER_NAME)
_package_logger.addHandler(logging.NullHandler())


def format_context(context: Mapping[str, Any]) -> str:
    """Render context as ``key=value`` pairs.

    Usage:
        format_context({"node": "de_customers", "edge_ids": ["e1", "e2"]})
        # -> "node=de_customers edge_ids=[e1, e2]"
    """
    parts = []
    for key, value in context.items():
        if isinstance(value, (set, frozenset)):
            value = sorted(value, key=str)
        if isinstance(value, (list, tuple)):
            shown = [str(item) for item in value[:MAX_LISTED_IDS]]
            if len(value) > MAX_LISTED_IDS:
                shown.append(f"+{len(value) - MAX_LISTED_IDS} more")
            value = f"[{', '.join(shown)}]"
        parts.append(f"{key}={value}")
    return " ".join(parts)


class ExplorerFormatter(logging.Formatter):
    """``[time] LEVEL [module] message | context`` with optional level colors."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = False):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%d %H:%M:%S")

        level = f"{record.levelname:8}"
        if self.use_colors and record.levelname in self.LEVEL_COLORS:
            level = f"{self.LEVEL_COLORS[record.levelname]}{level}{self.RESET}"

        name = record.name.removeprefix(f"{ROOT_LOGGER_NAME}.")
        line = f"[{timestamp}] {level} [{name}] {record.getMessage()}"

        context = getattr(record, CONTEXT_ATTR, None)
        if context:
            line = f"{line} | {format_context(context)}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(
    level: LogLevel = "INFO",
    log_dir: str | Path | None = None,
    console: bool = True,
    stream: TextIO | None = None,
    log_filename: str = "mc_explorer.log",
) -> logging.Logger:
    """Install console and/or file handlers on the package logger.

    Calling it again replaces the handlers from the previous call.

    Args:
        level: Minimum level for the package logger and its handlers
        log_dir: Directory for ``log_filename``; no file is written when None
        console: Log to ``stream`` (stderr by default)
        stream: Console stream; colors are used only when it is a TTY
        log_filename: Log file name inside ``log_dir``

    Returns:
        The package logger
    """
    for handler in list(_package_logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            _package_logger.removeHandler(handler)
            handler.close()

    _package_logger.setLevel(level)

    if console:
        stream = stream if stream is not None else sys.stderr
        console_handler = logging.StreamHandler(stream)
        console_handler.setLevel(level)
        console_handler.setFormatter(ExplorerFormatter(use_colors=stream.isatty()))
        _package_logger.addHandler(console_handler)

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path / log_filename, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(ExplorerFormatter())
        _package_logger.addHandler(file_handler)

    # Our console handler replaces whatever the root logger would print
    _package_logger.propagate = not console
    return _package_logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the package namespace, e.g. ``get_logger("graph.indexer")``."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def log_operation(logger: logging.Logger, operation: str, **context: Any) -> None:
    """Log a completed operation at INFO with structured context.

    Usage:
        log_operation(logger, "Expanded node", node=node_id, added_nodes=3)
    """
    logger.info(operation, extra={CONTEXT_ATTR: context})


def log_error(
    logger: logging.Logger,
    operation: str,
    error: BaseException,
    **context: Any,
) -> None:
    """Log a failed operation at ERROR with its traceback and context."""
    logger.error(
        f"{operation} failed: {type(error).__name__}: {error}",
        exc_info=error,
        extra={CONTEXT_ATTR: context},
    )
