"""Logging setup for the server and the CLI."""

import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from ..errors import FilesystemError

console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
RICH_FORMAT = "%(message)s"

# Per-request loggers; a poll cycle issues one request per project and export
QUIET_LOGGERS = ("aiohttp.access", "aiohttp.client", "uvicorn.access")

# Loggers uvicorn may have given their own handlers before we run
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str | Path] = None,
    use_rich: bool = True,
) -> Optional[Path]:
    """Configure the root logger for the language packs server.

    Uvicorn's loggers are routed to the root handlers so server and sync
    messages share one format and one file.

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Also log to this file (relative to the working directory)
        use_rich: Use a RichHandler for the console instead of plain text

    Returns:
        Resolved path of the log file, if any

    Raises:
        FilesystemError: If the log file cannot be opened
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    if use_rich:
        console_handler: logging.Handler = RichHandler(
            console=console,
            show_path=False,
            rich_tracebacks=True,
        )
        console_handler.setFormatter(logging.Formatter(RICH_FORMAT))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    log_path = None
    if log_file:
        log_path = Path(log_file).resolve()
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
        except OSError as e:
            raise FilesystemError(f"Cannot open log file {log_path}: {e}") from e
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(file_handler)

    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    return log_path


def get_logger(name: str) -> logging.Logger:
    """Get a module logger (typically ``get_logger(__name__)``)."""
    return logging.getLogger(name)
