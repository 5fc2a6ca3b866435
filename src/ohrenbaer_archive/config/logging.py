"""Logging configuration."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Chatty third-party loggers that only matter when debugging them directly
_NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


def setup_logging(
    verbose: bool = False,
    log_file: Path | None = None,
    console: Console | None = None,
) -> None:
    """Configure root logging for the CLI.

    Args:
        verbose: Log at DEBUG instead of INFO
        log_file: Optional file that receives the same records with timestamps
        console: Console to render on (default: new stderr console). Pass the
            console that draws live progress so log lines appear above the bar.
    """
    level = logging.DEBUG if verbose else logging.INFO

    handlers: list[logging.Handler] = [
        RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
    ]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
