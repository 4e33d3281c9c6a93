from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

# stdout carries the saved page path; diagnostics go to stderr.
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

NOISY_LOGGERS = ("aiohttp", "asyncio", "chardet", "charset_normalizer")


def configure_logging(level: int | str = logging.WARNING, log_path: Path | None = None) -> None:
    level_no = logging.getLevelName(level) if isinstance(level, str) else level
    root = logging.getLogger()
    root.setLevel(level_no)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root.addHandler(console)

    if log_path is not None:
        file_handler = RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root.addHandler(file_handler)

    # Library chatter only shows up when the user asked for DEBUG.
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if level_no <= logging.DEBUG else logging.WARNING)
