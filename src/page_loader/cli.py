from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from page_loader import __version__
from page_loader.core.config import DEFAULT_USER_AGENT, LoaderSettings
from page_loader.core.errors import PageLoaderError
from page_loader.core.loader import load_sync
from page_loader.core.logging_config import configure_logging
from page_loader.core.observers import LoggingObserver

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="page-loader",
        description="Download a web page and its same-origin resources for offline viewing.",
    )
    parser.add_argument("url", help="URL of the page to download")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path.cwd(),
        help="Output directory (defaults to the current directory)",
    )
    parser.add_argument("--timeout", type=float, default=30.0, help="Per-request timeout in seconds")
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header to send")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar for resource downloads")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    output_dir = args.output.expanduser().resolve()
    settings = LoaderSettings(
        user_agent=args.user_agent,
        timeout_seconds=args.timeout if args.timeout > 0 else None,
        show_progress=args.progress,
    )

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        path = load_sync(args.url, output_dir, settings=settings, observer=LoggingObserver())
    except (PageLoaderError, OSError) as e:
        logger.debug("Load failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
