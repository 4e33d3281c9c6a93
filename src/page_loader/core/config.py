from __future__ import annotations

from dataclasses import dataclass

DEFAULT_USER_AGENT = "page-loader/1.0 (+https://pypi.org/project/page-loader/)"


@dataclass(frozen=True)
class LoaderSettings:
    user_agent: str = DEFAULT_USER_AGENT
    # Total per-request timeout handed to aiohttp; None disables it.
    timeout_seconds: float | None = 30.0
    # Draw a progress bar while resources download.
    show_progress: bool = False
