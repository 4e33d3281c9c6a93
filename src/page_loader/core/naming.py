from __future__ import annotations

import posixpath
import re
from urllib.parse import urlparse

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9]")

DEFAULT_EXTENSION = ".html"
RESOURCE_DIR_SUFFIX = "_files"


def sanitize(value: str) -> str:
    """Replace every character outside [A-Za-z0-9] with '-'. Idempotent."""

    return _UNSAFE_CHARS.sub("-", value)


def _host_and_path(url: str) -> tuple[str, str]:
    parsed = urlparse(url)
    return parsed.hostname or "", parsed.path or ""


def _page_stem(page_url: str) -> str:
    host, path = _host_and_path(page_url)
    return sanitize(f"{host}{path}".rstrip("/"))


def page_file_name(page_url: str) -> str:
    return f"{_page_stem(page_url)}.html"


def resource_dir_name(page_url: str) -> str:
    return f"{_page_stem(page_url)}{RESOURCE_DIR_SUFFIX}"


def resource_file_name(resource_url: str) -> str:
    """Local file name for a downloaded resource.

    The extension of the URL path is kept as-is; paths without one are assumed
    to be HTML documents (canonical links mostly) and get `.html`. Distinct
    URLs that only differ in characters outside [A-Za-z0-9], or in their query
    string, map to the same name.
    """

    host, path = _host_and_path(resource_url)
    stem, ext = posixpath.splitext(path.rstrip("/"))
    return f"{sanitize(f'{host}{stem}')}{ext or DEFAULT_EXTENSION}"


def local_relative_path(page_url: str, resource_url: str) -> str:
    return f"{resource_dir_name(page_url)}/{resource_file_name(resource_url)}"
