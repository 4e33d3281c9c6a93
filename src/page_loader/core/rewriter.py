from __future__ import annotations

import logging
from pathlib import Path

from page_loader.core.errors import filesystem_error
from page_loader.core.models import DownloadResult, RewriteEntry
from page_loader.core.naming import local_relative_path, page_file_name, resource_dir_name

logger = logging.getLogger(__name__)

_PLACEHOLDER_DIGITS = "".join(chr(0xE000 + d) for d in range(10))


def _placeholder(index: int) -> str:
    # NUL and private-use code points only; no markup reference is a substring of it.
    digits = "".join(_PLACEHOLDER_DIGITS[int(c)] for c in str(index))
    return f"\x00{digits}\x00"


def write_file(path: Path, data: bytes) -> None:
    try:
        path.write_bytes(data)
    except OSError as e:
        raise filesystem_error(e, path, operation="write") from e


class RewriteEngine:
    """Stores downloaded resources and rewrites their references in the page text.

    Substitution is purely textual. Entries are applied longest reference
    first through intermediate placeholders, so a reference that is a
    substring of another one (or of an already substituted local path) is
    never rewritten twice.
    """

    def __init__(self, *, page_url: str, output_dir: Path) -> None:
        self._page_url = page_url
        self._output_dir = output_dir
        self._dir_name = resource_dir_name(page_url)
        self._entries: list[RewriteEntry] = []

    @property
    def resource_dir(self) -> Path:
        return self._output_dir / self._dir_name

    @property
    def page_path(self) -> Path:
        return self._output_dir / page_file_name(self._page_url)

    @property
    def entries(self) -> list[RewriteEntry]:
        return list(self._entries)

    def ensure_resource_dir(self) -> Path:
        # The output directory itself must already exist.
        path = self.resource_dir
        try:
            path.mkdir(exist_ok=True)
        except OSError as e:
            raise filesystem_error(e, path, operation="create directory") from e
        return path

    def persist(self, result: DownloadResult) -> RewriteEntry:
        write_file(self.resource_dir / result.local_file_name, result.payload)
        entry = RewriteEntry(
            kind=result.asset.kind,
            original_reference=result.asset.original_reference,
            local_relative_path=local_relative_path(self._page_url, result.asset.resolved_url),
        )
        self._entries.append(entry)
        return entry

    def apply(self, document: str) -> tuple[str, dict[str, int]]:
        counts: dict[str, int] = {}
        ordered = sorted(self._entries, key=lambda e: len(e.original_reference), reverse=True)
        placeholders: list[tuple[str, str]] = []
        for index, entry in enumerate(ordered):
            token = _placeholder(index)
            document, n = entry.kind.substitute(document, entry.original_reference, token)
            counts[entry.original_reference] = n
            placeholders.append((token, entry.local_relative_path))
        for token, local in placeholders:
            document = document.replace(token, local)
        return document, counts

    def write_page(self, data: bytes) -> Path:
        path = self.page_path
        write_file(path, data)
        logger.debug("Wrote %s (%d bytes)", path, len(data))
        return path
