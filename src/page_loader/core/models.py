from __future__ import annotations

import html
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator

from bs4 import BeautifulSoup


class AssetKind(Enum):
    """Embedded reference types the loader downloads.

    Each variant knows which element/attribute carries the reference and how
    that reference is substituted in the raw document text.
    """

    IMAGE = ("img", "src", None)
    STYLESHEET = ("link", "href", "stylesheet")
    SCRIPT = ("script", "src", None)
    CANONICAL = ("link", "href", "canonical")

    def __init__(self, tag: str, attribute: str, rel: str | None) -> None:
        self.tag = tag
        self.attribute = attribute
        self.rel = rel

    def iter_references(self, soup: BeautifulSoup) -> Iterator[str]:
        for el in soup.find_all(self.tag):
            if self.rel is not None:
                rels = el.get("rel") or []
                if isinstance(rels, str):
                    rels = rels.split()
                if self.rel not in {r.lower() for r in rels}:
                    continue
            value = el.get(self.attribute)
            if isinstance(value, str) and value:
                yield value

    def substitute(self, document: str, original: str, replacement: str) -> tuple[str, int]:
        if self is AssetKind.STYLESHEET:
            return _substitute_href(document, original, replacement)
        total = 0
        for spelling in source_spellings(original):
            count = document.count(spelling)
            if count:
                document = document.replace(spelling, replacement)
                total += count
        return document, total


def source_spellings(value: str) -> list[str]:
    """Ways a parsed attribute value can be written in markup, longest first.

    The parser decodes entities (`&amp;` -> `&`), so the raw text may hold an
    escaped form of the reference rather than the value itself.
    """

    spellings = {value, value.replace("&", "&amp;"), html.escape(value, quote=True)}
    return sorted(spellings, key=lambda s: (-len(s), s))


def _substitute_href(document: str, original: str, replacement: str) -> tuple[str, int]:
    count = 0
    for spelling in source_spellings(original):
        # Serialized self-closing form, e.g. `<link rel="stylesheet" href="/a.css" />`.
        legacy = f'href="{spelling}" />'
        n = document.count(legacy)
        if n:
            document = document.replace(legacy, f'href="{replacement}">')
            count += n

    alternatives = "|".join(re.escape(s) for s in source_spellings(original))
    pattern = re.compile(r"""href\s*=\s*(["'])(?:""" + alternatives + r")\1")
    document, n = pattern.subn(lambda m: f"href={m.group(1)}{replacement}{m.group(1)}", document)
    return document, count + n


@dataclass(frozen=True)
class PageRequest:
    url: str
    output_dir: Path


@dataclass(frozen=True)
class Asset:
    kind: AssetKind
    original_reference: str
    resolved_url: str
    is_local: bool


@dataclass(frozen=True)
class DownloadResult:
    asset: Asset
    payload: bytes
    local_file_name: str


@dataclass(frozen=True)
class RewriteEntry:
    kind: AssetKind
    original_reference: str
    local_relative_path: str


class LoaderState(str, Enum):
    FETCHING_PAGE = "fetching_page"
    SCANNING = "scanning"
    FETCHING_RESOURCES = "fetching_resources"
    REWRITING = "rewriting"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"
