from __future__ import annotations

import logging
from typing import Callable
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from page_loader.core.models import Asset, AssetKind

logger = logging.getLogger(__name__)


CANDIDATE_TAG_MARKERS = ("<img", "<link", "<script")


def has_candidate_tags(document: str) -> bool:
    lowered = document.lower()
    return any(marker in lowered for marker in CANDIDATE_TAG_MARKERS)


def resolve_reference(reference: str, page_url: str) -> str | None:
    """Resolve `reference` against the page URL; None unless it lands on http(s)."""

    resolved = urljoin(page_url, reference.strip())
    parsed = urlparse(resolved)
    if parsed.scheme not in {"http", "https"} or not parsed.hostname:
        return None
    return resolved


def is_same_origin(url: str, page_url: str) -> bool:
    return (urlparse(url).hostname or "") == (urlparse(page_url).hostname or "")


def discover_assets(document: str, page_url: str) -> list[Asset]:
    """Enumerate image, stylesheet, script and canonical references.

    The document is parsed once. Every reference resolving to an http(s) URL is
    returned, flagged `is_local` when it shares the page hostname. A reference
    that appears several times (or under several kinds) yields a single asset,
    the first one found; the text rewrite replaces every occurrence anyway.
    """

    soup = BeautifulSoup(document, "lxml")
    assets: list[Asset] = []
    seen: set[str] = set()
    for kind in AssetKind:
        for reference in kind.iter_references(soup):
            if reference in seen:
                continue
            resolved = resolve_reference(reference, page_url)
            if resolved is None:
                continue
            seen.add(reference)
            assets.append(
                Asset(
                    kind=kind,
                    original_reference=reference,
                    resolved_url=resolved,
                    is_local=is_same_origin(resolved, page_url),
                )
            )
    return assets


def scan_assets(
    document: str,
    page_url: str,
    *,
    on_discovered: Callable[[Asset], None] | None = None,
) -> list[Asset]:
    """Same-origin assets of the page; `on_discovered` also sees external ones."""

    local = []
    for asset in discover_assets(document, page_url):
        if on_discovered is not None:
            on_discovered(asset)
        if not asset.is_local:
            logger.debug("Skipping external %s %s", asset.kind.name.lower(), asset.resolved_url)
            continue
        local.append(asset)
    return local
