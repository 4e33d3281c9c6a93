from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import aiohttp

from page_loader.core.config import LoaderSettings
from page_loader.core.fetcher import Fetcher
from page_loader.core.models import Asset, DownloadResult, LoaderState, PageRequest, RewriteEntry
from page_loader.core.naming import resource_file_name
from page_loader.core.observers import CompositeObserver, NullObserver, PipelineObserver, ProgressObserver
from page_loader.core.rewriter import RewriteEngine
from page_loader.core.scanner import has_candidate_tags, scan_assets

logger = logging.getLogger(__name__)


class PageLoader:
    """Downloads one page plus its same-origin images, stylesheets, scripts and canonical links.

    Resource fetches run concurrently and unbounded. The first failure
    propagates as-is: sibling fetches are not cancelled, files already written
    stay on disk and the page itself is not saved.
    """

    def __init__(
        self,
        *,
        settings: LoaderSettings,
        session: aiohttp.ClientSession,
        observer: PipelineObserver | None = None,
    ) -> None:
        self._settings = settings
        self._fetcher = Fetcher(settings=settings, session=session)
        observer = observer or NullObserver()
        if settings.show_progress:
            observer = CompositeObserver(observer, ProgressObserver())
        self._observer = observer
        self._state: LoaderState | None = None

    @property
    def state(self) -> LoaderState | None:
        return self._state

    def _enter(self, state: LoaderState) -> None:
        self._state = state
        self._observer.state_changed(state)

    async def load(self, url: str, output_dir: Path | str) -> Path:
        request = PageRequest(url=url, output_dir=Path(output_dir))
        try:
            path = await self._run(request)
        except BaseException:
            self._enter(LoaderState.FAILED)
            raise
        self._enter(LoaderState.DONE)
        return path

    async def _run(self, request: PageRequest) -> Path:
        engine = RewriteEngine(page_url=request.url, output_dir=request.output_dir)

        self._enter(LoaderState.FETCHING_PAGE)
        page = await self._fetcher.fetch(request.url, target="page")
        self._observer.page_fetched(request.url, len(page.body))

        document = page.text()
        if not has_candidate_tags(document):
            logger.debug("No img/link/script tags in %s; saving as-is", request.url)
            self._enter(LoaderState.PERSISTING)
            return engine.write_page(page.body)

        self._enter(LoaderState.SCANNING)
        local_assets = scan_assets(document, request.url, on_discovered=self._observer.asset_discovered)
        if not local_assets:
            self._enter(LoaderState.PERSISTING)
            return engine.write_page(page.body)

        engine.ensure_resource_dir()
        self._enter(LoaderState.FETCHING_RESOURCES)
        await asyncio.gather(*(self._download(engine, asset) for asset in local_assets))

        self._enter(LoaderState.REWRITING)
        document, counts = engine.apply(document)
        for entry in engine.entries:
            self._observer.rewrite_applied(
                entry.original_reference, entry.local_relative_path, counts.get(entry.original_reference, 0)
            )

        self._enter(LoaderState.PERSISTING)
        return engine.write_page(page.encode_text(document))

    async def _download(self, engine: RewriteEngine, asset: Asset) -> RewriteEntry:
        payload = await self._fetcher.fetch(asset.resolved_url, target="resource")
        result = DownloadResult(
            asset=asset,
            payload=payload.body,
            local_file_name=resource_file_name(asset.resolved_url),
        )
        entry = engine.persist(result)
        self._observer.resource_fetched(result)
        return entry


async def load(
    url: str,
    output_dir: Path | str,
    *,
    settings: LoaderSettings | None = None,
    observer: PipelineObserver | None = None,
    session: aiohttp.ClientSession | None = None,
) -> Path:
    """Save `url` and its local resources into `output_dir`; return the page file path."""

    settings = settings or LoaderSettings()
    if session is not None:
        return await PageLoader(settings=settings, session=session, observer=observer).load(url, output_dir)
    async with aiohttp.ClientSession() as s:
        return await PageLoader(settings=settings, session=s, observer=observer).load(url, output_dir)


def load_sync(url: str, output_dir: Path | str, **kwargs) -> Path:
    return asyncio.run(load(url, output_dir, **kwargs))
