from __future__ import annotations

import logging
from typing import Protocol

from tqdm import tqdm

from page_loader.core.models import Asset, DownloadResult, LoaderState

logger = logging.getLogger(__name__)


class PipelineObserver(Protocol):
    """Receives checkpoint notifications from a page load. Must not raise."""

    def state_changed(self, state: LoaderState) -> None: ...

    def page_fetched(self, url: str, size: int) -> None: ...

    def asset_discovered(self, asset: Asset) -> None: ...

    def resource_fetched(self, result: DownloadResult) -> None: ...

    def rewrite_applied(self, original: str, local_path: str, count: int) -> None: ...


class NullObserver:
    def state_changed(self, state: LoaderState) -> None:
        pass

    def page_fetched(self, url: str, size: int) -> None:
        pass

    def asset_discovered(self, asset: Asset) -> None:
        pass

    def resource_fetched(self, result: DownloadResult) -> None:
        pass

    def rewrite_applied(self, original: str, local_path: str, count: int) -> None:
        pass


class LoggingObserver(NullObserver):
    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def state_changed(self, state: LoaderState) -> None:
        self._log.debug("state -> %s", state.value)

    def page_fetched(self, url: str, size: int) -> None:
        self._log.info("Fetched page %s (%d bytes)", url, size)

    def asset_discovered(self, asset: Asset) -> None:
        self._log.debug(
            "Found %s %s -> %s (%s)",
            asset.kind.name.lower(),
            asset.original_reference,
            asset.resolved_url,
            "local" if asset.is_local else "external",
        )

    def resource_fetched(self, result: DownloadResult) -> None:
        self._log.info("Saved %s as %s", result.asset.resolved_url, result.local_file_name)

    def rewrite_applied(self, original: str, local_path: str, count: int) -> None:
        if count:
            self._log.debug("Rewrote %s -> %s (%d occurrence(s))", original, local_path, count)
        else:
            self._log.warning("Reference %s not found in document; left unchanged", original)


class ProgressObserver(NullObserver):
    """tqdm bar over the resource downloads of one page."""

    def __init__(self, *, disable: bool = False) -> None:
        self._disable = disable
        self._bar: tqdm | None = None
        self._pending: list[Asset] = []

    def asset_discovered(self, asset: Asset) -> None:
        if asset.is_local:
            self._pending.append(asset)

    def state_changed(self, state: LoaderState) -> None:
        if state is LoaderState.FETCHING_RESOURCES and self._pending:
            self._bar = tqdm(total=len(self._pending), unit="file", desc="Resources", disable=self._disable)
        elif state in {LoaderState.REWRITING, LoaderState.DONE, LoaderState.FAILED}:
            self.close()

    def resource_fetched(self, result: DownloadResult) -> None:
        if self._bar is not None:
            self._bar.set_postfix_str(result.local_file_name, refresh=False)
            self._bar.update(1)

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
        self._pending.clear()


class CompositeObserver:
    def __init__(self, *observers: PipelineObserver) -> None:
        self._observers = observers

    def state_changed(self, state: LoaderState) -> None:
        for o in self._observers:
            o.state_changed(state)

    def page_fetched(self, url: str, size: int) -> None:
        for o in self._observers:
            o.page_fetched(url, size)

    def asset_discovered(self, asset: Asset) -> None:
        for o in self._observers:
            o.asset_discovered(asset)

    def resource_fetched(self, result: DownloadResult) -> None:
        for o in self._observers:
            o.resource_fetched(result)

    def rewrite_applied(self, original: str, local_path: str, count: int) -> None:
        for o in self._observers:
            o.rewrite_applied(original, local_path, count)
