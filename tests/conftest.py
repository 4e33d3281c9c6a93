from __future__ import annotations

from pathlib import Path

import pytest

from page_loader.core.models import Asset, DownloadResult, LoaderState


@pytest.fixture()
def out_dir(tmp_path: Path) -> Path:
    d = tmp_path / "out"
    d.mkdir()
    return d


class RecordingObserver:
    def __init__(self) -> None:
        self.states: list[LoaderState] = []
        self.pages: list[tuple[str, int]] = []
        self.assets: list[Asset] = []
        self.fetched: list[DownloadResult] = []
        self.rewrites: list[tuple[str, str, int]] = []

    def state_changed(self, state: LoaderState) -> None:
        self.states.append(state)

    def page_fetched(self, url: str, size: int) -> None:
        self.pages.append((url, size))

    def asset_discovered(self, asset: Asset) -> None:
        self.assets.append(asset)

    def resource_fetched(self, result: DownloadResult) -> None:
        self.fetched.append(result)

    def rewrite_applied(self, original: str, local_path: str, count: int) -> None:
        self.rewrites.append((original, local_path, count))


@pytest.fixture()
def recorder() -> RecordingObserver:
    return RecordingObserver()
