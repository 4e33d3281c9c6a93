from __future__ import annotations

from pathlib import Path

import pytest

from page_loader import cli
from page_loader.core.errors import NotFoundError


def test_main_prints_saved_path(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    calls = []

    def fake_load(url, output_dir, **kwargs):
        calls.append((url, output_dir, kwargs))
        return output_dir / "example-com.html"

    monkeypatch.setattr(cli, "load_sync", fake_load)
    out = tmp_path / "nested" / "out"
    code = cli.main(["https://example.com", "-o", str(out), "--progress", "--timeout", "3"])

    assert code == 0
    assert out.is_dir()
    assert capsys.readouterr().out.strip() == str(out.resolve() / "example-com.html")
    (url, output_dir, kwargs) = calls[0]
    assert url == "https://example.com"
    assert kwargs["settings"].show_progress is True
    assert kwargs["settings"].timeout_seconds == 3


def test_main_maps_errors_to_exit_code(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    def fake_load(url, output_dir, **kwargs):
        raise NotFoundError(url, target="page")

    monkeypatch.setattr(cli, "load_sync", fake_load)
    code = cli.main(["https://example.com/missing", "-o", str(tmp_path)])

    assert code == 1
    assert capsys.readouterr().err.strip() == "Error: Page not found (404): https://example.com/missing"
