from __future__ import annotations

import pytest

from page_loader.core.naming import (
    local_relative_path,
    page_file_name,
    resource_dir_name,
    resource_file_name,
    sanitize,
)


def test_page_file_name_from_host_and_path() -> None:
    assert page_file_name("https://ru.hexlet.io/courses") == "ru-hexlet-io-courses.html"


def test_page_file_name_strips_trailing_slash() -> None:
    assert page_file_name("https://ru.hexlet.io/courses/") == "ru-hexlet-io-courses.html"
    assert page_file_name("https://example.com/") == "example-com.html"


def test_page_file_name_ignores_query_and_fragment() -> None:
    assert page_file_name("https://example.com/a?b=1#c") == "example-com-a.html"


def test_resource_dir_name() -> None:
    assert resource_dir_name("https://ru.hexlet.io/courses") == "ru-hexlet-io-courses_files"


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://ru.hexlet.io/assets/professions/nodejs.png", "ru-hexlet-io-assets-professions-nodejs.png"),
        ("https://ru.hexlet.io/assets/application.css", "ru-hexlet-io-assets-application.css"),
        ("https://ru.hexlet.io/packs/js/runtime.js", "ru-hexlet-io-packs-js-runtime.js"),
        ("https://ru.hexlet.io/courses", "ru-hexlet-io-courses.html"),
        ("https://h/x.png", "h-x.png"),
        ("https://h/x.png?v=3", "h-x.png"),
        ("https://h/dir.v2/app", "h-dir-v2-app.html"),
    ],
)
def test_resource_file_name(url: str, expected: str) -> None:
    assert resource_file_name(url) == expected


def test_names_are_deterministic() -> None:
    url = "https://example.com/some/page"
    assert page_file_name(url) == page_file_name(url)
    assert resource_file_name(url + ".css") == resource_file_name(url + ".css")


def test_sanitize_is_idempotent() -> None:
    once = sanitize("ru.hexlet.io/courses?x=1&y=ä")
    assert once == "ru-hexlet-io-courses-x-1-y--"
    assert sanitize(once) == once


def test_distinct_urls_can_collide() -> None:
    assert resource_file_name("https://h/a-b.png") == resource_file_name("https://h/a/b.png")


def test_local_relative_path() -> None:
    assert local_relative_path("https://h/p", "https://h/x.png") == "h-p_files/h-x.png"
