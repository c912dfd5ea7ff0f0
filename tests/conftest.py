"""Pytest configuration and fixtures for hbview tests."""

from __future__ import annotations

import threading
from collections import Counter
from pathlib import Path

import pytest

from hbview import FileSystemLoader, ViewEngine

VIEWS = {
    "home.hbs": "<h1>{{title}}</h1>",
    "partial.hbs": "<section>{{> card}}</section>",
    "data.hbs": "<ul>{{#each items}}<li>{{name}}</li>{{/each}}</ul>",
    "styled.hbs": (
        '{{#contentFor "head"}}<link href="/home.css">{{/contentFor}}'
        "<p>{{title}}</p>"
    ),
    "layouts/main.hbs": "<main>{{{body}}}</main>",
    "layouts/other.hbs": '<div class="other">{{{body}}}</div>',
    "layouts/head.hbs": '<head>{{{block "head"}}}</head><body>{{{body}}}</body>',
    "partials/card.hbs": "<b>{{name}}</b>",
    "partials/forms/input.hbs": '<input name="{{field}}">',
}


def write_views(root: Path, files: dict[str, str]) -> Path:
    """Write ``files`` (relative path -> source) below ``root``."""
    for relative, source in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source)
    return root


class CountingLoader(FileSystemLoader):
    """FileSystemLoader that records how often each path is read."""

    def __init__(self) -> None:
        super().__init__()
        self.reads: Counter[Path] = Counter()
        self._lock = threading.Lock()

    def get_source(self, path: Path) -> str:
        with self._lock:
            self.reads[path] += 1
        return super().get_source(path)


@pytest.fixture
def views(tmp_path: Path) -> Path:
    """A view root with views, layouts and partials."""
    return write_views(tmp_path / "views", VIEWS)


@pytest.fixture
def loader() -> CountingLoader:
    return CountingLoader()


@pytest.fixture
def engine(views: Path, loader: CountingLoader) -> ViewEngine:
    """Engine over the ``views`` tree with default options."""
    return ViewEngine(views, loader=loader)
