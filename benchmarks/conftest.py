from __future__ import annotations

import asyncio
import json
import os
import platform
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

from hbview import ViewEngine

try:
    import importlib.metadata as importlib_metadata
except ModuleNotFoundError:  # pragma: no cover
    import importlib_metadata  # type: ignore


BASE_DIR = Path(__file__).resolve().parent
BENCHMARK_OUTPUT_DIR = BASE_DIR.parent / ".benchmarks"
BENCHMARK_OUTPUT_DIR.mkdir(exist_ok=True)

BENCH_VIEWS = {
    "minimal.hbs": "Hello {{name}}",
    "list.hbs": (
        "<ul>{{#each items}}<li class=\"{{kind}}\">{{@index}} {{name}}</li>"
        "{{else}}<li>none</li>{{/each}}</ul>"
    ),
    "page.hbs": (
        '{{#contentFor "head"}}<link href="/page.css">{{/contentFor}}'
        '{{#contentFor "scripts"}}<script src="/page.js"></script>{{/contentFor}}'
        "<h1>{{title}}</h1>{{#each items}}{{> card}}{{/each}}"
    ),
    "chained.hbs": "{{!< section}}<p>{{title}}</p>",
    "layouts/main.hbs": (
        '<html><head>{{{block "head"}}}</head>'
        '<body>{{{body}}}{{{block "scripts"}}}</body></html>'
    ),
    "layouts/section.hbs": "{{!< main}}<section>{{{body}}}</section>",
    "partials/card.hbs": '<div class="card"><h2>{{name}}</h2><p>{{kind}}</p></div>',
}


def _version(dist: str) -> str:
    try:
        return importlib_metadata.version(dist)
    except importlib_metadata.PackageNotFoundError:
        return "unknown"


def collect_environment_metadata() -> dict[str, object]:
    """Capture reproducibility metadata for each benchmark run."""
    return {
        "python": {
            "version": platform.python_version(),
            "implementation": platform.python_implementation(),
            "executable": sys.executable,
        },
        "os": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
        "cpu": {
            "processor": platform.processor(),
            "count": os.cpu_count(),
        },
        "hbview": _version("hbview"),
        "pybars3": _version("pybars3"),
    }


@pytest.fixture(scope="session")
def environment_metadata() -> dict[str, object]:
    """Write environment metadata to .benchmarks for ingestion."""
    metadata = collect_environment_metadata()
    (BENCHMARK_OUTPUT_DIR / "environment.json").write_text(json.dumps(metadata, indent=2))
    return metadata


@pytest.fixture(scope="session")
def views_dir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    root = tmp_path_factory.mktemp("bench-views")
    for relative, source in BENCH_VIEWS.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source)
    return root


@pytest.fixture(scope="session")
def cached_engine(views_dir: Path) -> ViewEngine:
    return ViewEngine(views_dir)


@pytest.fixture(scope="session")
def uncached_engine(views_dir: Path) -> ViewEngine:
    # Every render re-reads and recompiles views, layouts and partials
    return ViewEngine(views_dir, cache_templates=False)


@pytest.fixture
def event_loop_runner() -> Iterator[asyncio.AbstractEventLoop]:
    loop = asyncio.new_event_loop()
    try:
        yield loop
    finally:
        loop.close()


@pytest.fixture(scope="session")
def items_context() -> dict[str, object]:
    return {
        "title": "Benchmark",
        "items": [{"name": f"Item {i}", "kind": "odd" if i % 2 else "even"} for i in range(100)],
    }
