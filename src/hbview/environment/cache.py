"""Compiled-template cache for the hbview engine.

Maps an absolute template path to its `CompiledTemplate`. Entries are
added on first use and never evicted; templates are treated as static for
the life of the process.

Concurrency:
The cache is driven from one asyncio event loop. Reads happen in worker
threads (``asyncio.to_thread``); compiling is synchronous. Concurrent
misses for the same path share one in-flight load task, so N simultaneous
first requests cost one read and one compile:

    request A: miss -> starts the load task, awaits it (shielded)
    request B: miss -> finds the task, awaits it (shielded), same template

The load task belongs to the cache, not to request A. Cancelling A stops
A waiting; the load finishes and B still gets its template.

With caching disabled every call reads and compiles on its own. Nothing is
shared, so there is nothing that can go stale.

"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from hbview.environment.exceptions import CompileError
from hbview.environment.loaders import Loader
from hbview.template.core import CompiledTemplate

logger = logging.getLogger(__name__)

CompileFn = Callable[[str], Callable[..., Any]]


class TemplateCache:
    """Path → CompiledTemplate cache with miss coalescing.

    Attributes:
        enabled: When False, nothing is stored and every lookup recompiles
        stats: Counters for ``hits``, ``misses`` and ``compiles``

    Example:
        >>> cache = TemplateCache(FileSystemLoader(), Compiler().compile)
        >>> first = await cache.get_or_compile(Path("/views/home.hbs"))
        >>> second = await cache.get_or_compile(Path("/views/home.hbs"))
        >>> first is second
        True
    """

    def __init__(self, loader: Loader, compile_fn: CompileFn, *, enabled: bool = True):
        self._loader = loader
        self._compile_fn = compile_fn
        self.enabled = enabled
        self._templates: dict[Path, CompiledTemplate] = {}
        self._pending: dict[Path, asyncio.Task[CompiledTemplate]] = {}
        self.stats: dict[str, int] = {"hits": 0, "misses": 0, "compiles": 0}

    def get(self, path: Path) -> CompiledTemplate | None:
        return self._templates.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    async def get_or_compile(self, path: Path) -> CompiledTemplate:
        """Return the compiled template for ``path``, loading it on a miss.

        Raises:
            ReadError: If the source cannot be read
            CompileError: If the source is not valid Handlebars
        """
        if not self.enabled:
            source = await asyncio.to_thread(self._loader.get_source, path)
            return self._build(path, source)

        template = self._templates.get(path)
        if template is not None:
            self.stats["hits"] += 1
            return template

        task = self._pending.get(path)
        if task is None:
            self.stats["misses"] += 1
            task = asyncio.ensure_future(self._load(path))
            task.add_done_callback(_consume_result)
            self._pending[path] = task
        else:
            logger.debug(f"Waiting on in-flight compile of {path}")
        # A cancelled caller abandons only its own wait, never the shared load
        return await asyncio.shield(task)

    async def _load(self, path: Path) -> CompiledTemplate:
        try:
            source = await asyncio.to_thread(self._loader.get_source, path)
            template = self._build(path, source)
            self._templates[path] = template
            return template
        finally:
            self._pending.pop(path, None)

    def compile(self, path: Path) -> CompiledTemplate:
        """Read and compile ``path`` synchronously, replacing any cached entry.

        Used for eager loading (partials), where skipping the hit check is
        the point.
        """
        template = self._build(path, self._loader.get_source(path))
        if self.enabled:
            self._templates[path] = template
        return template

    def _build(self, path: Path, source: str) -> CompiledTemplate:
        logger.debug(f"Compiling template {path}")
        self.stats["compiles"] += 1
        try:
            fn = self._compile_fn(source)
        except Exception as e:
            message = str(e).strip() or type(e).__name__
            raise CompileError(message, template_path=path) from e
        return CompiledTemplate(path, source, fn)


def _consume_result(task: asyncio.Task[CompiledTemplate]) -> None:
    # Retrieve the outcome so a load whose waiters all left is not reported as unhandled
    if not task.cancelled():
        task.exception()
