"""ViewEngine -- the hbview rendering entry point.

One engine per view root. It owns the template cache, the partial set and
the helper registry; nothing is module-global, so independent engines
(one per test, one per app) never share state.

Render pipeline for ``await engine.render("home", {"title": "Hi"})``:

1. Wait for partials (cold-start barrier, or reload when caching is off)
2. Open a per-render state (placeholder registry, template stack)
3. Compile-or-fetch ``<view_path>/home.hbs`` and render it
4. Select the layout and load its chain
5. Render each layout innermost-first with the previous output as ``body``

The first failure aborts the pipeline and propagates to the caller.

"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, overload

from pybars import Compiler

from hbview.environment.cache import CompileFn, TemplateCache
from hbview.environment.exceptions import ConfigError
from hbview.environment.loaders import FileSystemLoader, Loader, template_path
from hbview.environment.options import ViewEngineOptions
from hbview.environment.partials import PartialLoader
from hbview.environment.registry import HelperRegistry
from hbview.helpers.each import each
from hbview.helpers.placeholder import block, content_for
from hbview.render_context import async_render_context
from hbview.template.core import CompiledTemplate
from hbview.template.layout import LayoutResolver, add_extension

logger = logging.getLogger(__name__)

RenderCallback = Callable[[BaseException | None, str | None], None]


class ViewEngine:
    """Handlebars view engine with layouts, partials and placeholder blocks.

    Args:
        view_path: Root folder of views; layouts and partials live below it
        options: Engine options (defaults apply when omitted)
        loader: Template source loader (default: `FileSystemLoader`)
        compile_fn: Turns template source into a callable
            (default: ``pybars.Compiler().compile``)
        **overrides: Individual options, snake_case or camelCase

    Raises:
        ConfigError: If ``view_path`` is missing or an option is invalid
        PartialLoadError: If partials are preloaded and fail to load

    Example:
            >>> engine = ViewEngine("views", default_layout="site")
            >>> engine.register_helper("upper", lambda this, s: s.upper())
            >>> html = await engine.render("home", {"title": "Welcome"})

    Host framework integration (callback style):
            >>> engine.renderer("home", context, lambda err, html: ...)
    """

    def __init__(
        self,
        view_path: str | os.PathLike[str] | None,
        options: ViewEngineOptions | Mapping[str, Any] | None = None,
        *,
        loader: Loader | None = None,
        compile_fn: CompileFn | None = None,
        **overrides: Any,
    ):
        if view_path is None or not str(view_path):
            raise ConfigError("A base view path is required")

        if options is None:
            options = ViewEngineOptions()
        elif not isinstance(options, ViewEngineOptions):
            options = ViewEngineOptions.from_mapping(options)
        self.options = options.merged(overrides)

        self.view_path = template_path(view_path)
        self.file_extension = self.options.file_extension
        self._loader = loader if loader is not None else FileSystemLoader()
        self._cache = TemplateCache(
            self._loader,
            compile_fn if compile_fn is not None else Compiler().compile,
            enabled=self.options.cache_templates,
        )
        self._layouts = LayoutResolver(self.view_path, self.options, self._cache)
        self._partial_loader = PartialLoader(self._loader, self._cache, self.file_extension)

        self._helpers: dict[str, Callable] = {
            "each": each,
            self.options.block_helper_name: block,
            self.options.content_helper_name: content_for,
        }
        self._partials: dict[str, CompiledTemplate] = {}
        self._partial_fns: dict[str, Callable[..., Any]] = {}
        self._partials_ready = False
        self._partials_lock = asyncio.Lock()

        if self.options.preload_partials:
            self.load_partials()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def helpers(self) -> HelperRegistry:
        """Dict-like access to template helpers."""
        return HelperRegistry(self)

    @overload
    def register_helper(self, name: str, fn: Callable) -> None: ...

    @overload
    def register_helper(self, name: Mapping[str, Callable]) -> None: ...

    def register_helper(self, name: str | Mapping[str, Callable], fn: Callable | None = None) -> None:
        """Register one helper by name, or a mapping of helpers.

        pybars calls ``{{name a b}}`` as ``fn(this, a, b)`` and a block
        ``{{#name a}}..{{/name}}`` as ``fn(this, options, a)``.
        """
        if isinstance(name, str):
            if fn is None:
                raise TypeError(f"register_helper('{name}') requires a function")
            self.helpers[name] = fn
        else:
            self.helpers.update(dict(name))

    # ------------------------------------------------------------------
    # Partials
    # ------------------------------------------------------------------

    @property
    def partials(self) -> dict[str, CompiledTemplate]:
        """Currently registered partials by name (a copy)."""
        return dict(self._partials)

    def load_partials(self, *folders: str) -> dict[str, CompiledTemplate]:
        """Load partials from ``folders`` (default: the configured folders).

        The new set replaces the old one only if every folder loads.

        Raises:
            PartialLoadError: If a folder or partial cannot be loaded
        """
        partials = self._partial_loader.load(self.view_path, *(folders or self.options.partial_folders))
        self._install_partials(partials)
        return partials

    def _install_partials(self, partials: dict[str, CompiledTemplate]) -> None:
        self._partial_fns = {name: template.fn for name, template in partials.items()}
        self._partials = partials
        self._partials_ready = True

    async def _ensure_partials(self) -> None:
        if not self.options.cache_templates:
            # Live reload: pick up partial edits on every render
            partials = await asyncio.to_thread(
                self._partial_loader.load, self.view_path, *self.options.partial_folders
            )
            self._install_partials(partials)
            return
        if self._partials_ready:
            return
        async with self._partials_lock:
            if not self._partials_ready:
                logger.debug("Loading partials before first render")
                partials = await asyncio.to_thread(
                    self._partial_loader.load, self.view_path, *self.options.partial_folders
                )
                self._install_partials(partials)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    @property
    def cache(self) -> TemplateCache:
        return self._cache

    def resolve_view(self, view: str | os.PathLike[str]) -> Path:
        """Map a view name (or path) to its template path."""
        name = add_extension(os.fspath(view), self.file_extension)
        return template_path(self.view_path / name)

    def resolve_layout(self, name: str, relative_to: Path | None = None) -> Path:
        """Map a layout name to its template path."""
        return self._layouts.resolve_path(name, relative_to)

    async def get_template(self, view: str | os.PathLike[str]) -> CompiledTemplate:
        """Compile-or-fetch the template for a view name."""
        return await self._cache.get_or_compile(self.resolve_view(view))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    async def render(self, view: str | os.PathLike[str], context: Mapping[str, Any] | None = None) -> str:
        """Render a view, wrapped in its layout chain.

        Args:
            view: View name relative to the view root, or a path
            context: Template data; ``layout`` selects the layout
                (None/False/"" for none). The mapping is copied, never
                mutated.

        Returns:
            Rendered output

        Raises:
            ReadError, CompileError, RenderError: Per-request failures
            PartialLoadError: If lazy partial loading fails
        """
        await self._ensure_partials()
        data: dict[str, Any] = dict(context or {})
        view_path = self.resolve_view(view)

        async with async_render_context(view_path=view_path):
            template = await self._cache.get_or_compile(view_path)
            body = self._render_template(template, data)

            layout = self._layouts.select(data, template)
            if layout is None:
                return body

            for layout_template in await self._layouts.chain(layout, template.path):
                data[self.options.body_field] = body
                body = self._render_template(layout_template, data)
            return body

    def _render_template(self, template: CompiledTemplate, data: dict[str, Any]) -> str:
        return template.render(data, self._helpers, self._partial_fns)

    def renderer(
        self,
        view: str | os.PathLike[str],
        context: Mapping[str, Any] | None,
        callback: RenderCallback,
    ) -> asyncio.Task[str]:
        """Callback-style render for host frameworks.

        Schedules `render` on the running loop and calls
        ``callback(error, None)`` or ``callback(None, output)`` exactly once.
        Render errors are delivered to the callback, never raised here.
        """
        task = asyncio.ensure_future(self.render(view, context))

        def _done(finished: asyncio.Task[str]) -> None:
            if finished.cancelled():
                return
            error = finished.exception()
            if error is not None:
                logger.debug(f"Render of {view} failed: {error}")
                callback(error, None)
            else:
                callback(None, finished.result())

        task.add_done_callback(_done)
        return task

    def __repr__(self) -> str:
        return f"<ViewEngine {str(self.view_path)!r} templates={len(self._cache)}>"
