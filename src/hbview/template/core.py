"""hbview CompiledTemplate -- a compiled Handlebars template bound to its path.

The compiled callable comes from pybars. This wrapper adds the things the
engine needs on top of it: the template path (cache key and error tag),
the layout the source declares with a ``{{!< name}}`` comment, and error
conversion so every failure inside a render surfaces as a `RenderError`
naming the template.

"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from hbview.environment.exceptions import RenderError, ViewError
from hbview.helpers.placeholder import as_text
from hbview.render_context import RenderContext, get_render_context, render_context

# {{!< layout}} declares the layout (or parent layout) of a template
LAYOUT_DIRECTIVE = re.compile(r"{{!<\s+([A-Za-z0-9._\-/]+)\s*}}")


def declared_layout(source: str) -> str | None:
    """Return the layout named by a ``{{!< name}}`` directive, if any."""
    match = LAYOUT_DIRECTIVE.search(source)
    return match.group(1) if match else None


class CompiledTemplate:
    """Compiled template, immutable once created and owned by the cache.

    Example:
        >>> template = cache.compile(Path("/views/card.hbs"))
        >>> template.render({"name": "Ann"}, helpers, partials)
        '<b>Ann</b>'

    Attributes:
        path: Absolute template path
        source: Template source text
        declared_layout: Layout named in a ``{{!< ...}}`` directive, or None
    """

    __slots__ = ("_declared_layout", "_fn", "_path", "_source")

    def __init__(self, path: Path, source: str, fn: Callable[..., Any]):
        self._path = path
        self._source = source
        self._fn = fn
        self._declared_layout = declared_layout(source)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def source(self) -> str:
        return self._source

    @property
    def declared_layout(self) -> str | None:
        return self._declared_layout

    @property
    def fn(self) -> Callable[..., Any]:
        """The raw pybars callable (what gets registered as a partial)."""
        return self._fn

    def render(
        self,
        context: Mapping[str, Any],
        helpers: Mapping[str, Callable[..., Any]] | None = None,
        partials: Mapping[str, Callable[..., Any]] | None = None,
    ) -> str:
        """Render with ``context``.

        Placeholder helpers need an active render state; when called outside
        an engine render a fresh one is opened for this call only.

        Raises:
            RenderError: If a helper fails or a partial is missing
        """
        render_ctx = get_render_context()
        if render_ctx is None:
            with render_context(view_path=self._path) as render_ctx:
                return self._render(context, helpers, partials, render_ctx)
        return self._render(context, helpers, partials, render_ctx)

    def _render(
        self,
        context: Mapping[str, Any],
        helpers: Mapping[str, Callable[..., Any]] | None,
        partials: Mapping[str, Callable[..., Any]] | None,
        render_ctx: RenderContext,
    ) -> str:
        render_ctx.push(self._path)
        try:
            return as_text(self._fn(context, helpers=dict(helpers or {}), partials=dict(partials or {})))
        except ViewError:
            raise
        except Exception as e:
            message = str(e).strip() or type(e).__name__
            raise RenderError(message, template_path=self._path, template_stack=render_ctx.template_stack) from e

    def __repr__(self) -> str:
        return f"<CompiledTemplate {str(self._path)!r}>"
