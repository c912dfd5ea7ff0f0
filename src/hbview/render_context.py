"""hbview RenderContext -- per-render state isolated from template data.

Handlebars helpers only receive the current data scope, so state that
belongs to one page render (placeholder content, the chain of templates
rendered so far) is carried in a ContextVar instead of being injected into
the user's context dict.

Benefits:
    - Placeholder content never leaks between concurrent renders
    - Clean user context (no internal key pollution)
    - Async-safe: each asyncio task sees its own RenderContext, and
      ``asyncio.to_thread`` copies the current context into the worker

"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from pathlib import Path

from hbview.helpers.placeholder import PlaceholderRegistry


@dataclass
class RenderContext:
    """Per-render state for one page.

    Thread Safety:
        ContextVars are task-local. Each render task has its own
        RenderContext instance.

    Attributes:
        view_path: The view being rendered (None for ad-hoc renders)
        placeholders: Block content contributed during this render
        template_stack: Templates rendered so far, innermost first
    """

    view_path: Path | None = None
    placeholders: PlaceholderRegistry = field(default_factory=PlaceholderRegistry)
    template_stack: list[Path] = field(default_factory=list)

    # Framework metadata (request id, csrf token, ...)
    _meta: dict[str, object] = field(default_factory=dict)

    def get_meta(self, key: str, default: object = None) -> object:
        """Get framework-specific metadata.

        Lets a host pass request details to custom helpers without putting
        them in the template data:

            async with async_render_context() as ctx:
                ctx.set_meta("csrf_token", session.csrf_token())
                html = await engine.render("form", data)
        """
        return self._meta.get(key, default)

    def set_meta(self, key: str, value: object) -> None:
        self._meta[key] = value

    def push(self, path: Path) -> None:
        """Record that ``path`` is about to be rendered."""
        self.template_stack.append(path)


# Module-level ContextVar
_render_context: ContextVar[RenderContext | None] = ContextVar(
    "hbview_render_context",
    default=None,
)


def get_render_context() -> RenderContext | None:
    """Get current render context (None if not in render)."""
    return _render_context.get()


def get_render_context_required() -> RenderContext:
    """Get current render context, raise if not in render.

    Raises:
        RuntimeError: If not in a render context
    """
    ctx = _render_context.get()
    if ctx is None:
        raise RuntimeError("Not in a render context")
    return ctx


@contextmanager
def render_context(
    view_path: Path | None = None,
    parent_meta: dict[str, object] | None = None,
) -> Iterator[RenderContext]:
    """Context manager for render-scoped state.

    Creates a new RenderContext and sets it as the current context for the
    duration of the with block, restoring the previous one on exit.

    Example:
        with render_context() as ctx:
            template.render({"title": "Home"}, helpers, partials)
            leftover = ctx.placeholders.names()
    """
    ctx = RenderContext(
        view_path=view_path,
        _meta=parent_meta.copy() if parent_meta else {},
    )
    token: Token[RenderContext | None] = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)


@asynccontextmanager
async def async_render_context(
    view_path: Path | None = None,
    parent_meta: dict[str, object] | None = None,
) -> AsyncIterator[RenderContext]:
    """Async context manager for render-scoped state.

    Identical to render_context() but for use with ``async with``. When a
    context is already active (a host opened one to set metadata), its
    metadata is inherited.
    """
    if parent_meta is None:
        outer = _render_context.get()
        if outer is not None:
            parent_meta = outer._meta
    ctx = RenderContext(
        view_path=view_path,
        _meta=parent_meta.copy() if parent_meta else {},
    )
    token: Token[RenderContext | None] = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)
