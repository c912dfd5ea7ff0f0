"""Placeholder blocks: named regions in a layout filled from child templates.

A layout declares a region with the block helper and a view (or a partial
it includes) contributes content to it:

    layouts/main.hbs:
        <head>{{{block "pageStylesheets"}}}</head>

    home.hbs:
        {{#contentFor "pageStylesheets"}}
        <link rel="stylesheet" href="/css/home.css" />
        {{/contentFor}}

The view renders before its layout, so every contribution is in place when
the layout reads the block. Reading drains the block.

Registries are per render. The helpers find the active one through
`hbview.render_context`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

Producer = Callable[[Any], Any]


def as_text(value: Any) -> str:
    """Flatten a pybars result (a ``strlist`` or plain ``str``) to ``str``."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return "".join(value)


class PlaceholderRegistry:
    """Named, ordered content fragments for one page render.

    Example:
        >>> registry = PlaceholderRegistry()
        >>> registry.contribute("scripts", lambda ctx: "<script a>")
        >>> registry.contribute("scripts", lambda ctx: "<script b>")
        >>> registry.define("scripts")
        '<script a>\\n<script b>'
        >>> registry.define("scripts")
        ''
    """

    __slots__ = ("_content",)

    separator = "\n"

    def __init__(self) -> None:
        self._content: dict[str, list[str]] = {}

    def contribute(self, name: str, producer: Producer, context: Any = None) -> None:
        """Render ``producer`` with ``context`` and append it to block ``name``."""
        self._content.setdefault(name, []).append(as_text(producer(context)))

    def define(
        self,
        name: str,
        default: Producer | None = None,
        context: Any = None,
    ) -> str:
        """Drain and return the content of block ``name``.

        If the joined content is empty (nothing contributed, or only empty
        contributions) and ``default`` is given, its output is returned
        instead. The default is not stored.
        """
        content = self.separator.join(self._content.pop(name, ()))
        if content:
            return content
        if default is not None:
            return as_text(default(context))
        return ""

    def names(self) -> list[str]:
        """Blocks that currently hold undrained content."""
        return list(self._content)

    def __contains__(self, name: object) -> bool:
        return name in self._content

    def __len__(self) -> int:
        return len(self._content)


def _split_options(args: tuple[Any, ...]) -> tuple[dict[str, Any] | None, tuple[Any, ...]]:
    """Separate pybars block options from positional helper arguments.

    pybars calls ``{{helper "a"}}`` as ``helper(this, "a")`` and
    ``{{#helper "a"}}..{{/helper}}`` as ``helper(this, options, "a")``.
    """
    if args and isinstance(args[0], dict) and "fn" in args[0]:
        return args[0], args[1:]
    return None, args


def _active_registry() -> PlaceholderRegistry:
    from hbview.render_context import get_render_context_required

    return get_render_context_required().placeholders


def block(this: Any, *args: Any) -> str:
    """Handlebars helper reading a placeholder block.

    Usage:
        {{{block "pageStylesheets"}}}
        {{#block "sidebar"}}<p>Default sidebar</p>{{/block}}
    """
    options, args = _split_options(args)
    if not args:
        raise TypeError("block helper requires a block name")
    default = options["fn"] if options is not None else None
    return _active_registry().define(str(args[0]), default, this)


def content_for(this: Any, *args: Any) -> str:
    """Handlebars block helper contributing content to a placeholder.

    Usage:
        {{#contentFor "pageStylesheets"}}
        <link rel="stylesheet" href="{{cssUrl}}" />
        {{/contentFor}}
    """
    options, args = _split_options(args)
    if options is None or not args:
        raise TypeError("contentFor must be used as a block: {{#contentFor \"name\"}}")
    _active_registry().contribute(str(args[0]), options["fn"], this)
    return ""
