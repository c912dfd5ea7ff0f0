"""Layout selection and layout-chain resolution.

Layout selection order for one render:

1. ``context["layout"]`` when the key is present. ``None``, ``False`` and
   ``""`` mean "no layout" and suppress everything below.
2. A layout declared by the view itself with ``{{!< name}}``.
3. The configured default layout.

A layout may declare a parent the same way, forming a chain:

    layouts/page.hbs:   {{!< site}}<article>{{{body}}}</article>
    layouts/site.hbs:   <html><body>{{{body}}}</body></html>

Rendering ``home`` with layout ``page`` yields the chain ``[page, site]``;
the view output becomes ``page``'s body and ``page``'s output becomes
``site``'s body.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from hbview.environment.exceptions import LayoutCycleError, RenderError
from hbview.environment.loaders import template_path
from hbview.template.core import CompiledTemplate

if TYPE_CHECKING:
    from hbview.environment.cache import TemplateCache
    from hbview.environment.options import ViewEngineOptions

logger = logging.getLogger(__name__)

# Value of context["layout"] that renders a view without any layout
NO_LAYOUT = None


def add_extension(name: str, extension: str) -> str:
    """Append ``.extension`` to ``name`` unless it already ends with it."""
    if not name or name.endswith(f".{extension}"):
        return name
    return f"{name}.{extension}"


class LayoutResolver:
    """Resolve the chain of layouts wrapping a view.

    Attributes:
        layouts_dir: Absolute path of the layouts folder
    """

    __slots__ = ("_cache", "_options", "layouts_dir")

    def __init__(self, view_root: Path, options: ViewEngineOptions, cache: TemplateCache):
        self._options = options
        self._cache = cache
        self.layouts_dir = template_path(view_root / options.layouts_folder)

    def select(self, context: Mapping[str, Any], view: CompiledTemplate) -> str | None:
        """Pick the layout name for a render, or None for no layout.

        Raises:
            RenderError: If ``context["layout"]`` is set to something other
                than a name or a falsy value
        """
        if "layout" in context:
            layout = context["layout"]
            if not layout:
                return None
            if not isinstance(layout, str):
                raise RenderError(
                    f"Layout must be a layout name or None, got {type(layout).__name__}",
                    template_path=view.path,
                    template_stack=[view.path],
                )
            return layout
        if self._options.layout_directives and view.declared_layout:
            return view.declared_layout
        return self._options.default_layout or None

    def resolve_path(self, name: str, relative_to: Path | None = None) -> Path:
        """Map a layout name to its template path.

        Names starting with ``.`` are relative to the directory of the
        template that named them; everything else lives in the layouts
        folder.
        """
        name = add_extension(name, self._options.file_extension)
        if name.startswith(".") and relative_to is not None:
            return template_path(relative_to.parent / name)
        return template_path(self.layouts_dir / name)

    async def chain(self, name: str, relative_to: Path | None = None) -> list[CompiledTemplate]:
        """Load ``name`` and every parent it declares, innermost first.

        Raises:
            LayoutCycleError: If a layout is reached twice
            ReadError, CompileError: From loading any layout in the chain
        """
        layouts: list[CompiledTemplate] = []
        seen: list[Path] = []
        path: Path | None = self.resolve_path(name, relative_to)
        while path is not None:
            if path in seen:
                raise LayoutCycleError(
                    f"Layout chain loops back to {path.name}: "
                    + " -> ".join(p.name for p in [*seen, path]),
                    template_path=seen[-1],
                    template_stack=seen,
                )
            seen.append(path)
            layout = await self._cache.get_or_compile(path)
            layouts.append(layout)
            parent = layout.declared_layout if self._options.layout_directives else None
            path = self.resolve_path(parent, layout.path) if parent else None

        logger.debug(f"Layout chain for {name}: {[p.name for p in seen]}")
        return layouts
