"""hbview -- Handlebars views with layouts, partials and placeholder blocks.

An adapter between a web framework and the Handlebars templating language
(evaluated by pybars). It turns a view name into a fully rendered page:
the view is rendered, then wrapped in its layout (and the layout's parents),
with partials resolved by name and placeholder blocks filled from content
the view contributed.

Quickstart:
    >>> from hbview import ViewEngine
    >>> engine = ViewEngine("views")
    >>> html = await engine.render("home", {"title": "Welcome"})

Views folder:
    views/
      home.hbs              # view: {{#contentFor "head"}}..{{/contentFor}}<h1>{{title}}</h1>
      layouts/main.hbs      # default layout: <head>{{{block "head"}}}</head>{{{body}}}
      partials/card.hbs     # partial: {{> card}}
      partials/forms/input.hbs  # partial: {{> forms/input}}

Selecting a layout:
    >>> await engine.render("home", {"layout": "print"})   # layouts/print.hbs
    >>> await engine.render("home", {"layout": None})      # no layout

Concurrency:
Rendering is asyncio-native. File reads run in worker threads; concurrent
first requests for the same template share one read and compile.
Placeholder content is scoped to a single render, so concurrent pages never
see each other's blocks.

"""

from hbview.environment import (
    CompileError,
    ConfigError,
    DictLoader,
    DuplicatePartialError,
    ErrorCode,
    FileSystemLoader,
    LayoutCycleError,
    PartialLoadError,
    ReadError,
    RenderError,
    TemplateCache,
    ViewEngine,
    ViewEngineOptions,
    ViewError,
)
from hbview.helpers import IterationRecord, PlaceholderRegistry
from hbview.render_context import (
    RenderContext,
    async_render_context,
    get_render_context,
    render_context,
)
from hbview.template import NO_LAYOUT, CompiledTemplate

__version__ = "0.1.0"

__all__ = [
    "NO_LAYOUT",
    "CompileError",
    "CompiledTemplate",
    "ConfigError",
    "DictLoader",
    "DuplicatePartialError",
    "ErrorCode",
    "FileSystemLoader",
    "IterationRecord",
    "LayoutCycleError",
    "PartialLoadError",
    "PlaceholderRegistry",
    "ReadError",
    "RenderContext",
    "RenderError",
    "TemplateCache",
    "ViewEngine",
    "ViewEngineOptions",
    "ViewError",
    "__version__",
    "async_render_context",
    "get_render_context",
    "render_context",
]
