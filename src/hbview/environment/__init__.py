"""hbview environment package -- engine, configuration, loading and caching.

Re-exports the public symbols so that ``from hbview.environment import
ViewEngine`` works without knowing the module layout.

"""

from hbview.environment.cache import TemplateCache
from hbview.environment.core import ViewEngine
from hbview.environment.exceptions import (
    CompileError,
    ConfigError,
    DuplicatePartialError,
    ErrorCode,
    LayoutCycleError,
    PartialLoadError,
    ReadError,
    RenderError,
    ViewError,
)
from hbview.environment.loaders import DictLoader, FileSystemLoader, Loader, template_path
from hbview.environment.options import ViewEngineOptions
from hbview.environment.partials import PartialLoader, partial_name
from hbview.environment.registry import HelperRegistry

__all__ = [
    "CompileError",
    "ConfigError",
    "DictLoader",
    "DuplicatePartialError",
    "ErrorCode",
    "FileSystemLoader",
    "HelperRegistry",
    "LayoutCycleError",
    "Loader",
    "PartialLoadError",
    "PartialLoader",
    "ReadError",
    "RenderError",
    "TemplateCache",
    "ViewEngine",
    "ViewEngineOptions",
    "ViewError",
    "partial_name",
    "template_path",
]
