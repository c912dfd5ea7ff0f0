"""hbview template package -- compiled templates and layout resolution."""

from hbview.template.core import CompiledTemplate, declared_layout
from hbview.template.layout import NO_LAYOUT, LayoutResolver, add_extension

__all__ = [
    "NO_LAYOUT",
    "CompiledTemplate",
    "LayoutResolver",
    "add_extension",
    "declared_layout",
]
