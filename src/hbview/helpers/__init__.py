"""Built-in Handlebars helpers registered on every engine."""

from hbview.helpers.each import IterationRecord, each, iteration_records
from hbview.helpers.placeholder import PlaceholderRegistry, block, content_for

__all__ = [
    "IterationRecord",
    "PlaceholderRegistry",
    "block",
    "content_for",
    "each",
    "iteration_records",
]
