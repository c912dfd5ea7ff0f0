"""Engine configuration.

`ViewEngineOptions` is a frozen dataclass; an engine reads it once at
construction. Options can be given as keyword arguments to `ViewEngine`
or loaded from a host configuration mapping with `from_mapping()`, which
also understands the camelCase names used by Express-style configs:

    >>> ViewEngineOptions.from_mapping({"defaultLayout": "site", "cacheTemplates": False})
    ViewEngineOptions(default_layout='site', ..., cache_templates=False, ...)

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields, replace
from typing import Any

from hbview.environment.exceptions import ConfigError

# Express-style option names accepted by from_mapping()
_CAMEL_CASE_NAMES = {
    "defaultLayout": "default_layout",
    "partialsFolder": "partials_folder",
    "layoutsFolder": "layouts_folder",
    "cacheTemplates": "cache_templates",
    "fileExtension": "file_extension",
    "preloadPartials": "preload_partials",
    "layoutDirectives": "layout_directives",
    "bodyField": "body_field",
    "blockHelperName": "block_helper_name",
    "contentHelperName": "content_helper_name",
}


@dataclass(frozen=True, slots=True)
class ViewEngineOptions:
    """Configuration for a `ViewEngine`.

    Attributes:
        default_layout: Layout used when a render names none (None disables)
        partials_folder: Folder (or folders) under the view root holding partials
        layouts_folder: Folder under the view root holding layouts
        cache_templates: Keep compiled templates for the process lifetime
        file_extension: Template file extension, without the dot
        preload_partials: Load partials when the engine is created rather
            than on the first render
        layout_directives: Honor ``{{!< name}}`` layout declarations
        body_field: Context key the rendered view is bound to in a layout
        block_helper_name: Helper name for reading placeholder blocks
        content_helper_name: Helper name for contributing placeholder content
    """

    default_layout: str | None = "main"
    partials_folder: str | Sequence[str] = "partials"
    layouts_folder: str = "layouts"
    cache_templates: bool = True
    file_extension: str = "hbs"
    preload_partials: bool = True
    layout_directives: bool = True
    body_field: str = "body"
    block_helper_name: str = "block"
    content_helper_name: str = "contentFor"

    def __post_init__(self) -> None:
        extension = self.file_extension.lstrip(".")
        if not extension:
            raise ConfigError("file_extension cannot be empty")
        object.__setattr__(self, "file_extension", extension)
        if not self.body_field:
            raise ConfigError("body_field cannot be empty")

    @property
    def partial_folders(self) -> tuple[str, ...]:
        """Partial folders as a tuple, whatever form was configured."""
        if isinstance(self.partials_folder, str):
            return (self.partials_folder,) if self.partials_folder else ()
        return tuple(self.partials_folder)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> ViewEngineOptions:
        """Build options from a configuration mapping.

        Raises:
            ConfigError: If the mapping contains an unknown option
        """
        return cls(**_normalize(mapping))

    def merged(self, overrides: Mapping[str, Any]) -> ViewEngineOptions:
        """Return a copy with ``overrides`` (snake_case or camelCase) applied."""
        if not overrides:
            return self
        return replace(self, **_normalize(overrides))


def _normalize(mapping: Mapping[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(ViewEngineOptions)}
    values: dict[str, Any] = {}
    for key, value in mapping.items():
        name = _CAMEL_CASE_NAMES.get(key, key)
        if name not in known:
            raise ConfigError(f"Unknown view engine option '{key}'")
        values[name] = value
    return values
