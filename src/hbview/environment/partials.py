"""Partial discovery and registration.

Partials live in one or more folders under the view root. Every file with
the template extension, at any depth, becomes a partial named after its
path relative to the folder, extension stripped:

    views/partials/card.hbs          -> card
    views/partials/forms/input.hbs   -> forms/input

Partials are compiled eagerly, through the template cache, before any
request renders.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePath

from hbview.environment.cache import TemplateCache
from hbview.environment.exceptions import DuplicatePartialError, PartialLoadError, ReadError, ViewError
from hbview.environment.loaders import Loader, template_path
from hbview.template.core import CompiledTemplate

logger = logging.getLogger(__name__)


def partial_name(relative_path: PurePath | str, extension: str) -> str:
    """Derive the partial name for a file path relative to its partial folder.

    Example:
        >>> partial_name("forms/input.hbs", "hbs")
        'forms/input'
        >>> partial_name(PureWindowsPath("forms\\\\input.hbs"), "hbs")
        'forms/input'
    """
    path = PurePath(relative_path)
    parts = list(path.parts)
    suffix = f".{extension}"
    stem = parts[-1]
    if stem.endswith(suffix):
        stem = stem[: -len(suffix)]
    parts[-1] = stem
    return "/".join(p.replace("\\", "/") for p in parts)


class PartialLoader:
    """Scan partial folders and compile every partial they contain.

    Example:
        >>> loader = PartialLoader(FileSystemLoader(), cache, "hbs")
        >>> partials = loader.load(Path("/srv/views"), "partials")
        >>> sorted(partials)
        ['card', 'forms/input']
    """

    __slots__ = ("_cache", "_extension", "_loader")

    def __init__(self, loader: Loader, cache: TemplateCache, extension: str):
        self._loader = loader
        self._cache = cache
        self._extension = extension

    def load(self, base_path: Path, *folders: str) -> dict[str, CompiledTemplate]:
        """Compile all partials below ``base_path/<folder>`` for each folder.

        Returns a new mapping; nothing is installed until the whole load
        succeeds.

        Raises:
            PartialLoadError: If a folder is missing or a partial fails to
                read or compile
            DuplicatePartialError: If two files derive the same name
        """
        partials: dict[str, CompiledTemplate] = {}
        for folder in folders:
            root = template_path(base_path / folder)
            try:
                files = self._loader.list_templates(root, self._extension)
            except ReadError as e:
                raise PartialLoadError(
                    f"Cannot scan partial folder: {e.message}", folder=root
                ) from e

            for path in files:
                name = partial_name(path.relative_to(root), self._extension)
                if name in partials:
                    raise DuplicatePartialError(name, partials[name].path, path, folder=root)
                try:
                    partials[name] = self._cache.compile(path)
                except ViewError as e:
                    raise PartialLoadError(
                        f"Cannot load partial '{name}': {e.message}",
                        folder=root,
                        template_path=path,
                    ) from e
            logger.info(f"Loaded {len(files)} partial(s) from {root}")
        return partials
