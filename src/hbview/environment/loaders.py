"""Template loaders for the hbview engine.

Loaders provide template source to the template cache. Unlike name-based
loaders, hbview loaders are addressed by absolute template path: the
engine resolves view, layout and partial names to paths first, and the
path is the cache key.

Built-in Loaders:
- `FileSystemLoader`: Read templates from disk
- `DictLoader`: Serve templates from an in-memory mapping (testing/embedded)

Custom Loaders:
Implement the Loader protocol:
    ```python
    class DatabaseLoader:
        def get_source(self, path: Path) -> str:
            row = db.query("SELECT source FROM views WHERE path = ?", str(path))
            if not row:
                raise ReadError("Template not found", template_path=path)
            return row.source

        def list_templates(self, folder: Path, extension: str) -> list[Path]:
            return [Path(r.path) for r in db.query(...)]
    ```

Thread-Safety:
`get_source()` runs in worker threads (via ``asyncio.to_thread``) so
loaders must tolerate concurrent calls. Both built-in loaders only read.

"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol

from hbview.environment.exceptions import ReadError


def template_path(path: str | os.PathLike[str]) -> Path:
    """Normalize a path into a template cache key.

    Absolute, with ``.`` and ``..`` segments collapsed. Symlinks are left
    alone so a path never changes meaning between calls.
    """
    return Path(os.path.abspath(path))


class Loader(Protocol):
    def get_source(self, path: Path) -> str: ...

    def list_templates(self, folder: Path, extension: str) -> list[Path]: ...


class FileSystemLoader:
    """Load template source from the filesystem.

    Attributes:
        _encoding: File encoding (default: utf-8)

    Example:
            >>> loader = FileSystemLoader()
            >>> loader.get_source(Path("/srv/views/home.hbs"))
            '<h1>{{title}}</h1>'
            >>> loader.list_templates(Path("/srv/views/partials"), "hbs")
        [PosixPath('/srv/views/partials/card.hbs'), ...]

    Raises:
        ReadError: If a file or folder cannot be read

    """

    __slots__ = ("_encoding",)

    def __init__(self, encoding: str = "utf-8"):
        self._encoding = encoding

    def get_source(self, path: Path) -> str:
        """Read template source from disk."""
        try:
            return path.read_text(self._encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(f"Cannot read template: {e}", template_path=path) from e

    def list_templates(self, folder: Path, extension: str) -> list[Path]:
        """List template files below ``folder`` (recursively), sorted."""
        if not folder.is_dir():
            raise ReadError("Template folder does not exist", template_path=folder)
        try:
            return sorted(p for p in folder.rglob(f"*.{extension}") if p.is_file())
        except OSError as e:
            raise ReadError(f"Cannot list templates: {e}", template_path=folder) from e


class DictLoader:
    """Serve template source from an in-memory mapping.

    Maps template paths to source strings. Keys are normalized with
    `template_path()`, so ``"/views/home.hbs"`` and
    ``"/views/./home.hbs"`` address the same template.

    Example:
            >>> loader = DictLoader({
            ...     "/views/layouts/main.hbs": "<main>{{{body}}}</main>",
            ...     "/views/home.hbs": "Hi",
            ... })
            >>> engine = ViewEngine("/views", loader=loader, partials_folder=())
            >>> await engine.render("home")
            '<main>Hi</main>'

    Raises:
        ReadError: If a path is not in the mapping

    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: dict[str, str]):
        self._mapping = {template_path(k): v for k, v in mapping.items()}

    def get_source(self, path: Path) -> str:
        try:
            return self._mapping[path]
        except KeyError:
            raise ReadError("Template not found", template_path=path) from None

    def list_templates(self, folder: Path, extension: str) -> list[Path]:
        matches = sorted(
            path
            for path in self._mapping
            if path.is_relative_to(folder) and path.suffix == f".{extension}"
        )
        if not matches and not any(p.is_relative_to(folder) for p in self._mapping):
            raise ReadError("Template folder does not exist", template_path=folder)
        return matches
