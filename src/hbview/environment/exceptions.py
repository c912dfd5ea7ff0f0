"""Exceptions for the hbview rendering engine.

Exception Hierarchy:
ViewError (base)
├── ConfigError               # Bad engine configuration (fatal at setup)
│   └── PartialLoadError      # Partial folder missing or a partial unusable
│       └── DuplicatePartialError
├── ReadError                 # Template file missing or unreadable
├── CompileError              # Malformed Handlebars source
└── RenderError               # Helper failure, missing partial, ...
    └── LayoutCycleError      # Layout chain loops back on itself

Per-request errors (ReadError, CompileError, RenderError) carry the path of
the template that failed so the host can log something actionable:

    ```
    HBV-RUN-001: The partial card could not be found
      --> views/home.hbs
      Template stack:
        • views/home.hbs
    ```

"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class ErrorCode(Enum):
    """Searchable error codes for hbview errors.

    Format: HBV-{CATEGORY}-{NUMBER}
    Categories: CFG (configuration), TPL (template loading), RUN (runtime)
    """

    # Configuration errors (HBV-CFG-xxx)
    INVALID_CONFIG = "HBV-CFG-001"
    PARTIAL_LOAD = "HBV-CFG-002"
    DUPLICATE_PARTIAL = "HBV-CFG-003"

    # Template loading errors (HBV-TPL-xxx)
    READ_ERROR = "HBV-TPL-001"
    COMPILE_ERROR = "HBV-TPL-002"

    # Runtime errors (HBV-RUN-xxx)
    RENDER_ERROR = "HBV-RUN-001"
    LAYOUT_CYCLE = "HBV-RUN-002"

    @property
    def category(self) -> str:
        """Error category (e.g., 'config', 'template', 'runtime')."""
        prefix = self.value.split("-")[1]
        return {
            "CFG": "config",
            "TPL": "template",
            "RUN": "runtime",
        }.get(prefix, "unknown")


class ViewError(Exception):
    """Base exception for all hbview errors.

    Enables broad exception handling in the host framework:

        >>> try:
        ...     html = await engine.render("home", context)
        ... except ViewError as e:
        ...     log.error(e.format_compact())

    Attributes:
        code: ErrorCode for searchable error identification.
        template_path: Template the error is attributed to, if any.
    """

    code: ErrorCode | None = None

    def __init__(self, message: str, *, template_path: Path | str | None = None):
        self.message = message
        self.template_path = Path(template_path) if template_path is not None else None
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.template_path is None:
            return self.message
        return f"[{self.template_path}] {self.message}"

    def format_compact(self) -> str:
        """Format error as a structured, human-readable summary."""
        parts: list[str] = []
        code_prefix = f"{self.code.value}: " if self.code else ""
        parts.append(f"{code_prefix}{self.message}")
        if self.template_path is not None:
            parts.append(f"  --> {self.template_path}")
        return "\n".join(parts)


class ConfigError(ViewError):
    """Invalid engine configuration.

    Raised synchronously while the engine is being set up, e.g. when the
    base view path is missing or an unknown option is supplied. Never
    recoverable by the engine itself.
    """

    code: ErrorCode | None = ErrorCode.INVALID_CONFIG


class PartialLoadError(ConfigError):
    """A partial folder could not be scanned or a partial could not be loaded.

    Attributes:
        folder: The configured partial folder being scanned.
    """

    code: ErrorCode | None = ErrorCode.PARTIAL_LOAD

    def __init__(
        self,
        message: str,
        *,
        folder: Path | str | None = None,
        template_path: Path | str | None = None,
    ):
        self.folder = Path(folder) if folder is not None else None
        super().__init__(message, template_path=template_path)

    def format_compact(self) -> str:
        text = super().format_compact()
        if self.folder is not None:
            text += f"\n  Folder: {self.folder}"
        return text


class DuplicatePartialError(PartialLoadError):
    """Two partial files derive the same partial name.

    Partial resolution order is not something templates should depend on,
    so a collision is reported instead of letting one file shadow another.
    """

    code: ErrorCode | None = ErrorCode.DUPLICATE_PARTIAL

    def __init__(
        self,
        name: str,
        first: Path,
        second: Path,
        *,
        folder: Path | str | None = None,
    ):
        self.name = name
        self.first = first
        self.second = second
        super().__init__(
            f"Partial '{name}' is defined by both {first} and {second}",
            folder=folder,
            template_path=second,
        )


class ReadError(ViewError):
    """Template source could not be read from its loader."""

    code: ErrorCode | None = ErrorCode.READ_ERROR


class CompileError(ViewError):
    """Template source is not valid Handlebars."""

    code: ErrorCode | None = ErrorCode.COMPILE_ERROR


class RenderError(ViewError):
    """Render-time failure with the template it happened in.

    Attributes:
        template_stack: Paths rendered so far in this request (view first,
            then each layout), for diagnostics.
    """

    code: ErrorCode | None = ErrorCode.RENDER_ERROR

    def __init__(
        self,
        message: str,
        *,
        template_path: Path | str | None = None,
        template_stack: list[Path] | None = None,
    ):
        self.template_stack = list(template_stack or [])
        super().__init__(message, template_path=template_path)

    def format_compact(self) -> str:
        text = super().format_compact()
        if self.template_stack:
            lines = ["  Template stack:"]
            lines.extend(f"    • {path}" for path in self.template_stack)
            text += "\n" + "\n".join(lines)
        return text


class LayoutCycleError(RenderError):
    """A layout declares a parent that is already part of its own chain."""

    code: ErrorCode | None = ErrorCode.LAYOUT_CYCLE
