"""Custom exceptions for templating and rendering with status codes."""

from pathlib import Path
from typing import Iterable, Optional

from rezgen.utils.status import Status


class RezgenError(Exception):
    """Base class for errors that carry a status code."""

    status = Status.SUCCESS

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ThemeNotFoundError(RezgenError):
    """
    Raised when a theme name or path cannot be resolved to a local directory.

    Attributes:
        theme: The name or path that was requested
        searched: Locations that were checked
    """

    status = Status.THEME_NOT_FOUND

    def __init__(self, theme: str, searched: Iterable[Path] = ()):
        self.theme = theme
        self.searched = list(searched)

        parts = [f"Theme not found: {theme}"]
        if self.searched:
            parts.append("Searched: " + ", ".join(str(p) for p in self.searched))

        super().__init__("\n".join(parts))


class FormatNotSupportedError(RezgenError):
    """Raised when a theme or generator has no support for an output format."""

    status = Status.FORMAT_NOT_SUPPORTED

    def __init__(self, fmt: str, available: Iterable[str] = ()):
        self.format = fmt
        self.available = sorted(available)
        super().__init__(f"Format '{fmt}' not supported. Available formats: {self.available}")


class UnknownEngineError(RezgenError, ValueError):
    """Raised when a template engine name is not one of the known variants."""

    status = Status.TEMPLATE_ENGINE_UNKNOWN

    def __init__(self, name: str, available: Iterable[str] = ()):
        self.name = name
        self.available = list(available)
        super().__init__(f"Unknown template engine '{name}'. Available engines: {self.available}")


class UnknownPdfEngineError(RezgenError, ValueError):
    """Raised when a PDF engine name is not one of the known back-ends."""

    status = Status.PDF_ENGINE_UNKNOWN

    def __init__(self, name: str, available: Iterable[str] = ()):
        self.name = name
        self.available = list(available)
        super().__init__(f"Unknown PDF engine '{name}'. Available engines: {self.available}")


class PdfGenerationError(RezgenError):
    """
    Raised (or reported) when a PDF engine fails to produce output.

    Attributes:
        engine: Name of the PDF engine
        returncode: Exit code of the engine process, when it ran
        stderr: Captured standard error, when available
    """

    status = Status.PDF_GENERATION

    def __init__(
        self,
        message: str,
        engine: Optional[str] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        self.engine = engine
        self.returncode = returncode
        self.stderr = stderr

        parts = [message]
        if returncode is not None:
            parts.append(f"Exit code: {returncode}")
        if stderr:
            # Last lines usually carry the actual error
            tail = "\n".join(stderr.strip().splitlines()[-5:])
            parts.append(f"Engine output:\n{tail}")

        super().__init__("\n".join(parts))


class TemplateRenderError(RezgenError):
    """
    Exception raised when template expansion fails.

    Attributes:
        message: Error description
        template_path: Path to the template file, when known
        original_error: The original Jinja2 error
    """

    status = Status.TEMPLATE_RENDER

    def __init__(
        self,
        message: str,
        template_path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.template_path = template_path
        self.original_error = original_error

        parts = [message]

        if template_path:
            parts.append(f"\nTemplate: {template_path}")

        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))


class InvalidThemeManifestError(ValueError):
    """
    Raised when a theme.yaml file is missing required fields or has bad values.
    """

    pass
