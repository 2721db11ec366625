"""
Generation Options

Builds the immutable option set used for one generation run. Layers are merged
in order, later layers overriding earlier ones:

    built-in defaults  <-  optional YAML config file  <-  caller overrides

Examples:
    >>> opts = build_options({"theme": "compact", "pdf": "weasyprint"})
    >>> opts = build_options({"wkhtmltopdf": {"margin-top": "5mm"}}, config_path=Path("rezgen.yaml"))
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from omegaconf import OmegaConf

from rezgen.contexts.templating.defaults import get_default_options
from rezgen.contexts.templating.engines import resolve_engine
from rezgen.contexts.templating.filters import BUILTIN_FILTERS
from rezgen.utils.status import ErrorHandler

# Keys consumed by GenerationOptions fields; anything else lands in extras
RECOGNIZED_KEYS = {
    "theme",
    "engine",
    "keep_breaks",
    "freeze_breaks",
    "newline_symbol",
    "return_symbol",
    "template",
    "filters",
    "prettify",
    "pdf",
    "wkhtmltopdf",
    "chrome",
    "error_handler",
}


@dataclass(frozen=True)
class TemplateDelimiters:
    """Delimiter strings for interpolation, statements and comments."""

    variable_start: str = "{{"
    variable_end: str = "}}"
    block_start: str = "{%"
    block_end: str = "%}"
    comment_start: str = "{#"
    comment_end: str = "#}"


@dataclass(frozen=True)
class GenerationOptions:
    """
    Immutable configuration for a single generation run.

    Attributes:
        theme: Theme name or path
        engine: Template engine name (validated on construction by build_options)
        keep_breaks: Preserve template whitespace verbatim
        freeze_breaks: Swap line breaks for sentinels around template expansion
        newline_symbol: Sentinel for \\n
        return_symbol: Sentinel for \\r
        template: Template delimiters
        filters: Filter name -> callable, built-ins plus caller extras
        prettify: HTML formatting knobs, or None to leave markup untouched
        pdf: PDF engine name
        wkhtmltopdf: Extra wkhtmltopdf flags (without leading dashes)
        chrome_launch: Keyword arguments for browser launch
        chrome_pdf: Keyword arguments for page.pdf()
        error_handler: Optional object exposing err(status, cause)
        extras: Unrecognized options, passed through untouched
    """

    theme: str = "modern"
    engine: str = "jinja"
    keep_breaks: bool = True
    freeze_breaks: bool = False
    newline_symbol: str = "&newl;"
    return_symbol: str = "&retn;"
    template: TemplateDelimiters = field(default_factory=TemplateDelimiters)
    filters: Mapping[str, Callable] = field(default_factory=lambda: MappingProxyType(dict(BUILTIN_FILTERS)))
    prettify: Optional[Mapping[str, Any]] = None
    pdf: str = "wkhtmltopdf"
    wkhtmltopdf: Mapping[str, Any] = field(default_factory=dict)
    chrome_launch: Mapping[str, Any] = field(default_factory=dict)
    chrome_pdf: Mapping[str, Any] = field(default_factory=dict)
    error_handler: Optional[ErrorHandler] = None
    extras: Mapping[str, Any] = field(default_factory=dict)

    def with_overrides(self, **changes) -> "GenerationOptions":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


def _split_callables(overrides: Mapping[str, Any]):
    """Separate values OmegaConf cannot hold (filters, handlers) from plain data."""
    data = dict(overrides)
    extra_filters = dict(data.pop("filters", None) or {})
    error_handler = data.pop("error_handler", None)
    return data, extra_filters, error_handler


def build_options(
    overrides: Optional[Mapping[str, Any]] = None,
    config_path: Optional[Path] = None,
) -> GenerationOptions:
    """
    Merge defaults, an optional config file and caller overrides into options.

    Neither the defaults nor the overrides are modified; the result is a new
    frozen value.

    Args:
        overrides: Caller-supplied option mapping
        config_path: Optional YAML file with option values

    Returns:
        GenerationOptions for one run

    Raises:
        UnknownEngineError: If the template engine name is not recognized
    """
    data, extra_filters, error_handler = _split_callables(overrides or {})

    # A boolean prettify toggles the default knobs instead of merging into them
    prettify_off = False
    if "prettify" in data and not isinstance(data["prettify"], Mapping):
        prettify_off = not data.pop("prettify")

    layers = [OmegaConf.create(get_default_options())]
    if config_path is not None:
        layers.append(OmegaConf.load(config_path))
    layers.append(OmegaConf.create(data))

    merged: Dict[str, Any] = OmegaConf.to_container(OmegaConf.merge(*layers), resolve=True)

    engine = resolve_engine(merged["engine"]).value
    chrome = merged.get("chrome") or {}

    return GenerationOptions(
        theme=str(merged["theme"]),
        engine=engine,
        keep_breaks=bool(merged["keep_breaks"]),
        freeze_breaks=bool(merged["freeze_breaks"]),
        newline_symbol=merged["newline_symbol"],
        return_symbol=merged["return_symbol"],
        template=TemplateDelimiters(**merged["template"]),
        filters=MappingProxyType({**BUILTIN_FILTERS, **extra_filters}),
        prettify=None if prettify_off else MappingProxyType(merged["prettify"]),
        pdf=str(merged["pdf"]),
        wkhtmltopdf=MappingProxyType(merged.get("wkhtmltopdf") or {}),
        chrome_launch=MappingProxyType(chrome.get("launch") or {}),
        chrome_pdf=MappingProxyType(chrome.get("pdf") or {}),
        error_handler=error_handler,
        extras=MappingProxyType({k: v for k, v in merged.items() if k not in RECOGNIZED_KEYS}),
    )
