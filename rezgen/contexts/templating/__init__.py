"""
Templating Context

Responsibilities:
- Builds the immutable generation options for a run
- Loads theme manifests and resolves theme names to directories
- Expands templates through the configured engine (with line break freezing)
- Materializes theme files, copies and symlinks into an output directory

Owns: Options, theme model, template expansion, file materialization
Never: Invokes PDF engines
"""

from rezgen.contexts.templating.engines import CssInfo, TemplateEngine, resolve_engine
from rezgen.contexts.templating.file_walker import (
    LinkType,
    MaterializeResult,
    SaveContext,
    link_type,
    materialize,
)
from rezgen.contexts.templating.invoker import expand
from rezgen.contexts.templating.options import GenerationOptions, TemplateDelimiters, build_options
from rezgen.contexts.templating.theme import (
    FileAction,
    ManifestEntry,
    Theme,
    ThemeFormat,
    list_themes,
    resolve_theme_path,
)
from rezgen.contexts.templating.whitespace import freeze, unfreeze

__all__ = [
    # Options
    "GenerationOptions",
    "TemplateDelimiters",
    "build_options",
    # Expansion
    "CssInfo",
    "TemplateEngine",
    "resolve_engine",
    "expand",
    "freeze",
    "unfreeze",
    # Themes
    "FileAction",
    "ManifestEntry",
    "Theme",
    "ThemeFormat",
    "list_themes",
    "resolve_theme_path",
    # Materialization
    "LinkType",
    "MaterializeResult",
    "SaveContext",
    "link_type",
    "materialize",
]
