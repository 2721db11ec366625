"""
Template Invoker

Runs one template through the configured engine, bracketed by line break
freezing when the options ask for it.
"""

from typing import Any, Optional

from rezgen.contexts.templating.engines import ENGINES, CssInfo, resolve_engine
from rezgen.contexts.templating.options import GenerationOptions
from rezgen.contexts.templating.whitespace import freeze, unfreeze


def expand(
    resume: Any,
    template_source: str,
    fmt: str,
    css_info: Optional[CssInfo],
    options: GenerationOptions,
) -> str:
    """
    Expand a template against a resume object.

    Args:
        resume: Resume data, passed to the engine unmodified
        template_source: Template text
        fmt: Output format name (e.g., "html", "txt")
        css_info: Stylesheet associated with the template, if any
        options: Generation options for this run

    Returns:
        Generated markup

    Raises:
        UnknownEngineError: If options name an unknown engine
        TemplateRenderError: If the engine fails
    """
    engine = ENGINES[resolve_engine(options.engine)]

    if options.freeze_breaks:
        template_source = freeze(template_source, options.newline_symbol, options.return_symbol)

    result = engine(resume, template_source, fmt, css_info, options)

    if options.freeze_breaks:
        result = unfreeze(result, options.newline_symbol, options.return_symbol)

    return result
