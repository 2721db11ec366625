"""
Template Engines

Closed set of template-expansion back-ends. Every variant has the signature

    (resume, template_source, fmt, css_info, options) -> str

and is looked up through resolve_engine(), which rejects unknown names.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from jinja2 import ChainableUndefined, Environment, TemplateError
from jinja2.sandbox import SandboxedEnvironment

from rezgen.contexts.templating.exceptions import TemplateRenderError, UnknownEngineError

if TYPE_CHECKING:
    from rezgen.contexts.templating.options import GenerationOptions


@dataclass(frozen=True)
class CssInfo:
    """Stylesheet attached to a manifest entry: where it lives and its text."""

    path: Optional[Path] = None
    data: Optional[str] = None


class TemplateEngine(str, Enum):
    JINJA = "jinja"
    SANDBOXED = "sandboxed"


def resolve_engine(name: str) -> TemplateEngine:
    """
    Map an engine name to its variant.

    Raises:
        UnknownEngineError: If no variant has that name
    """
    try:
        return TemplateEngine(name)
    except ValueError:
        raise UnknownEngineError(name, [e.value for e in TemplateEngine]) from None


def _environment_kwargs(options: "GenerationOptions") -> Dict[str, Any]:
    delims = options.template
    return dict(
        variable_start_string=delims.variable_start,
        variable_end_string=delims.variable_end,
        block_start_string=delims.block_start,
        block_end_string=delims.block_end,
        comment_start_string=delims.comment_start,
        comment_end_string=delims.comment_end,
        # Optional resume fields are common; r.basics.missing renders empty
        undefined=ChainableUndefined,
        trim_blocks=not options.keep_breaks,
        lstrip_blocks=not options.keep_breaks,
        keep_trailing_newline=options.keep_breaks,
    )


def _render(
    env: Environment,
    resume: Any,
    template_source: str,
    fmt: str,
    css_info: Optional[CssInfo],
    options: "GenerationOptions",
) -> str:
    env.filters.update(options.filters)
    try:
        template = env.from_string(template_source)
        return template.render(
            r=resume,
            resume=resume,
            format=fmt,
            css=css_info or CssInfo(),
            filters=options.filters,
            opts=options,
        )
    except TemplateError as e:
        raise TemplateRenderError(f"Template expansion failed for format '{fmt}'", original_error=e) from e


def render_jinja(resume, template_source, fmt, css_info, options) -> str:
    """Expand with a standard Jinja2 environment."""
    env = Environment(**_environment_kwargs(options))
    return _render(env, resume, template_source, fmt, css_info, options)


def render_sandboxed(resume, template_source, fmt, css_info, options) -> str:
    """Expand with a sandboxed Jinja2 environment for untrusted themes."""
    env = SandboxedEnvironment(**_environment_kwargs(options))
    return _render(env, resume, template_source, fmt, css_info, options)


ENGINES: Dict[TemplateEngine, Callable[..., str]] = {
    TemplateEngine.JINJA: render_jinja,
    TemplateEngine.SANDBOXED: render_sandboxed,
}
