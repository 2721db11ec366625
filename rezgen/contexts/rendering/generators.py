"""
Format Generators

One FormatGenerator per output format. A generator names the theme format
whose templates it expands and an optional pre-save step:

- html: expand html templates, prettify the markup
- txt, md: expand and write as-is
- pdf: expand html templates, rasterize each one, write nothing else

generate() is the entry point: it resolves the theme, picks the generator
from the output file's extension and materializes the theme format next to
the output file.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from bs4 import BeautifulSoup
from bs4.element import PreformattedString, Tag
from markupsafe import escape

from rezgen.contexts.rendering.logger import log_generation_result, log_generation_start
from rezgen.contexts.rendering.pdf_engines import PdfResult, render_pdf_sync
from rezgen.contexts.templating.engines import resolve_engine
from rezgen.contexts.templating.exceptions import FormatNotSupportedError
from rezgen.contexts.templating.file_walker import MaterializeResult, SaveContext, materialize
from rezgen.contexts.templating.options import GenerationOptions
from rezgen.contexts.templating.theme import Theme, resolve_theme_path
from rezgen.utils.status import error_callback

# Collects PDF results produced while the hook runs
BeforeSave = Callable[[SaveContext, List[PdfResult]], Optional[str]]


@dataclass(frozen=True)
class FormatGenerator:
    """
    Attributes:
        output_format: Format the caller asks for (e.g., "pdf")
        template_format: Theme format whose manifest is expanded (e.g., "html")
        before_save: Optional post-processing of each expanded template
    """

    output_format: str
    template_format: str
    before_save: Optional[BeforeSave] = None


@dataclass
class GenerationResult:
    """
    Result of generate().

    Attributes:
        output_file: File the caller asked for
        format: Output format
        theme: Theme name
        files: What materialize() wrote, copied, linked and skipped
        pdf: One PdfResult per rasterized template (pdf format only)
    """

    output_file: Path
    format: str
    theme: str
    files: MaterializeResult
    pdf: List[PdfResult] = field(default_factory=list)

    @property
    def errors(self) -> List[str]:
        errors = [f"{path}: {message}" for path, _, message in self.files.failures]
        errors.extend(r.error for r in self.pdf if not r.success and r.error)
        return errors

    @property
    def success(self) -> bool:
        return (
            self.files.success
            and all(r.success for r in self.pdf)
            and self.output_file.exists()
        )


# Phrasing elements; line breaks around them would change the rendered text
INLINE_TAGS = frozenset(
    {"a", "abbr", "b", "br", "cite", "code", "em", "i", "img", "kbd", "mark",
     "q", "s", "small", "span", "strong", "sub", "sup", "time", "u"}
)
VERBATIM_TAGS = frozenset({"pre", "textarea", "script", "style"})


def _start_tag(tag: Tag) -> str:
    attrs = []
    for key, value in tag.attrs.items():
        if isinstance(value, list):
            value = " ".join(value)
        attrs.append(f' {key}="{escape(value or "")}"')
    return f"<{tag.name}{''.join(attrs)}>"


def _keeps_line(tag: Tag, inline: Iterable[str]) -> bool:
    """Whether tag must be serialized as parsed, without reindenting its children."""
    if tag.name in inline or tag.name in VERBATIM_TAGS or not tag.contents:
        return True
    for child in tag.children:
        if isinstance(child, Tag):
            if child.name in inline:
                return True
        elif not isinstance(child, PreformattedString) and child.strip():
            return True
    return False


def _pretty_lines(node: Tag, inline: Iterable[str], indent: str, depth: int = 0) -> Iterator[str]:
    pad = indent * depth
    for child in node.children:
        if isinstance(child, Tag):
            if _keeps_line(child, inline):
                yield pad + child.decode()
            else:
                yield pad + _start_tag(child)
                yield from _pretty_lines(child, inline, indent, depth + 1)
                yield f"{pad}</{child.name}>"
        else:
            text = child.output_ready().strip()
            if text:
                yield pad + text


def prettify_html(ctx: SaveContext, pdf_results: List[PdfResult]) -> Optional[str]:
    """
    Reindent HTML using the prettify options.

    Only whitespace between block elements is rewritten. An element holding
    text, an inline tag or a tag listed in unformatted is serialized exactly as
    parsed, so the rendered text does not change.
    """
    knobs = ctx.options.prettify
    if not knobs:
        return ctx.markup

    inline = INLINE_TAGS | set(knobs.get("unformatted", []))
    soup = BeautifulSoup(ctx.markup, "html.parser")
    indent = " " * knobs.get("indent_size", 2)
    return "\n".join(_pretty_lines(soup, inline, indent)) + "\n"


def rasterize_pdf(ctx: SaveContext, pdf_results: List[PdfResult]) -> Optional[str]:
    """Render HTML templates to PDF; other templates are written unchanged."""
    if ctx.entry.source is not None and ctx.entry.source.suffix.lower() not in (".html", ".htm"):
        return ctx.markup

    output_pdf = ctx.output_path.with_suffix(".pdf")
    on_error = error_callback(ctx.options.error_handler)
    pdf_results.append(render_pdf_sync(ctx.markup, output_pdf, ctx.options, on_error=on_error))
    return None


GENERATORS: Dict[str, FormatGenerator] = {
    "html": FormatGenerator("html", "html", prettify_html),
    "txt": FormatGenerator("txt", "txt"),
    "md": FormatGenerator("md", "md"),
    "pdf": FormatGenerator("pdf", "html", rasterize_pdf),
}

EXTENSION_FORMATS = {
    ".html": "html",
    ".htm": "html",
    ".txt": "txt",
    ".md": "md",
    ".pdf": "pdf",
}


def format_from_path(output_file: Path) -> str:
    """
    Raises:
        FormatNotSupportedError: If the extension maps to no format
    """
    suffix = Path(output_file).suffix.lower()
    if suffix not in EXTENSION_FORMATS:
        raise FormatNotSupportedError(suffix or str(output_file), EXTENSION_FORMATS.values())
    return EXTENSION_FORMATS[suffix]


def get_generator(fmt: str) -> FormatGenerator:
    """
    Raises:
        FormatNotSupportedError: If no generator handles fmt
    """
    if fmt not in GENERATORS:
        raise FormatNotSupportedError(fmt, GENERATORS.keys())
    return GENERATORS[fmt]


def generate(
    resume: Any,
    output_file: Path,
    options: GenerationOptions,
    fmt: Optional[str] = None,
    theme: Optional[Theme] = None,
) -> GenerationResult:
    """
    Generate one output file (plus its theme assets) from a resume.

    The first transform entry of the theme format becomes output_file; the
    remaining entries land beside it at their manifest paths.

    Args:
        resume: Resume data, passed to templates unmodified
        output_file: File to generate; its extension selects the format unless fmt is given
        options: Generation options for this run
        fmt: Explicit output format
        theme: Pre-loaded theme; resolved from options.theme when omitted

    Returns:
        GenerationResult with per-file and per-PDF outcomes

    Raises:
        ThemeNotFoundError: If the theme cannot be resolved (before any file is written)
        FormatNotSupportedError: If the format or the theme's manifest for it is missing
        UnknownEngineError: If the theme declares an unknown template engine
    """
    output_file = Path(output_file)
    generator = get_generator(fmt or format_from_path(output_file))

    if theme is None:
        theme = Theme.open(resolve_theme_path(options.theme))

    # Themes are written for a specific engine
    if theme.engine:
        options = options.with_overrides(engine=resolve_engine(theme.engine).value)

    log_generation_start(output_file, theme.name, generator.output_format)
    start_time = time.time()

    pdf_results: List[PdfResult] = []
    hook = None
    if generator.before_save is not None:
        def hook(ctx: SaveContext) -> Optional[str]:
            return generator.before_save(ctx, pdf_results)

    files = materialize(
        resume,
        theme,
        generator.template_format,
        output_file.parent,
        options,
        on_before_save=hook,
        output_file=output_file,
    )

    result = GenerationResult(
        output_file=output_file,
        format=generator.output_format,
        theme=theme.name,
        files=files,
        pdf=pdf_results,
    )
    log_generation_result(result, time.time() - start_time)
    return result
