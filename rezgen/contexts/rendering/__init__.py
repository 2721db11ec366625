"""
Rendering Context

Responsibilities:
- Maps output formats to generators (html, txt, md, pdf)
- Drives theme materialization for a requested output file
- Rasterizes HTML to PDF through wkhtmltopdf, PhantomJS, WeasyPrint or Chromium
- Reports engine failures through the caller's error handler

Owns: Format selection, PDF engine dispatch, external process execution
Never: Modifies theme content
"""

from rezgen.contexts.rendering.generators import (
    FormatGenerator,
    GenerationResult,
    format_from_path,
    generate,
    get_generator,
)
from rezgen.contexts.rendering.pdf_engines import (
    PdfEngine,
    PdfResult,
    intermediate_html_path,
    render_pdf,
    render_pdf_sync,
    resolve_pdf_engine,
    wkhtmltopdf_flags,
)

__all__ = [
    "FormatGenerator",
    "GenerationResult",
    "format_from_path",
    "generate",
    "get_generator",
    "PdfEngine",
    "PdfResult",
    "intermediate_html_path",
    "render_pdf",
    "render_pdf_sync",
    "resolve_pdf_engine",
    "wkhtmltopdf_flags",
]
