"""
Default values for generation options.

Provides the built-in layer that build_options() merges config files and
caller overrides onto. Everything here is plain data so it can be handed to
OmegaConf; callables (filters, error handlers) are merged separately.
"""

from typing import Any, Dict

# Sentinel entities used by the whitespace freezer
NEWLINE_SYMBOL = "&newl;"
RETURN_SYMBOL = "&retn;"

DEFAULT_TEMPLATE_ENGINE = "jinja"
DEFAULT_PDF_ENGINE = "wkhtmltopdf"

# Delimiters handed to the Jinja2 environment
DEFAULT_DELIMITERS = {
    "variable_start": "{{",
    "variable_end": "}}",
    "block_start": "{%",
    "block_end": "%}",
    "comment_start": "{#",
    "comment_end": "#}",
}

# HTML output formatting knobs
DEFAULT_PRETTIFY = {
    "indent_size": 2,
    "unformatted": ["em", "strong", "a"],
    "max_char": 80,
}

# wkhtmltopdf flags applied before caller overrides
DEFAULT_WKHTMLTOPDF_OPTIONS = {
    "margin-bottom": "10mm",
    "margin-top": "10mm",
}

# Playwright page.pdf() keywords applied before caller overrides
DEFAULT_CHROME_PDF_OPTIONS = {
    "landscape": False,
    "display_header_footer": False,
    "print_background": False,
    "format": "A4",
    "scale": 1,
    "width": "8.5in",
    "height": "11in",
    "page_ranges": "",
    "margin": {
        "top": "0.4in",
        "bottom": "0.56in",
        "left": "0.4in",
        "right": "0.4in",
    },
}


def get_default_options() -> Dict[str, Any]:
    """
    Get the complete default option tree.

    Returns a fresh dict on every call so callers may merge into it freely.

    Returns:
        Dict with every recognized option key
    """
    return {
        "theme": "modern",
        "engine": DEFAULT_TEMPLATE_ENGINE,
        "keep_breaks": True,
        "freeze_breaks": False,
        "newline_symbol": NEWLINE_SYMBOL,
        "return_symbol": RETURN_SYMBOL,
        "template": DEFAULT_DELIMITERS.copy(),
        "prettify": {**DEFAULT_PRETTIFY, "unformatted": list(DEFAULT_PRETTIFY["unformatted"])},
        "pdf": DEFAULT_PDF_ENGINE,
        "wkhtmltopdf": {},
        "chrome": {
            "launch": {},
            "pdf": {},
        },
    }
